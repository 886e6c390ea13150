"""玩家模型 - 双人对局的玩家数据结构"""

from dataclasses import dataclass, field
from typing import List, Optional

from threecards.engine.card import Card
from threecards.engine.hand_type import HandResult
from threecards.engine.hand_evaluator import evaluate_hand


@dataclass
class Player:
    """一个玩家"""
    id: int                          # 玩家编号 1/2
    name: str                        # 显示名
    hand: List[Card] = field(default_factory=list)
    score: int = 0                   # 累计得分（洗牌时清零）

    @property
    def hand_size(self) -> int:
        return len(self.hand)

    @property
    def result(self) -> Optional[HandResult]:
        """当前手牌的牌型，未发满3张时为 None"""
        return evaluate_hand(self.hand)

    def take_hand(self, cards: List[Card]) -> None:
        """整手替换手牌"""
        self.hand = list(cards)

    def clear_hand(self) -> None:
        self.hand = []

    def reset_for_new_deck(self) -> None:
        """重新洗牌时重置"""
        self.hand = []
        self.score = 0
