"""游戏状态 - 双人三张牌对局的阶段、事件与完整状态"""

from collections import deque
from enum import Enum
from dataclasses import dataclass, field
from typing import Deque, List, Optional, Any, Tuple

from threecards.engine.card import Card
from threecards.game.player import Player

# 事件日志最多保留条数
MAX_EVENTS = 200


class GamePhase(str, Enum):
    """游戏阶段"""
    PRE_DEAL = "PRE_DEAL"           # 等待发牌
    DEALING = "DEALING"             # 发牌、评估、计分中
    SHOWDOWN = "SHOWDOWN"           # 本轮已比牌
    RESHUFFLING = "RESHUFFLING"     # 重新洗牌中


class CommandResult(str, Enum):
    """指令执行结果"""
    DEALT = "DEALT"                 # 正常发牌并结算一轮
    GAME_OVER = "GAME_OVER"         # 牌堆不足，宣布整局结果
    RESHUFFLED = "RESHUFFLED"       # 已重新洗牌
    REJECTED = "REJECTED"           # 当前阶段不接受该指令


@dataclass
class GameEvent:
    """游戏事件记录"""
    phase: GamePhase
    action: str                  # "deal", "round_result", "exhausted", "reshuffle", "rejected"
    data: Any = None


@dataclass
class GameState:
    """一副牌范围内的完整游戏状态"""
    players: List[Player]
    phase: GamePhase = GamePhase.PRE_DEAL
    deck: List[Card] = field(default_factory=list)
    shuffle_count: int = 0
    round_count: int = 0             # 本副牌已发轮数

    # 本轮结果
    winner: Optional[int] = None     # 1 / 2 / None(平局或未比牌)
    round_message: str = ""
    status_message: str = ""
    hands_revealed: bool = False     # 已发牌但尚未翻牌时为 False

    # 牌堆耗尽 / 整局结算
    exhausted: bool = False
    final_message: str = ""
    final_scores: Optional[Tuple[int, int]] = None

    # 事件日志
    events: Deque[GameEvent] = field(default_factory=lambda: deque(maxlen=MAX_EVENTS))

    @property
    def deck_size(self) -> int:
        return len(self.deck)
