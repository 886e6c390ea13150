"""牌型定义 - 三张牌的3种牌型与评估结果"""

from enum import Enum
from dataclasses import dataclass
from typing import ClassVar, Optional, Tuple


class HandCategory(str, Enum):
    """牌型枚举"""
    THREE_OF_A_KIND = "THREE_OF_A_KIND"   # 三条
    PAIR = "PAIR"                         # 对子
    HIGH_CARD = "HIGH_CARD"               # 散牌

    @property
    def rank(self) -> int:
        """牌型等级，越大越强"""
        return CATEGORY_RANK[self]

    @property
    def label(self) -> str:
        return CATEGORY_LABEL[self]


CATEGORY_RANK = {
    HandCategory.THREE_OF_A_KIND: 3,
    HandCategory.PAIR: 2,
    HandCategory.HIGH_CARD: 1,
}

# 牌型显示名
CATEGORY_LABEL = {
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.PAIR: "Pair",
    HandCategory.HIGH_CARD: "High Card",
}


class Outcome(str, Enum):
    """两手牌比较结果"""
    FIRST_WINS = "FIRST_WINS"
    SECOND_WINS = "SECOND_WINS"
    TIE = "TIE"

    @property
    def winner(self) -> Optional[int]:
        """映射为玩家编号：1 / 2 / None(平局)"""
        if self is Outcome.FIRST_WINS:
            return 1
        if self is Outcome.SECOND_WINS:
            return 2
        return None


# ============================================================
#  评估结果：每种牌型一个类，只携带该牌型有意义的字段
# ============================================================

class HandResult:
    """评估结果基类"""
    category: ClassVar[HandCategory]

    @property
    def rank(self) -> int:
        return self.category.rank

    @property
    def label(self) -> str:
        return self.category.label

    def to_dict(self) -> dict:
        data = {
            "category": self.category.value,
            "label": self.label,
            "rank": self.rank,
            "kickers": list(self.kickers),
        }
        primary = getattr(self, "primary_value", None)
        if primary is not None:
            data["primary_value"] = primary
        return data


@dataclass(frozen=True)
class ThreeOfAKind(HandResult):
    """三条：三张同点数"""
    category: ClassVar[HandCategory] = HandCategory.THREE_OF_A_KIND
    primary_value: int

    @property
    def kickers(self) -> Tuple[int, ...]:
        """三条没有踢脚"""
        return ()

    def __repr__(self) -> str:
        return f"[{self.label}] {self.primary_value}"


@dataclass(frozen=True)
class Pair(HandResult):
    """对子：对子点数 + 1张踢脚"""
    category: ClassVar[HandCategory] = HandCategory.PAIR
    primary_value: int
    kickers: Tuple[int]

    def __repr__(self) -> str:
        return f"[{self.label}] {self.primary_value} kicker={list(self.kickers)}"


@dataclass(frozen=True)
class HighCard(HandResult):
    """散牌：三张点数从大到小"""
    category: ClassVar[HandCategory] = HandCategory.HIGH_CARD
    kickers: Tuple[int, int, int]

    def __repr__(self) -> str:
        return f"[{self.label}] {list(self.kickers)}"
