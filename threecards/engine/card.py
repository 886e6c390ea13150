"""牌的定义 - 52张标准扑克牌的数据模型与牌堆操作"""

from enum import IntEnum, Enum
from dataclasses import dataclass
from typing import List, Optional, Tuple
import random

from .errors import InsufficientDeckError


# 每手牌张数 / 每轮消耗张数 / 整副牌张数
CARDS_PER_HAND = 3
CARDS_PER_ROUND = CARDS_PER_HAND * 2
DECK_SIZE = 52


class Rank(IntEnum):
    """点数枚举（数值即 rank value，越大越大）"""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


class Suit(str, Enum):
    """花色枚举（不参与比较）"""
    HEART = "♥"
    DIAMOND = "♦"
    CLUB = "♣"
    SPADE = "♠"


# 点数显示映射
RANK_DISPLAY = {
    Rank.TWO: "2", Rank.THREE: "3", Rank.FOUR: "4",
    Rank.FIVE: "5", Rank.SIX: "6", Rank.SEVEN: "7",
    Rank.EIGHT: "8", Rank.NINE: "9", Rank.TEN: "10",
    Rank.JACK: "J", Rank.QUEEN: "Q", Rank.KING: "K",
    Rank.ACE: "A",
}

# 花色字母 (H/D/C/S) 映射，用于文本解析
SUIT_LETTERS = {
    "H": Suit.HEART, "D": Suit.DIAMOND,
    "C": Suit.CLUB, "S": Suit.SPADE,
}

_RANK_FROM_TEXT = {v: k for k, v in RANK_DISPLAY.items()}
_SUIT_FROM_TEXT = {**SUIT_LETTERS, **{s.value: s for s in Suit}}


@dataclass(frozen=True)
class Card:
    """一张扑克牌"""
    rank: Rank
    suit: Suit

    @property
    def rank_value(self) -> int:
        return int(self.rank)

    @property
    def display(self) -> str:
        return f"{self.suit.value}{RANK_DISPLAY[self.rank]}"

    @property
    def is_red(self) -> bool:
        return self.suit in (Suit.HEART, Suit.DIAMOND)

    def __repr__(self) -> str:
        return self.display


def create_deck() -> List[Card]:
    """创建一副52张标准扑克牌（花色为主序，点数为次序）"""
    deck: List[Card] = []
    suits = [Suit.HEART, Suit.DIAMOND, Suit.CLUB, Suit.SPADE]

    for suit in suits:
        for rank in Rank:
            deck.append(Card(rank=rank, suit=suit))

    assert len(deck) == DECK_SIZE, f"牌数错误: {len(deck)}"
    return deck


def shuffle_deck(deck: List[Card], rng: Optional[random.Random] = None) -> List[Card]:
    """
    Fisher-Yates 洗牌，返回新的牌堆，不修改原列表。
    从最后一个位置向前到下标1，每个位置与 [0, i] 内均匀随机的位置交换。
    """
    rng = rng or random.Random()
    shuffled = deck.copy()
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def draw(deck: List[Card], n: int) -> Tuple[List[Card], List[Card]]:
    """从牌堆顶部取 n 张: 返回 (取出的牌, 剩余牌堆)"""
    if n < 0:
        raise ValueError(f"抽牌数不能为负: {n}")
    if n > len(deck):
        raise InsufficientDeckError(requested=n, available=len(deck))
    return deck[:n], deck[n:]


def parse_card(text: str) -> Card:
    """
    解析单张牌文本。
    支持 "KH" / "10S"（点数+花色字母）与 "♥K"（花色符号+点数）两种写法。
    """
    text = text.strip().upper()
    if len(text) < 2:
        raise ValueError(f"无法解析卡牌: {text!r}")

    if text[0] in _SUIT_FROM_TEXT and text[0] not in SUIT_LETTERS:
        suit_text, rank_text = text[0], text[1:]
    else:
        rank_text, suit_text = text[:-1], text[-1]

    rank = _RANK_FROM_TEXT.get(rank_text)
    suit = _SUIT_FROM_TEXT.get(suit_text)
    if rank is None or suit is None:
        raise ValueError(f"无法解析卡牌: {text!r}")
    return Card(rank=rank, suit=suit)
