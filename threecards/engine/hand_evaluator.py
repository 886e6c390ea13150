"""牌型评估器 - 识别三张牌的牌型并比较两手牌大小"""

from typing import List, Optional, Sequence
from collections import Counter

from .card import Card, CARDS_PER_HAND
from .hand_type import HandResult, ThreeOfAKind, Pair, HighCard, Outcome


def evaluate_hand(cards: Sequence[Card]) -> Optional[HandResult]:
    """
    识别一手三张牌的牌型。
    返回 HandResult，手牌不足3张时返回 None。
    花色和是否连续都不参与判断（没有顺子/同花）。
    """
    if len(cards) != CARDS_PER_HAND:
        return None

    sorted_values = sorted((c.rank_value for c in cards), reverse=True)
    rank_counts = Counter(c.rank_value for c in cards)

    # 三张牌最多只有一组重复点数，按 三条 > 对子 > 散牌 依次检测
    return (
        _detect_three_of_a_kind(rank_counts)
        or _detect_pair(sorted_values, rank_counts)
        or HighCard(kickers=tuple(sorted_values))
    )


# ============================================================
#  牌型检测
# ============================================================

def _groups_by_count(rank_counts: Counter, count: int) -> List[int]:
    """返回出现恰好 count 次的所有点数，从大到小"""
    return sorted((r for r, c in rank_counts.items() if c == count), reverse=True)


def _detect_three_of_a_kind(rc: Counter) -> Optional[HandResult]:
    """三条：三张相同点数"""
    triples = _groups_by_count(rc, 3)
    if triples:
        return ThreeOfAKind(primary_value=triples[0])
    return None


def _detect_pair(sorted_values: List[int], rc: Counter) -> Optional[HandResult]:
    """对子：两张相同点数 + 一张踢脚"""
    pairs = _groups_by_count(rc, 2)
    if not pairs:
        return None
    pair_value = pairs[0]
    kickers = tuple(v for v in sorted_values if v != pair_value)
    return Pair(primary_value=pair_value, kickers=kickers)


# ============================================================
#  牌型比较
# ============================================================

def compare_hands(first: HandResult, second: HandResult) -> Outcome:
    """
    比较两手牌。
    规则（依次判断，遇到分出胜负即返回）：
    1. 牌型等级高者胜
    2. 同等级且都有主牌点数（三条/对子），主牌点数大者胜
    3. 踢脚按从大到小逐张比较，第一处不同决定胜负；全部相同为平局
    """
    if first.rank != second.rank:
        return Outcome.FIRST_WINS if first.rank > second.rank else Outcome.SECOND_WINS

    if isinstance(first, (ThreeOfAKind, Pair)) and isinstance(second, (ThreeOfAKind, Pair)):
        if first.primary_value != second.primary_value:
            if first.primary_value > second.primary_value:
                return Outcome.FIRST_WINS
            return Outcome.SECOND_WINS

    for a, b in zip(first.kickers, second.kickers):
        if a != b:
            return Outcome.FIRST_WINS if a > b else Outcome.SECOND_WINS

    return Outcome.TIE
