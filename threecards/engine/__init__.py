# 游戏引擎模块
from .card import (
    Card, Rank, Suit, CARDS_PER_HAND, CARDS_PER_ROUND, DECK_SIZE,
    create_deck, shuffle_deck, draw, parse_card,
)
from .hand_type import HandCategory, HandResult, ThreeOfAKind, Pair, HighCard, Outcome
from .hand_evaluator import evaluate_hand, compare_hands
from .errors import ThreeCardsError, InsufficientDeckError, InvalidCommandError
