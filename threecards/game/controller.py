"""游戏控制器 - 驱动双人三张牌对局的状态机"""

import logging
import random
import threading
from typing import Callable, List, Optional, Sequence, Tuple

from threecards.engine.card import CARDS_PER_HAND, CARDS_PER_ROUND, create_deck, shuffle_deck, draw
from threecards.engine.hand_type import HandResult, Outcome
from threecards.engine.hand_evaluator import evaluate_hand, compare_hands
from threecards.engine.errors import InvalidCommandError
from threecards.game.player import Player
from threecards.game.game_state import GameState, GamePhase, GameEvent, CommandResult

logger = logging.getLogger(__name__)

DEFAULT_PLAYER_NAMES = ("Player 1", "Player 2")

# 提示文案
MSG_START = "Press DEAL to start the game!"
MSG_DEALING = "...Dealing cards..."
MSG_RESHUFFLING = "Deck is empty. RESHUFFLING..."
MSG_SHUFFLED = "Shuffle complete. Ready to draw."
MSG_ROUND_TIE = "It's a Tie! No score change."

EventCallback = Callable[[GameEvent], None]


def round_message(winner: Optional[int]) -> str:
    """本轮结果文案"""
    if winner is None:
        return MSG_ROUND_TIE
    return f"Player {winner} wins the round!"


def final_message(score1: int, score2: int) -> str:
    """整局结果文案：胜者得分在前"""
    if score1 > score2:
        return f"Player 1 Wins the Game! Final Score: {score1} - {score2}"
    if score2 > score1:
        return f"Player 2 Wins the Game! Final Score: {score2} - {score1}"
    return f"It's a Tie Game! Final Score: {score1} - {score2}"


class GameController:
    """游戏控制器：所有状态变更都经由 request_deal / request_reshuffle"""

    def __init__(
        self,
        player_names: Sequence[str] = DEFAULT_PLAYER_NAMES,
        rng: Optional[random.Random] = None,
    ):
        assert len(player_names) == 2, "只支持两名玩家"
        self.players = [
            Player(id=i + 1, name=name) for i, name in enumerate(player_names)
        ]
        self.rng = rng or random.Random()
        self.state = GameState(players=self.players)
        self._callbacks: List[EventCallback] = []
        self._lock = threading.Lock()   # 串行化指令，执行中到达的指令直接拒绝

        # 开局即洗好第一副牌
        self.state.deck = shuffle_deck(create_deck(), self.rng)
        self.state.shuffle_count = 1
        self.state.status_message = MSG_START

    def on_event(self, callback: EventCallback) -> None:
        """注册事件回调"""
        self._callbacks.append(callback)

    def _emit(self, phase: GamePhase, action: str, data=None) -> None:
        """触发事件通知；回调异常只记录日志，不影响对局状态"""
        event = GameEvent(phase, action, data)
        self.state.events.append(event)
        for cb in self._callbacks:
            try:
                cb(event)
            except Exception:
                logger.exception("事件回调异常: action=%s", action)

    # ============================================================
    #  查询
    # ============================================================

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    @property
    def deck_size(self) -> int:
        return self.state.deck_size

    @property
    def shuffle_count(self) -> int:
        return self.state.shuffle_count

    @property
    def hands(self) -> Tuple[list, list]:
        return self.players[0].hand, self.players[1].hand

    @property
    def results(self) -> Tuple[Optional[HandResult], Optional[HandResult]]:
        return self.players[0].result, self.players[1].result

    @property
    def scores(self) -> Tuple[int, int]:
        return self.players[0].score, self.players[1].score

    @property
    def winner(self) -> Optional[int]:
        return self.state.winner

    @property
    def round_message(self) -> str:
        return self.state.round_message

    @property
    def is_exhausted(self) -> bool:
        return self.state.exhausted

    @property
    def final_message(self) -> str:
        return self.state.final_message

    @property
    def final_scores(self) -> Optional[Tuple[int, int]]:
        return self.state.final_scores

    @property
    def can_deal(self) -> bool:
        """发牌按钮是否可用"""
        return (
            self.state.phase in (GamePhase.PRE_DEAL, GamePhase.SHOWDOWN)
            and self.state.deck_size >= CARDS_PER_ROUND
        )

    def snapshot(self) -> dict:
        """导出当前可见状态（供展示层/序列化使用）"""
        s = self.state
        return {
            "phase": s.phase.value,
            "deck_size": s.deck_size,
            "shuffle_count": s.shuffle_count,
            "round_count": s.round_count,
            "players": [
                {
                    "id": p.id,
                    "name": p.name,
                    "score": p.score,
                    "hand": [c.display for c in p.hand],
                    "result": p.result.to_dict() if p.result else None,
                }
                for p in self.players
            ],
            "winner": s.winner,
            "round_message": s.round_message,
            "status_message": s.status_message,
            "hands_revealed": s.hands_revealed,
            "can_deal": self.can_deal,
            "exhausted": s.exhausted,
            "final_message": s.final_message,
            "final_scores": list(s.final_scores) if s.final_scores else None,
        }

    # ============================================================
    #  发牌指令
    # ============================================================

    def request_deal(self) -> CommandResult:
        """
        请求发一轮牌。
        牌堆不足6张时不发牌，改为宣布整局结果并等待重新洗牌。
        """
        if not self._lock.acquire(blocking=False):
            return self._reject("deal", "上一条指令尚未完成")
        try:
            if self.state.phase not in (GamePhase.PRE_DEAL, GamePhase.SHOWDOWN):
                return self._reject("deal", "发牌或洗牌进行中")

            if self.state.deck_size < CARDS_PER_ROUND:
                self.state.phase = GamePhase.SHOWDOWN
                self._raise_exhausted()
                self._emit(GamePhase.SHOWDOWN, "exhausted", self._exhausted_payload())
                return CommandResult.GAME_OVER

            outcome, results = self._deal_round()

            # 状态已完整落定后再通知观察者
            s = self.state
            self._emit(GamePhase.DEALING, "deal", {
                "hands": [list(p.hand) for p in self.players],
            })
            self._emit(GamePhase.SHOWDOWN, "round_result", {
                "outcome": outcome,
                "winner": s.winner,
                "results": results,
                "message": s.round_message,
            })
            if s.exhausted:
                self._emit(GamePhase.SHOWDOWN, "exhausted", self._exhausted_payload())
            return CommandResult.DEALT
        finally:
            self._lock.release()

    def _deal_round(self) -> Tuple[Outcome, Tuple[HandResult, HandResult]]:
        """发牌 → 评估 → 比较 → 计分，一次性完成"""
        s = self.state
        s.phase = GamePhase.DEALING
        s.winner = None
        s.round_message = ""
        s.hands_revealed = False
        s.status_message = MSG_DEALING
        for p in self.players:
            p.clear_hand()

        drawn, s.deck = draw(s.deck, CARDS_PER_ROUND)
        self.players[0].take_hand(drawn[:CARDS_PER_HAND])
        self.players[1].take_hand(drawn[CARDS_PER_HAND:])
        s.round_count += 1

        result1 = evaluate_hand(self.players[0].hand)
        result2 = evaluate_hand(self.players[1].hand)
        outcome = compare_hands(result1, result2)
        self._settle_round(outcome)
        logger.debug(
            "第%d轮: %s vs %s -> %s, 比分 %d-%d, 剩余 %d 张",
            s.round_count, result1, result2, outcome.value,
            self.players[0].score, self.players[1].score, s.deck_size,
        )
        s.phase = GamePhase.SHOWDOWN

        # 剩余不够下一轮时提前告知
        if s.deck_size < CARDS_PER_ROUND:
            self._raise_exhausted()
        return outcome, (result1, result2)

    def _settle_round(self, outcome: Outcome) -> None:
        """结算本轮：胜者 +1，平局不变"""
        s = self.state
        s.winner = outcome.winner
        if s.winner is not None:
            self.players[s.winner - 1].score += 1
        s.round_message = round_message(s.winner)
        s.status_message = s.round_message

    def _raise_exhausted(self) -> None:
        """牌堆耗尽：按累计得分宣布整局结果"""
        s = self.state
        score1, score2 = self.scores
        s.exhausted = True
        s.final_scores = (score1, score2)
        s.final_message = final_message(score1, score2)
        logger.info("牌堆剩余 %d 张，本副牌结束: %s", s.deck_size, s.final_message)

    def _exhausted_payload(self) -> dict:
        return {
            "message": self.state.final_message,
            "scores": self.state.final_scores,
        }

    # ============================================================
    #  翻牌（展示层子阶段）
    # ============================================================

    def reveal_hands(self) -> None:
        """标记手牌已翻开；只影响展示，不改变对局进程"""
        if self.players[0].hand_size == CARDS_PER_HAND:
            self.state.hands_revealed = True

    # ============================================================
    #  洗牌指令
    # ============================================================

    def request_reshuffle(self) -> CommandResult:
        """重新洗一副完整的牌，得分清零。仅在牌堆耗尽后可用。"""
        if not self._lock.acquire(blocking=False):
            return self._reject("reshuffle", "上一条指令尚未完成")
        try:
            if not self.state.exhausted:
                return self._reject("reshuffle", "牌堆尚未耗尽")
            if self.state.phase in (GamePhase.DEALING, GamePhase.RESHUFFLING):
                return self._reject("reshuffle", "发牌或洗牌进行中")
            self._reshuffle()
            self._emit(GamePhase.RESHUFFLING, "reshuffle")
            return CommandResult.RESHUFFLED
        finally:
            self._lock.release()

    def _reshuffle(self) -> None:
        s = self.state
        s.phase = GamePhase.RESHUFFLING
        s.status_message = MSG_RESHUFFLING
        s.round_message = ""
        s.winner = None
        s.hands_revealed = False
        for p in self.players:
            p.reset_for_new_deck()

        # 事件日志按副牌记录
        s.events.clear()
        s.deck = shuffle_deck(create_deck(), self.rng)
        s.shuffle_count += 1
        s.round_count = 0
        s.exhausted = False
        s.final_message = ""
        s.final_scores = None
        s.status_message = MSG_SHUFFLED
        s.phase = GamePhase.PRE_DEAL
        logger.info("第 %d 次洗牌完成", s.shuffle_count)

    # ============================================================
    #  非法指令
    # ============================================================

    def _reject(self, command: str, reason: str) -> CommandResult:
        """拒绝指令：记录日志并通知，不修改状态"""
        err = InvalidCommandError(command, self.state.phase.value, reason)
        logger.warning("%s", err)
        self._emit(self.state.phase, "rejected", err)
        return CommandResult.REJECTED

    # ============================================================
    #  自动对局入口
    # ============================================================

    def play_until_exhausted(self) -> int:
        """连续发牌直到牌堆耗尽，返回本次发牌轮数"""
        rounds = 0
        while self.request_deal() == CommandResult.DEALT:
            rounds += 1
            if self.state.exhausted:
                break
        return rounds
