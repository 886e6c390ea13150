"""GameController 状态机单元测试"""

import logging
import random
from typing import List

import pytest
from threecards.engine.card import Card, DECK_SIZE, create_deck, parse_card
from threecards.engine.hand_type import HandCategory
from threecards.game.game_state import GamePhase, GameEvent, CommandResult, MAX_EVENTS
from threecards.game.controller import GameController, final_message, round_message


# ============================================================
#  辅助工具
# ============================================================

def _cards(*texts: str) -> List[Card]:
    return [parse_card(t) for t in texts]


def _make_controller(seed: int = 42) -> GameController:
    return GameController(rng=random.Random(seed))


def _stack(gc: GameController, cards: List[Card]) -> None:
    """把牌堆替换为指定顺序，便于构造确定的对局"""
    gc.state.deck = list(cards)


# 玩家1 对K 胜 玩家2 散牌
P1_WINS = _cards("KH", "KD", "5C", "AS", "7D", "3C")
# 玩家2 三条 胜 玩家1 对子
P2_WINS = _cards("QH", "QD", "9C", "4H", "4D", "4C")
# 同点数散牌平局
TIE = _cards("AH", "8D", "2C", "AD", "8S", "2H")


# ============================================================
#  初始状态
# ============================================================

class TestInitialState:

    def test_fresh_controller(self):
        gc = _make_controller()
        assert gc.phase == GamePhase.PRE_DEAL
        assert gc.deck_size == DECK_SIZE
        assert gc.shuffle_count == 1
        assert gc.scores == (0, 0)
        assert gc.hands == ([], [])
        assert gc.results == (None, None)
        assert gc.winner is None
        assert gc.can_deal is True
        assert gc.is_exhausted is False

    def test_initial_deck_is_shuffled_full_deck(self):
        gc = _make_controller()
        assert sorted(gc.state.deck, key=repr) == sorted(create_deck(), key=repr)

    def test_only_two_players(self):
        with pytest.raises(AssertionError):
            GameController(player_names=["A", "B", "C"])

    def test_instances_are_independent(self):
        a = _make_controller(1)
        b = _make_controller(2)
        a.request_deal()
        assert a.deck_size == DECK_SIZE - 6
        assert b.deck_size == DECK_SIZE
        assert b.scores == (0, 0)


# ============================================================
#  发牌与计分
# ============================================================

class TestDeal:

    def test_deal_consumes_six_cards(self):
        gc = _make_controller()
        before = gc.deck_size
        assert gc.request_deal() == CommandResult.DEALT
        assert gc.deck_size == before - 6
        assert gc.phase == GamePhase.SHOWDOWN
        assert len(gc.hands[0]) == 3 and len(gc.hands[1]) == 3

    def test_first_three_to_player_one(self):
        gc = _make_controller()
        _stack(gc, P1_WINS + create_deck()[:10])
        gc.request_deal()
        assert gc.hands[0] == P1_WINS[:3]
        assert gc.hands[1] == P1_WINS[3:]

    def test_player_one_wins_round(self):
        gc = _make_controller()
        _stack(gc, P1_WINS + create_deck()[:10])
        gc.request_deal()
        assert gc.winner == 1
        assert gc.scores == (1, 0)
        assert gc.round_message == "Player 1 wins the round!"
        assert gc.results[0].category == HandCategory.PAIR
        assert gc.results[1].category == HandCategory.HIGH_CARD

    def test_player_two_wins_round(self):
        gc = _make_controller()
        _stack(gc, P2_WINS + create_deck()[:10])
        gc.request_deal()
        assert gc.winner == 2
        assert gc.scores == (0, 1)
        assert gc.round_message == "Player 2 wins the round!"

    def test_tie_round_no_score(self):
        gc = _make_controller()
        _stack(gc, TIE + create_deck()[:10])
        gc.request_deal()
        assert gc.winner is None
        assert gc.scores == (0, 0)
        assert gc.round_message == "It's a Tie! No score change."

    def test_scores_accumulate(self):
        gc = _make_controller()
        _stack(gc, P1_WINS + P2_WINS + P1_WINS + create_deck()[:10])
        for _ in range(3):
            gc.request_deal()
        assert gc.scores == (2, 1)
        assert gc.state.round_count == 3

    def test_hands_pending_reveal(self):
        gc = _make_controller()
        gc.request_deal()
        assert gc.state.hands_revealed is False
        gc.reveal_hands()
        assert gc.state.hands_revealed is True
        gc.request_deal()
        assert gc.state.hands_revealed is False

    def test_reveal_without_hands_is_noop(self):
        gc = _make_controller()
        gc.reveal_hands()
        assert gc.state.hands_revealed is False

    def test_deal_refused_while_dealing(self):
        gc = _make_controller()
        gc.state.phase = GamePhase.DEALING
        assert gc.request_deal() == CommandResult.REJECTED
        assert gc.deck_size == DECK_SIZE

    def test_deal_refused_while_reshuffling(self):
        gc = _make_controller()
        gc.state.phase = GamePhase.RESHUFFLING
        assert gc.request_deal() == CommandResult.REJECTED
        assert gc.deck_size == DECK_SIZE

    def test_reentrant_deal_from_callback_rejected(self):
        """发牌过程中到达的指令被拒绝，不会交错执行"""
        gc = _make_controller()
        nested = []

        def cb(event: GameEvent) -> None:
            if event.action == "deal":
                nested.append(gc.request_deal())

        gc.on_event(cb)
        assert gc.request_deal() == CommandResult.DEALT
        assert nested == [CommandResult.REJECTED]
        assert gc.deck_size == DECK_SIZE - 6

    def test_rejection_is_logged(self, caplog):
        gc = _make_controller()
        gc.state.phase = GamePhase.DEALING
        with caplog.at_level(logging.WARNING):
            gc.request_deal()
        assert "deal" in caplog.text

    def test_failing_callback_does_not_block_game(self, caplog):
        """观察者回调抛异常时，本轮照常结算，后续指令照常可用"""
        gc = _make_controller()
        _stack(gc, P1_WINS + create_deck()[:10])

        def broken(event: GameEvent) -> None:
            if event.action == "deal":
                raise UnicodeEncodeError("ascii", "🏆", 0, 1, "ordinal not in range")

        gc.on_event(broken)
        with caplog.at_level(logging.ERROR):
            assert gc.request_deal() == CommandResult.DEALT
        assert "deal" in caplog.text
        assert gc.phase == GamePhase.SHOWDOWN
        assert gc.deck_size == 10
        assert gc.scores == (1, 0)

        assert gc.request_deal() == CommandResult.DEALT
        assert gc.deck_size == 4
        assert gc.is_exhausted is True
        assert gc.request_reshuffle() == CommandResult.RESHUFFLED

    def test_observers_see_settled_state(self):
        """回调触发时本轮已计分、阶段已是 SHOWDOWN"""
        gc = _make_controller()
        _stack(gc, P1_WINS + create_deck()[:10])
        seen = []
        gc.on_event(lambda e: seen.append((e.action, e.phase, gc.phase, gc.scores)))
        gc.request_deal()
        assert seen == [
            ("deal", GamePhase.DEALING, GamePhase.SHOWDOWN, (1, 0)),
            ("round_result", GamePhase.SHOWDOWN, GamePhase.SHOWDOWN, (1, 0)),
        ]


# ============================================================
#  牌堆耗尽
# ============================================================

class TestExhaustion:

    def test_eight_deals_then_game_over(self):
        gc = _make_controller()
        for n in range(1, 9):
            assert gc.request_deal() == CommandResult.DEALT
            assert gc.deck_size == DECK_SIZE - 6 * n
        assert gc.deck_size == 4
        assert gc.can_deal is False

        assert gc.request_deal() == CommandResult.GAME_OVER
        assert gc.deck_size == 4
        assert gc.phase == GamePhase.SHOWDOWN
        assert gc.is_exhausted is True
        assert gc.final_message == final_message(*gc.scores)
        assert gc.final_scores == gc.scores

    def test_gate_raised_proactively_after_last_deal(self):
        gc = _make_controller()
        events = []
        gc.on_event(lambda e: events.append(e.action))
        for _ in range(7):
            gc.request_deal()
        assert gc.is_exhausted is False
        gc.request_deal()
        assert gc.is_exhausted is True
        assert events[-2:] == ["round_result", "exhausted"]

    def test_proactive_gate_uses_post_round_scores(self):
        gc = _make_controller()
        _stack(gc, P2_WINS + create_deck()[:4])
        gc.request_deal()
        assert gc.is_exhausted is True
        assert gc.final_scores == (0, 1)
        assert gc.final_message == "Player 2 Wins the Game! Final Score: 1 - 0"

    def test_game_over_when_deck_short(self):
        gc = _make_controller()
        _stack(gc, create_deck()[:5])
        gc.players[0].score = 3
        gc.players[1].score = 3
        assert gc.request_deal() == CommandResult.GAME_OVER
        assert gc.final_message == "It's a Tie Game! Final Score: 3 - 3"
        assert gc.hands == ([], [])

    def test_play_until_exhausted(self):
        gc = _make_controller()
        assert gc.play_until_exhausted() == 8
        assert gc.is_exhausted is True
        assert sum(gc.scores) <= 8
        assert gc.play_until_exhausted() == 0


class TestMessages:

    def test_final_message_variants(self):
        assert final_message(5, 3) == "Player 1 Wins the Game! Final Score: 5 - 3"
        assert final_message(2, 4) == "Player 2 Wins the Game! Final Score: 4 - 2"
        assert final_message(1, 1) == "It's a Tie Game! Final Score: 1 - 1"

    def test_round_message_variants(self):
        assert round_message(1) == "Player 1 wins the round!"
        assert round_message(2) == "Player 2 wins the round!"
        assert round_message(None) == "It's a Tie! No score change."


# ============================================================
#  重新洗牌
# ============================================================

class TestReshuffle:

    def test_reshuffle_refused_before_gate(self):
        gc = _make_controller()
        gc.request_deal()
        assert gc.request_reshuffle() == CommandResult.REJECTED
        assert gc.shuffle_count == 1
        assert gc.deck_size == DECK_SIZE - 6

    @pytest.mark.parametrize("phase", [GamePhase.DEALING, GamePhase.RESHUFFLING])
    def test_reshuffle_refused_mid_transition(self, phase):
        gc = _make_controller()
        gc.play_until_exhausted()
        scores = gc.scores
        gc.state.phase = phase
        assert gc.request_reshuffle() == CommandResult.REJECTED
        assert gc.shuffle_count == 1
        assert gc.deck_size == 4
        assert gc.scores == scores
        assert gc.is_exhausted is True

    def test_event_log_bounded_and_cleared(self):
        gc = _make_controller()
        for _ in range(MAX_EVENTS * 2):
            gc.request_reshuffle()
        assert len(gc.state.events) == MAX_EVENTS

        gc.play_until_exhausted()
        gc.request_reshuffle()
        assert [e.action for e in gc.state.events] == ["reshuffle"]

        for _ in range(20):
            gc.play_until_exhausted()
            gc.request_reshuffle()
        assert len(gc.state.events) <= MAX_EVENTS

    def test_reshuffle_resets_everything(self):
        gc = _make_controller()
        gc.play_until_exhausted()
        count = gc.shuffle_count

        assert gc.request_reshuffle() == CommandResult.RESHUFFLED
        assert gc.phase == GamePhase.PRE_DEAL
        assert gc.deck_size == DECK_SIZE
        assert len(set(gc.state.deck)) == DECK_SIZE
        assert gc.shuffle_count == count + 1
        assert gc.scores == (0, 0)
        assert gc.hands == ([], [])
        assert gc.winner is None
        assert gc.is_exhausted is False
        assert gc.final_message == ""
        assert gc.state.status_message == "Shuffle complete. Ready to draw."
        assert gc.can_deal is True

    def test_reshuffle_event_sees_reshuffling_phase(self):
        gc = _make_controller()
        gc.play_until_exhausted()
        phases = []
        gc.on_event(lambda e: phases.append((e.action, e.phase)))
        gc.request_reshuffle()
        assert phases == [("reshuffle", GamePhase.RESHUFFLING)]

    def test_can_play_again_after_reshuffle(self):
        gc = _make_controller()
        gc.play_until_exhausted()
        gc.request_reshuffle()
        assert gc.request_deal() == CommandResult.DEALT
        assert gc.deck_size == DECK_SIZE - 6


# ============================================================
#  快照
# ============================================================

class TestSnapshot:

    def test_snapshot_shape(self):
        gc = _make_controller()
        _stack(gc, P1_WINS + create_deck()[:10])
        gc.request_deal()
        snap = gc.snapshot()
        assert snap["phase"] == "SHOWDOWN"
        assert snap["deck_size"] == 10
        assert snap["winner"] == 1
        assert snap["players"][0]["score"] == 1
        assert snap["players"][0]["hand"] == ["♥K", "♦K", "♣5"]
        assert snap["players"][0]["result"]["category"] == "PAIR"
        assert snap["exhausted"] is False
        assert snap["final_scores"] is None
