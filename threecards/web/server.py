"""WebSocket 后端服务 - 每个连接独立一局，分阶段推送发牌/翻牌/结算事件"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from threecards.engine.card import Card
from threecards.engine.hand_type import HandResult
from threecards.game.game_state import CommandResult
from threecards.game.controller import GameController, MSG_DEALING, MSG_RESHUFFLING

logger = logging.getLogger(__name__)


# ============================================================
#  展示节奏配置
# ============================================================

@dataclass(frozen=True)
class RevealTiming:
    """分阶段展示的延迟（秒），只属于展示层，引擎状态早已结算完毕"""
    deal: float = 0.3            # 清空手牌 → 亮出牌背
    reveal: float = 0.05         # 牌背 → 翻牌
    result: float = 1.2          # 翻牌 → 公布本轮胜负
    game_over: float = 1.5       # 本轮胜负 → 弹出整局结算
    reshuffle: float = 0.5       # 洗牌动画

    @classmethod
    def instant(cls) -> "RevealTiming":
        return cls(deal=0, reveal=0, result=0, game_over=0, reshuffle=0)

    @classmethod
    def from_env(cls) -> "RevealTiming":
        """THREECARDS_FAST=1 时关闭所有延迟"""
        if os.getenv("THREECARDS_FAST", "0") == "1":
            return cls.instant()
        return cls()


TIMING = RevealTiming.from_env()


# ============================================================
#  序列化工具
# ============================================================

def card_to_dict(c: Card) -> dict:
    """将 Card 序列化为前端可用的 dict"""
    return {
        "rank": c.rank_value,
        "suit": c.suit.value,
        "display": c.display,
        "red": c.is_red,
    }


def result_to_dict(result: Optional[HandResult]) -> Optional[dict]:
    return result.to_dict() if result else None


def players_face_down(gc: GameController) -> list:
    return [{"id": p.id, "name": p.name, "hand_size": p.hand_size} for p in gc.players]


def players_face_up(gc: GameController) -> list:
    return [
        {
            "id": p.id,
            "name": p.name,
            "score": p.score,
            "hand": [card_to_dict(c) for c in p.hand],
            "result": result_to_dict(p.result),
        }
        for p in gc.players
    ]


# ============================================================
#  FastAPI 应用
# ============================================================

app = FastAPI(title="Three Cards")


async def send(ws: WebSocket, msg: dict) -> None:
    await ws.send_text(json.dumps(msg, ensure_ascii=False))


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    """WebSocket 端点：每个连接持有独立的 GameController"""
    await ws.accept()
    gc = GameController()
    await send(ws, {"type": "state", "state": gc.snapshot()})
    try:
        while True:
            data = await ws.receive_text()
            try:
                msg = json.loads(data)
            except json.JSONDecodeError:
                await send(ws, {"type": "error", "message": "invalid JSON"})
                continue

            action = msg.get("action") if isinstance(msg, dict) else None
            if action == "deal":
                await handle_deal(ws, gc)
            elif action == "reshuffle":
                await handle_reshuffle(ws, gc)
            elif action == "state":
                await send(ws, {"type": "state", "state": gc.snapshot()})
            else:
                logger.warning("未知 action=%s", action)
                await send(ws, {"type": "error", "message": f"unknown action: {action}"})
    except (WebSocketDisconnect, RuntimeError):
        pass


# ============================================================
#  分阶段推送
# ============================================================

async def handle_deal(ws: WebSocket, gc: GameController) -> None:
    """请求发牌，并按 发牌 → 翻牌 → 结果 → (整局结算) 的节奏推送"""
    result = gc.request_deal()

    if result == CommandResult.REJECTED:
        await send(ws, {"type": "rejected", "action": "deal", "state": gc.snapshot()})
        return

    if result == CommandResult.GAME_OVER:
        await send_game_over(ws, gc)
        return

    await send(ws, {"type": "dealing", "message": MSG_DEALING})
    await asyncio.sleep(TIMING.deal)

    await send(ws, {
        "type": "hands",
        "players": players_face_down(gc),
        "deck_size": gc.deck_size,
    })
    await asyncio.sleep(TIMING.reveal)

    gc.reveal_hands()
    await send(ws, {"type": "reveal", "players": players_face_up(gc)})
    await asyncio.sleep(TIMING.result)

    await send(ws, {
        "type": "round_result",
        "winner": gc.winner,
        "message": gc.round_message,
        "scores": list(gc.scores),
        "state": gc.snapshot(),
    })

    if gc.is_exhausted:
        await asyncio.sleep(TIMING.game_over)
        await send_game_over(ws, gc)


async def send_game_over(ws: WebSocket, gc: GameController) -> None:
    """推送牌堆耗尽的整局结算"""
    await send(ws, {
        "type": "game_over",
        "message": gc.final_message,
        "scores": list(gc.final_scores or gc.scores),
    })


async def handle_reshuffle(ws: WebSocket, gc: GameController) -> None:
    """请求重新洗牌"""
    result = gc.request_reshuffle()
    if result == CommandResult.REJECTED:
        await send(ws, {"type": "rejected", "action": "reshuffle", "state": gc.snapshot()})
        return

    await send(ws, {"type": "reshuffling", "message": MSG_RESHUFFLING})
    await asyncio.sleep(TIMING.reshuffle)
    await send(ws, {"type": "state", "state": gc.snapshot()})
