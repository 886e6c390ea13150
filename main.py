"""三张牌对局 - 主入口"""

import argparse
import logging
import os
import random

from threecards.game.controller import GameController
from threecards.game.game_state import CommandResult
from threecards.ui.renderer import TerminalRenderer


def run_games(games: int = 1, delay: float = 0.8, seed=None) -> GameController:
    """连续打完若干副牌，每副牌结束后重新洗牌"""
    renderer = TerminalRenderer(delay=delay)
    gc = GameController(rng=random.Random(seed))

    # 注册可视化回调
    gc.on_event(renderer.make_event_callback(gc))

    renderer.clear()
    renderer.print_header("🃏 Three Cards")
    renderer.show_status(gc)

    for i in range(games):
        if i > 0:
            gc.request_reshuffle()
            renderer.show_status(gc)
        # 指令返回后再停顿
        while gc.request_deal() == CommandResult.DEALT:
            renderer.pause()
            if gc.is_exhausted:
                break
        renderer.pause()

    return gc


def main():
    """命令行入口"""
    parser = argparse.ArgumentParser(description="Three Cards 双人三张牌对局")
    parser.add_argument("--games", type=int, default=1, help="打几副牌 (默认1)")
    parser.add_argument("--delay", type=float, default=0.8, help="每轮延迟秒数 (默认0.8)")
    parser.add_argument("--fast", action="store_true", help="快速模式 (无延迟)")
    parser.add_argument("--seed", type=int, default=None, help="随机种子，便于复现")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "WARNING"),
        help="日志级别 (默认读取 LOG_LEVEL，否则 WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    delay = 0.0 if args.fast else args.delay
    run_games(games=args.games, delay=delay, seed=args.seed)


if __name__ == "__main__":
    main()
