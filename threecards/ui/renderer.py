"""终端可视化渲染器 - 在终端中展示三张牌对局过程"""

import os
import time
from typing import List, Optional

from threecards.engine.card import Card
from threecards.engine.hand_type import HandResult
from threecards.game.player import Player
from threecards.game.game_state import GameEvent
from threecards.game.controller import GameController


# 颜色常量 (ANSI)
RED = "\033[91m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
MAGENTA = "\033[95m"
BOLD = "\033[1m"
DIM = "\033[2m"
RESET = "\033[0m"

# 各玩家横幅颜色
PLAYER_COLOR = {1: BLUE, 2: MAGENTA}

class TerminalRenderer:
    """终端可视化渲染器"""

    def __init__(self, delay: float = 0.8):
        self.delay = delay  # 每轮之间的延迟（秒）

    def clear(self) -> None:
        """清屏"""
        os.system("clear" if os.name != "nt" else "cls")

    def pause(self, seconds: float = 0) -> None:
        """暂停；delay 为 0 时（快速模式）不等待"""
        if self.delay <= 0:
            return
        time.sleep(seconds or self.delay)

    # ============================================================
    #  牌面渲染
    # ============================================================

    @staticmethod
    def format_cards(cards: List[Card], face_up: bool = True) -> str:
        """将牌列表格式化为彩色字符串"""
        if not cards:
            return f"{DIM}[ ] [ ] [ ]{RESET}"
        if not face_up:
            return " ".join(f"{DIM}[##]{RESET}" for _ in cards)
        parts = []
        for c in cards:
            if c.is_red:
                parts.append(f"{RED}{c.display}{RESET}")
            else:
                parts.append(c.display)
        return " ".join(parts)

    @staticmethod
    def format_result(result: Optional[HandResult]) -> str:
        return result.label if result else "Waiting..."

    @staticmethod
    def format_player_name(player: Player, is_winner: bool = False) -> str:
        """格式化玩家名（胜者高亮）"""
        color = GREEN if is_winner else PLAYER_COLOR.get(player.id, DIM)
        tag = " 🏆" if is_winner else ""
        return f"{color}{BOLD}{player.name}{tag}{RESET}"

    # ============================================================
    #  分隔线与标题
    # ============================================================

    @staticmethod
    def separator(char: str = "─", width: int = 60) -> str:
        return char * width

    def print_header(self, title: str) -> None:
        """打印带框的标题"""
        print(f"\n{YELLOW}{BOLD}{'═' * 60}{RESET}")
        print(f"{YELLOW}{BOLD}  {title}{RESET}")
        print(f"{YELLOW}{BOLD}{'═' * 60}{RESET}\n")

    def show_status(self, gc: GameController) -> None:
        """牌堆状态行"""
        print(f"  {DIM}Deck Status: {gc.deck_size} cards remaining | "
              f"Shuffles: {gc.shuffle_count}{RESET}")

    # ============================================================
    #  对局展示
    # ============================================================

    def show_players(self, gc: GameController) -> None:
        """展示双方手牌、牌型与得分"""
        face_up = gc.state.hands_revealed
        for p in gc.players:
            name = self.format_player_name(p, gc.winner == p.id)
            cards = self.format_cards(p.hand, face_up)
            hand_text = self.format_result(p.result) if face_up else "Waiting..."
            print(f"  {name}  Score: {p.score}")
            print(f"    {cards}   Hand: {hand_text}")

    def show_banner(self, message: str, winner: Optional[int] = None) -> None:
        """本轮结果横幅"""
        color = PLAYER_COLOR.get(winner, YELLOW)
        print(f"\n  {color}{BOLD}» {message}{RESET}\n")

    def show_game_over(self, message: str, scores: tuple) -> None:
        """牌堆耗尽时的结算框"""
        self.print_header("🃏 DECK EMPTY")
        print(f"  {BOLD}{message}{RESET}")
        print(f"\n  {self.separator('─', 40)}")
        print("  Current Overall Score:")
        print(f"  Player 1: {scores[0]}  |  Player 2: {scores[1]}")
        print(f"  {self.separator('─', 40)}\n")

    # ============================================================
    #  事件回调（注册到 GameController）
    # ============================================================

    def make_event_callback(self, gc: GameController):
        """创建事件回调函数，供 GameController.on_event() 使用。

        回调只负责输出；停顿由调用方在指令返回后自行安排。
        """
        renderer = self

        def callback(event: GameEvent) -> None:
            if event.action == "deal":
                renderer.print_header(f"Round {gc.state.round_count}")

            elif event.action == "round_result":
                # 展示层自行决定翻牌时机
                gc.reveal_hands()
                renderer.show_players(gc)
                renderer.show_banner(event.data["message"], event.data["winner"])
                renderer.show_status(gc)

            elif event.action == "exhausted":
                data = event.data
                renderer.show_game_over(data["message"], data["scores"])

            elif event.action == "reshuffle":
                renderer.show_banner(gc.state.status_message)

        return callback
