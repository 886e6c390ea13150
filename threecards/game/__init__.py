# 游戏流程控制模块
from .player import Player
from .game_state import GameState, GamePhase, GameEvent, CommandResult
from .controller import GameController, round_message, final_message
