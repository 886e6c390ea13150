"""游戏异常定义"""


class ThreeCardsError(Exception):
    """三张牌游戏基础异常"""
    pass


class InsufficientDeckError(ThreeCardsError):
    """牌堆剩余张数不足"""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"牌堆不足: 需要 {requested} 张, 仅剩 {available} 张")


class InvalidCommandError(ThreeCardsError):
    """当前阶段不允许的指令"""

    def __init__(self, command: str, phase: str, reason: str = ""):
        self.command = command
        self.phase = phase
        self.reason = reason
        msg = f"指令 {command} 在阶段 {phase} 不可用"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
