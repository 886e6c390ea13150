"""Three Cards - 双人三张牌比大小游戏"""

__version__ = "0.1.0"
