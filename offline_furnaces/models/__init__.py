from .components import Player, Team, Oven

__all__ = [
    "Player",
    "Team",
    "Oven",
]
