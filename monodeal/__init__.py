"""
MonoDeal Rules Engine

A deterministic two-player rules engine for the MonoDeal property card game.
"""

from monodeal.game import (
    GameConfig,
    GamePhase,
    GameState,
    Move,
    MoveType,
    Player,
    PlayerState,
    apply_move,
    create_game,
    get_legal_moves,
    parse_move_request,
)

__all__ = [
    "GameConfig",
    "GamePhase",
    "GameState",
    "Move",
    "MoveType",
    "Player",
    "PlayerState",
    "apply_move",
    "create_game",
    "get_legal_moves",
    "parse_move_request",
]
