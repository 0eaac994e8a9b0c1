from monodeal.game.game import GamePhase, GameState, create_game
from monodeal.game.player import Player, PlayerState, PropertySet
from monodeal.game.cards import ActionKind, Card, CardType, PropertyColor
from monodeal.game.config import GameConfig
from monodeal.game.rules import Move, MoveType, apply_move, get_legal_moves, parse_move_request

__all__ = [
    "GamePhase",
    "GameState",
    "create_game",
    "Player",
    "PlayerState",
    "PropertySet",
    "ActionKind",
    "Card",
    "CardType",
    "PropertyColor",
    "GameConfig",
    "Move",
    "MoveType",
    "apply_move",
    "get_legal_moves",
    "parse_move_request",
]
