"""
Snapshot serialization of GameState.

A snapshot is the whole game, deck order and RNG state included, as a
JSON-safe dict. It is what a transport hands to the other side; loading it
back yields a state that behaves identically under `apply_move`.
"""

from __future__ import annotations

from typing import Any, Dict, List

from monodeal.exceptions import SnapshotError
from monodeal.game.cards import Card
from monodeal.game.config import GameConfig
from monodeal.game.contested import PendingAction
from monodeal.game.game import GamePhase, GameState
from monodeal.game.money import GameEvent
from monodeal.game.player import Player, PlayerState

SNAPSHOT_VERSION = 1


def _rng_state_to_json(state: tuple) -> List[Any]:
    version, internal, gauss_next = state
    return [version, list(internal), gauss_next]


def _rng_state_from_json(data: List[Any]) -> tuple:
    version, internal, gauss_next = data
    return (version, tuple(internal), gauss_next)


def serialize_snapshot(game: GameState) -> Dict[str, Any]:
    """Serialize a GameState into a JSON-safe dict.

    The snapshot includes:
    - config and RNG state
    - players with hand, bank and property sets
    - deck (in draw order) and discard pile
    - turn bookkeeping, winner and any in-flight interaction
    - the full event log
    """
    pending = game.pending_action
    rent_card = game.pending_rent_card

    return {
        "version": SNAPSHOT_VERSION,
        "config": game.config.to_dict(),
        "rng_state": _rng_state_to_json(game.rng.getstate()),
        "players": [p.to_dict() for p in game.players],
        "deck": [c.to_dict() for c in game.deck],
        "discard_pile": [c.to_dict() for c in game.discard_pile],
        "active_player_index": game.active_player_index,
        "turn_number": game.turn_number,
        "phase": game.phase.value,
        "actions_remaining": game.actions_remaining,
        "winner": game.winner,
        "pending_action": pending.to_dict() if pending is not None else None,
        "pending_rent_card": rent_card.to_dict() if rent_card is not None else None,
        "events": [e.to_dict() for e in game.event_log.get_events()],
    }


def load_snapshot(data: Dict[str, Any]) -> GameState:
    """Rebuild a GameState from `serialize_snapshot` output.

    Raises:
        SnapshotError: if the payload is missing fields or holds bad values
    """
    if not isinstance(data, dict):
        raise SnapshotError(f"Snapshot must be a dict, got {type(data).__name__}")

    version = data.get("version", SNAPSHOT_VERSION)
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version}")

    try:
        config = GameConfig(**data["config"])
        players = [PlayerState.from_dict(p) for p in data["players"]]
        if len(players) != 2:
            raise SnapshotError(f"Snapshot must hold two players, got {len(players)}")

        game = GameState(config, [Player(p.player_index, p.name, p.is_ai) for p in players])
        game.players = players
        game.deck = [Card.from_dict(c) for c in data["deck"]]
        game.discard_pile = [Card.from_dict(c) for c in data["discard_pile"]]
        game.active_player_index = int(data["active_player_index"])
        game.turn_number = int(data["turn_number"])
        game.phase = GamePhase(data["phase"])
        game.actions_remaining = int(data["actions_remaining"])
        winner = data.get("winner")
        game.winner = int(winner) if winner is not None else None

        pending = data.get("pending_action")
        game.pending_action = PendingAction.from_dict(pending) if pending else None
        rent_card = data.get("pending_rent_card")
        game.pending_rent_card = Card.from_dict(rent_card) if rent_card else None

        game.event_log.events = [GameEvent.from_dict(e) for e in data.get("events", [])]

        rng_state = data.get("rng_state")
        if rng_state is not None:
            game.rng.setstate(_rng_state_from_json(rng_state))
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e

    if game.active_player_index not in (0, 1):
        raise SnapshotError(f"Invalid active player index: {game.active_player_index}")

    return game
