"""
High-level rules API for controlling game flow.

`apply_move` is the engine's only transition function: it never mutates
the state it is given. A rejected or malformed move returns that same
state object unchanged.
"""

import logging
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from monodeal.game.cards import CardType
from monodeal.game.game import GamePhase, GameState
from monodeal.game.contested import PendingActionType

logger = logging.getLogger(__name__)


class MoveType(Enum):
    """Types of moves a player can request."""

    START_GAME = "START_GAME"
    START_TURN = "START_TURN"
    BANK = "BANK"
    PROPERTY = "PROPERTY"
    ACTION_PLAY = "ACTION_PLAY"
    COLLECT_RENT = "COLLECT_RENT"
    SELECT_TARGET = "SELECT_TARGET"
    RESPOND = "RESPOND"
    CANCEL = "CANCEL"
    END_TURN = "END_TURN"


_CARD_MOVES = {MoveType.BANK, MoveType.PROPERTY, MoveType.ACTION_PLAY}


class Move:
    """Represents a move that can be applied to a game."""

    def __init__(self, move_type: MoveType, **params: Any):
        self.move_type = move_type
        self.params = params

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.move_type.value, **self.params}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Move):
            return NotImplemented
        return self.move_type == other.move_type and self.params == other.params

    def __repr__(self) -> str:
        return f"Move({self.move_type.value}, {self.params})"


class MoveRequest(BaseModel):
    """Wire shape of a move request. Accepts snake_case or camelCase keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    action: MoveType
    card_id: Optional[str] = Field(default=None, alias="cardId")
    set_index: Optional[int] = Field(default=None, alias="setIndex")
    my_set_index: Optional[int] = Field(default=None, alias="mySetIndex")
    target_set_index: Optional[int] = Field(default=None, alias="targetSetIndex")
    use_counter: Optional[bool] = Field(default=None, alias="useCounter")

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @model_validator(mode="after")
    def check_required_fields(self) -> "MoveRequest":
        if self.action in _CARD_MOVES and not self.card_id:
            raise ValueError(f"{self.action.value} requires card_id")
        if self.action == MoveType.COLLECT_RENT and self.set_index is None:
            raise ValueError("COLLECT_RENT requires set_index")
        if self.action == MoveType.SELECT_TARGET and self.target_set_index is None:
            raise ValueError("SELECT_TARGET requires target_set_index")
        if self.action == MoveType.RESPOND and self.use_counter is None:
            raise ValueError("RESPOND requires use_counter")
        return self

    def to_move(self) -> Move:
        params = {
            key: value
            for key, value in self.model_dump(exclude={"action"}).items()
            if value is not None
        }
        return Move(self.action, **params)


def parse_move_request(data: Any) -> Optional[Move]:
    """
    Turn a raw move request (e.g. decoded JSON) into a Move.

    Returns None for anything malformed.
    """
    if not isinstance(data, dict):
        return None
    try:
        return MoveRequest.model_validate(data).to_move()
    except ValidationError as e:
        logger.debug("Malformed move request %r: %s", data, e)
        return None


def get_legal_moves(game_state: GameState, player_index: int) -> List[Move]:
    """
    Get the moves worth offering to a player right now.

    Target selection only lists incomplete, non-empty sets even though the
    engine accepts any index and lets an impossible target fizzle.

    Args:
        game_state: Current game state
        player_index: Player to get moves for

    Returns:
        List of Move objects
    """
    if game_state.game_over:
        return []

    if game_state.phase == GamePhase.LOBBY:
        return [Move(MoveType.START_GAME)]

    is_active = player_index == game_state.active_player_index
    player = game_state.players[player_index]
    opponent = game_state.get_opponent(player_index)
    moves: List[Move] = []

    pending = game_state.pending_action
    if pending is not None:
        if pending.awaiting_target:
            if player_index != pending.attacker_index:
                return []
            targets = [
                i for i, s in enumerate(opponent.properties) if s.cards and not s.is_complete
            ]
            if pending.action_type == PendingActionType.FORCE_DEAL:
                mine = [
                    i for i, s in enumerate(player.properties) if s.cards and not s.is_complete
                ]
                for my_idx in mine:
                    for target_idx in targets:
                        moves.append(
                            Move(MoveType.SELECT_TARGET, my_set_index=my_idx, target_set_index=target_idx)
                        )
            else:
                for target_idx in targets:
                    moves.append(Move(MoveType.SELECT_TARGET, target_set_index=target_idx))
            moves.append(Move(MoveType.CANCEL))
            return moves

        if player_index != pending.responder_index:
            return []
        if player.find_counter_card() is not None:
            moves.append(Move(MoveType.RESPOND, use_counter=True))
        moves.append(Move(MoveType.RESPOND, use_counter=False))
        return moves

    if not is_active:
        return []

    if game_state.pending_rent_card is not None:
        for i in range(len(player.properties)):
            moves.append(Move(MoveType.COLLECT_RENT, set_index=i))
        moves.append(Move(MoveType.CANCEL))
        return moves

    if game_state.phase == GamePhase.START_TURN:
        return [Move(MoveType.START_TURN)]

    if game_state.phase != GamePhase.PLAY_PHASE:
        return []

    if game_state.actions_remaining > 0:
        for card in player.hand:
            moves.append(Move(MoveType.BANK, card_id=card.id))
            if card.is_placeable:
                moves.append(Move(MoveType.PROPERTY, card_id=card.id))
            if card.card_type == CardType.RENT or (
                card.card_type == CardType.ACTION and card.action is not None
            ):
                moves.append(Move(MoveType.ACTION_PLAY, card_id=card.id))

    moves.append(Move(MoveType.END_TURN))
    return moves


def _index_param(params: Dict[str, Any], key: str) -> Optional[int]:
    value = params.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def _dispatch(game_state: GameState, move: Move) -> bool:
    """Apply a move in place. Returns True if the state changed."""
    params = move.params
    move_type = move.move_type

    if move_type in _CARD_MOVES:
        card_id = params.get("card_id")
        if not isinstance(card_id, str):
            return False
        if move_type == MoveType.BANK:
            return game_state.bank_card(card_id)
        if move_type == MoveType.PROPERTY:
            return game_state.play_property(card_id)
        return game_state.play_action(card_id)

    if move_type == MoveType.COLLECT_RENT:
        set_index = _index_param(params, "set_index")
        if set_index is None:
            return False
        return game_state.collect_rent(set_index)

    if move_type == MoveType.SELECT_TARGET:
        return game_state.select_target(
            _index_param(params, "my_set_index"),
            _index_param(params, "target_set_index"),
        )

    if move_type == MoveType.RESPOND:
        use_counter = params.get("use_counter")
        if not isinstance(use_counter, bool):
            return False
        return game_state.resolve_pending(use_counter)

    if move_type == MoveType.CANCEL:
        if game_state.phase != GamePhase.PLAY_PHASE:
            return False
        return game_state.cancel_interaction()

    if move_type == MoveType.START_GAME:
        return game_state.start_game()

    if move_type == MoveType.START_TURN:
        return game_state.start_turn()

    if move_type == MoveType.END_TURN:
        return game_state.end_turn()

    return False


def apply_move(game_state: GameState, move: Optional[Move]) -> GameState:
    """
    Apply a move and return the resulting state.

    This is the main interface for executing moves. The given state is left
    untouched; when the move is invalid the very same object comes back.

    Args:
        game_state: Current game state
        move: Move to apply (None or a non-Move is treated as malformed)

    Returns:
        The new GameState, or game_state itself if nothing happened
    """
    if not isinstance(move, Move) or not isinstance(move.move_type, MoveType):
        logger.debug("Ignoring malformed move %r", move)
        return game_state

    new_state = game_state.copy()
    if _dispatch(new_state, move):
        return new_state

    logger.debug("Rejected %r in %r", move, game_state)
    return game_state


def replay(game_state: GameState, moves: Iterable[Move]) -> GameState:
    """Fold a sequence of moves over a state."""
    for move in moves:
        game_state = apply_move(game_state, move)
    return game_state
