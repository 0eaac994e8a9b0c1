from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from monodeal.agents.base import Agent
from monodeal.game.game import GamePhase, GameState
from monodeal.game.rules import Move, MoveType, apply_move, get_legal_moves, parse_move_request
from monodeal.settings import RunnerSettings, get_runner_settings
from monodeal.snapshot import serialize_snapshot

logger = logging.getLogger(__name__)


class GameRunner:
    """Owns a single GameState and runs it asynchronously.

    Responsibilities:
    - Start turns and drive automated players through their turns
    - Answer counter-play windows for automated players
    - Apply move requests coming from human players
    - Broadcast snapshots and new events to subscribers

    Every state change goes through `apply_move`; the runner only swaps in
    the state it returns.
    """

    def __init__(
        self,
        game: GameState,
        agents: List[Optional[Agent]],
        settings: Optional[RunnerSettings] = None,
        tick_ms: Optional[int] = None,
    ):
        if len(agents) != len(game.players):
            raise ValueError("Need one agent slot per player (None for humans)")
        for i, agent in enumerate(agents):
            if agent is not None and not game.players[i].is_ai:
                raise ValueError(f"Player {i} has an agent but is not marked as automated")

        self.game = game
        self.agents = agents
        settings = settings or get_runner_settings()

        # pacing (seconds); tick_ms overrides every delay
        if tick_ms is not None:
            tick = max(0.0, tick_ms / 1000.0)
            self._move_delay = self._counter_delay = self._start_turn_delay = tick
        else:
            self._move_delay = settings.move_delay_ms / 1000.0
            self._counter_delay = settings.counter_delay_ms / 1000.0
            self._start_turn_delay = settings.start_turn_delay_ms / 1000.0

        self._task: Optional[asyncio.Task] = None
        self._stop = asyncio.Event()
        self._clients: Set[asyncio.Queue] = set()
        self._last_event_idx = len(self.game.event_log)
        self._apply_lock = asyncio.Lock()
        self._new_action_event = asyncio.Event()
        # Set while an automated turn is awaiting proposals or applying them
        self._ai_busy = False

    # ---- Lifecycle ----

    async def start(self) -> None:
        self._task = asyncio.create_task(self.run())

    async def stop(self) -> None:
        self._stop.set()
        self._new_action_event.set()
        if self._task:
            await self._task

    async def run(self, max_turns: Optional[int] = None) -> GameState:
        """Drive the game until it is won, stopped, or max_turns is passed."""
        try:
            if self.game.phase == GamePhase.LOBBY:
                await self._apply(Move(MoveType.START_GAME))

            while not self.game.game_over and not self._stop.is_set():
                if max_turns is not None and self.game.turn_number > max_turns:
                    logger.info("Stopping after %d turns without a winner", max_turns)
                    break
                await self.step()

            await self.flush_and_broadcast()
        finally:
            for agent in self.agents:
                if agent is not None:
                    await agent.aclose()
        return self.game

    async def step(self) -> None:
        """Advance the game by whatever the current situation calls for."""
        game = self.game
        pending = game.pending_action

        if pending is not None and not pending.awaiting_target:
            agent = self.agents[pending.responder_index]
            if agent is None:
                await self._wait_for_external_action()
                return
            await asyncio.sleep(self._counter_delay)
            use_counter = await agent.respond_to_action(self.game)
            await self._apply(Move(MoveType.RESPOND, use_counter=bool(use_counter)))
            return

        if game.phase == GamePhase.START_TURN:
            await asyncio.sleep(self._start_turn_delay)
            await self._apply(Move(MoveType.START_TURN))
            return

        agent = self.agents[game.active_player_index]
        if game.phase == GamePhase.PLAY_PHASE and agent is not None:
            await self._play_automated_turn(agent)
            return

        await self._wait_for_external_action()

    async def _play_automated_turn(self, agent: Agent) -> None:
        if self._ai_busy:
            return
        self._ai_busy = True
        try:
            try:
                moves = await agent.propose_moves(self.game)
            except Exception:
                logger.exception("Agent %r failed to propose moves; ending its turn", agent)
                moves = []
            for move in moves or []:
                if not isinstance(move, Move):
                    logger.warning("Agent %r proposed a malformed move: %r", agent, move)
                    break
                if move.move_type == MoveType.END_TURN:
                    break
                if self.game.actions_remaining <= 0:
                    break

                if not await self._apply(move):
                    logger.debug("Skipping rejected move %r from %r", move, agent)
                    continue
                await asyncio.sleep(self._move_delay)

                if self.game.game_over or self.game.pending_action is not None:
                    break
        finally:
            self._ai_busy = False

        # A contested action keeps the turn open until it resolves
        if not self.game.game_over and self.game.pending_action is None:
            await self._apply(Move(MoveType.END_TURN))

    async def _apply(self, move: Move) -> bool:
        async with self._apply_lock:
            new_state = apply_move(self.game, move)
            if new_state is self.game:
                return False
            self.game = new_state
        await self.flush_and_broadcast()
        return True

    # ---- External control helpers ----

    async def get_legal_moves(self, player_index: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return legal moves for given player (or current)."""
        idx = player_index if player_index is not None else self.game.active_player_index
        return [m.to_dict() for m in get_legal_moves(self.game, idx)]

    async def apply_move_request(
        self, data: Dict[str, Any], player_index: Optional[int] = None
    ) -> Tuple[bool, str]:
        """Try to apply a move request for a player. Returns (accepted, reason)."""
        move = parse_move_request(data)
        if move is None:
            return False, "malformed move request"

        if player_index is not None and player_index != self._actor_for(move):
            return False, "not this player's move"

        accepted = await self._apply(move)
        self._new_action_event.set()
        return (True, "") if accepted else (False, "move rejected")

    def _actor_for(self, move: Move) -> int:
        pending = self.game.pending_action
        if move.move_type == MoveType.RESPOND and pending is not None:
            return pending.responder_index
        return self.game.active_player_index

    async def _wait_for_external_action(self) -> None:
        # Wait until an external move is applied or stop is requested
        self._new_action_event.clear()
        try:
            await asyncio.wait_for(self._new_action_event.wait(), timeout=0.5)
        except asyncio.TimeoutError:
            pass

    # ---- Subscriptions ----

    async def subscribe(self) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue()
        self._clients.add(q)
        await q.put({
            "type": "snapshot",
            "snapshot": serialize_snapshot(self.game),
            "last_event_index": self._last_event_idx - 1,
        })
        return q

    async def unsubscribe(self, q: asyncio.Queue) -> None:
        self._clients.discard(q)

    async def _broadcast(self, payload: Dict[str, Any]) -> None:
        for q in list(self._clients):
            try:
                q.put_nowait(payload)
            except asyncio.QueueFull:
                # Drop client if it cannot keep up
                self._clients.discard(q)

    async def flush_and_broadcast(self) -> None:
        events = self.game.event_log.events
        if self._last_event_idx >= len(events):
            return
        start = self._last_event_idx
        self._last_event_idx = len(events)
        if not self._clients:
            return
        await self._broadcast({
            "type": "events",
            "events": [e.to_dict() for e in events[start:]],
            "from_index": start,
            "to_index": len(events) - 1,
        })
        await self._broadcast({
            "type": "snapshot",
            "snapshot": serialize_snapshot(self.game),
            "last_event_index": len(events) - 1,
        })

    # ---- Status helpers ----

    async def status(self) -> Dict[str, Any]:
        pending = self.game.pending_action
        return {
            "turn_number": self.game.turn_number,
            "active_player_index": self.game.active_player_index,
            "phase": self.game.phase.value,
            "actions_remaining": self.game.actions_remaining,
            "awaiting_response_from": (
                pending.responder_index
                if pending is not None and not pending.awaiting_target
                else None
            ),
            "automated": [a is not None for a in self.agents],
            "game_over": self.game.game_over,
            "winner": self.game.winner,
        }
