"""LLM-powered agent for MonoDeal using an OpenAI-compatible API (vLLM/Ollama)."""

import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx

from monodeal.game.game import GameState
from monodeal.game.rules import Move, MoveType, parse_move_request

from monodeal.agents.base import Agent
from monodeal.exceptions import LLMError
from monodeal.settings import get_llm_settings

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

# Moves the model may propose; follow-ups are handled by the engine
_PROPOSABLE = {MoveType.BANK, MoveType.PROPERTY, MoveType.ACTION_PLAY, MoveType.END_TURN}


class LLMAgent(Agent):
    """
    LLM-powered agent that plans its turn with a language model.

    Supports vLLM, Ollama and other backends through their OpenAI-compatible
    endpoints (/v1/chat/completions).

    The agent:
    1. Summarizes its hand and both players' assets into compact JSON
    2. Builds a prompt from the system template, the strategy template and the state
    3. Queries the LLM for a JSON array of moves
    4. Validates every move against its hand and the actions remaining
    5. Falls back to ending the turn if the service fails or answers garbage

    Configuration comes from `LLMSettings` (LLM_* environment variables);
    constructor arguments override it.

    Attributes:
        player_index: The player's seat in the game.
        name: The player's display name.
        model_name: The LLM model name.
        strategy: Strategy template name (aggressive, balanced, defensive).
        base_url: Base URL for the OpenAI-compatible API.
        decision_callback: Optional callback receiving a record of each decision.
    """

    STRATEGIES = {"aggressive", "balanced", "defensive"}

    def __init__(
        self,
        player_index: int,
        name: str,
        model_name: Optional[str] = None,
        strategy: str = "balanced",
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        decision_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
        max_retries: int = 2,
    ):
        super().__init__(player_index, name)
        settings = get_llm_settings()

        self.model_name = model_name or settings.model
        self.strategy = strategy if strategy in self.STRATEGIES else "balanced"
        self.base_url = base_url or settings.base_url or "http://localhost:11434/v1"
        if api_key is not None:
            self.api_key = api_key
        elif settings.api_key is not None:
            self.api_key = settings.api_key.get_secret_value()
        else:
            self.api_key = None
        self.timeout_seconds = float(settings.timeout_seconds)
        self.max_tokens = int(settings.max_tokens)
        self.max_retries = max(1, max_retries)
        self.decision_callback = decision_callback

        self._client = client
        self._owns_client = client is None

        self._system_prompt = self._load_template("system_prompt.txt")
        self._strategy_prompt = self._load_template(f"{self.strategy}.txt")

        self._decision_count = 0

    def _load_template(self, filename: str) -> str:
        """Load a template file."""
        path = TEMPLATES_DIR / filename
        if path.exists():
            return path.read_text(encoding="utf-8")
        logger.warning("Template not found: %s", path)
        return ""

    async def propose_moves(self, game: GameState) -> List[Move]:
        """
        Plan the turn using LLM reasoning.

        Never raises: service errors and unusable answers end the turn.
        """
        start_time = time.time()
        self._decision_count += 1

        state_json = self._serialize_state(game)
        prompt = self._build_prompt(state_json, game.actions_remaining)

        raw_response = ""
        error_msg: Optional[str] = None
        moves: Optional[List[Move]] = None

        for attempt in range(self.max_retries):
            try:
                if attempt == 0:
                    raw_response = await self._query_llm(prompt)
                else:
                    logger.info(
                        "LLM Player %s: Retry attempt %d/%d",
                        self.player_index, attempt + 1, self.max_retries,
                    )
                    retry_prompt = self._build_retry_prompt(
                        prompt, raw_response, error_msg or "invalid response"
                    )
                    raw_response = await self._query_llm(retry_prompt)

                moves, error_msg = self._parse_response(raw_response, game)
                if moves is not None:
                    break
                logger.warning(
                    "LLM parse failed for player %s (attempt %d): %s",
                    self.player_index, attempt + 1, error_msg,
                )
            except LLMError as e:
                error_msg = str(e)
                logger.warning(
                    "LLM error for player %s (attempt %d): %s",
                    self.player_index, attempt + 1, error_msg,
                )

        used_fallback = moves is None
        if used_fallback:
            moves = [Move(MoveType.END_TURN)]

        processing_time_ms = int((time.time() - start_time) * 1000)

        if self.decision_callback:
            decision_data = {
                "player_index": self.player_index,
                "turn_number": game.turn_number,
                "sequence_number": self._decision_count,
                "game_state": state_json,
                "prompt": prompt,
                "raw_response": raw_response,
                "moves": [m.to_dict() for m in moves],
                "used_fallback": used_fallback,
                "error": error_msg,
                "processing_time_ms": processing_time_ms,
                "model_version": self.model_name,
                "strategy": self.strategy,
            }
            try:
                self.decision_callback(decision_data)
            except Exception as cb_err:
                logger.error("Decision callback error: %s", cb_err)

        logger.info(
            "LLM Player %s proposed %d move(s) (fallback=%s, time=%dms)",
            self.player_index, len(moves), used_fallback, processing_time_ms,
        )
        return moves

    def _serialize_state(self, game: GameState) -> Dict[str, Any]:
        """Compact view of the game from this player's seat."""
        me = game.players[self.player_index]
        opponent = game.get_opponent(self.player_index)

        def sets(player) -> List[Dict[str, Any]]:
            return [
                {"color": s.color.value, "count": len(s.cards), "is_complete": s.is_complete}
                for s in player.properties
            ]

        return {
            "turn": game.turn_number,
            "actions_remaining": game.actions_remaining,
            "hand": [
                {"id": c.id, "name": c.name, "type": c.card_type.value, "value": c.value}
                for c in me.hand
            ],
            "me": {"name": me.name, "bank": me.bank_value, "properties": sets(me)},
            "opponent": {
                "name": opponent.name,
                "bank": opponent.bank_value,
                "properties": sets(opponent),
            },
        }

    def _build_prompt(self, state: Dict[str, Any], actions_remaining: int) -> str:
        """Build the full prompt for the LLM."""
        prompt_parts = [
            self._system_prompt,
            "",
            self._strategy_prompt,
            "",
            "## Current Game State",
            "```json",
            json.dumps(state, indent=2),
            "```",
            "",
            f"Return a JSON array of moves (max {actions_remaining} moves):",
        ]
        return "\n".join(prompt_parts)

    def _build_retry_prompt(self, original_prompt: str, bad_response: str, error: str) -> str:
        """Build retry prompt with error feedback."""
        return f"""{original_prompt}

## IMPORTANT: Your previous response was INVALID!

**Error:** {error}

**Your invalid response was:**
{bad_response[:500] if bad_response else "(empty response)"}

You MUST respond with ONLY a JSON array of moves, nothing else.

**Correct format example:**
[{{"action": "PROPERTY", "cardId": "old-kent-road-1"}}, {{"action": "END_TURN"}}]

Respond now with the correct JSON:"""

    async def _query_llm(self, prompt: str) -> str:
        """Query the LLM using the OpenAI-compatible chat completions API."""
        url = f"{self.base_url.rstrip('/')}/chat/completions"
        payload = {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": 0.3,
        }
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"

        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)

        try:
            response = await self._client.post(
                url, json=payload, headers=headers or None, timeout=self.timeout_seconds
            )
            response.raise_for_status()
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise LLMError(f"LLM request failed: {e}") from e

        choices = result.get("choices") if isinstance(result, dict) else None
        if not choices:
            raise LLMError("Invalid LLM response format")

        choice = choices[0] if isinstance(choices, list) else None
        message = choice.get("message") if isinstance(choice, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise LLMError("Invalid LLM response format")
        content = content.strip()
        if not content:
            raise LLMError("LLM returned empty response")
        return content

    def _parse_response(
        self, raw_response: str, game: GameState
    ) -> Tuple[Optional[List[Move]], Optional[str]]:
        """
        Parse the LLM answer into a list of playable moves.

        Entries naming cards not in hand, repeated cards or unsupported
        actions are dropped. An END_TURN cuts the list short, and so does
        running out of actions.

        Returns:
            Tuple of (moves or None, error message)
        """
        if not raw_response:
            return None, "Empty response"

        text = raw_response.strip()
        json_start = text.find("[")
        json_end = text.rfind("]") + 1
        if json_start == -1 or json_end == 0:
            return None, f"No JSON array found in response: {text[:100]}"

        try:
            data = json.loads(text[json_start:json_end])
        except json.JSONDecodeError as e:
            return None, f"JSON parse error: {e}"

        if not isinstance(data, list):
            return None, "Response is not a JSON array"

        hand_ids = {c.id for c in game.players[self.player_index].hand}
        moves: List[Move] = []
        used = set()
        for entry in data:
            if len(moves) >= game.actions_remaining:
                break
            move = parse_move_request(entry)
            if move is None or move.move_type not in _PROPOSABLE:
                logger.debug("Dropping unusable LLM move %r", entry)
                continue
            if move.move_type == MoveType.END_TURN:
                break
            card_id = move.params.get("card_id")
            if card_id not in hand_ids or card_id in used:
                logger.debug("Dropping LLM move for unknown card %r", card_id)
                continue
            used.add(card_id)
            moves.append(move)

        if not moves:
            return [Move(MoveType.END_TURN)], None
        return moves, None

    async def aclose(self) -> None:
        """Clean up the HTTP client if this agent created it.

        `GameRunner.run` calls this on exit; callers driving the agent
        directly must await it themselves.
        """
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
