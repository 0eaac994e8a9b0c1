"""
Custom exception hierarchy for the MonoDeal engine and its collaborators.

The engine itself never raises for bad moves (they are no-ops); these cover
the layers around it.
"""


class MonoDealError(Exception):
    """Base exception for all game-related errors."""


class LLMError(MonoDealError):
    """LLM move-suggestion service communication failed."""


class SnapshotError(MonoDealError):
    """A state snapshot could not be decoded."""
