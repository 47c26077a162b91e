"""
TweenUI error kinds.

All failures originate at the oracle boundary or at input validation.
Text transforms (fence stripping, stream accumulation) never raise.
"""

from __future__ import annotations


class TweenUIError(Exception):
    """Base class for all TweenUI errors."""

    pass


class GenerationFailed(TweenUIError):
    """The oracle call failed (transport or API error). Never retried."""

    pass


class InvalidInput(TweenUIError):
    """A request was rejected before any oracle call was issued."""

    pass


class SessionBusy(TweenUIError):
    """A generation or interpolation is already in flight for this session."""

    pass


class InterpolationFailed(TweenUIError):
    """
    The recursive expansion was aborted by a failing oracle call.

    Carries the round and adjacency index of the first failure; the
    underlying GenerationFailed is chained as __cause__.
    """

    def __init__(self, round_index: int, pair_index: int, reason: str = ""):
        self.round_index = round_index
        self.pair_index = pair_index
        self.reason = reason
        message = f"Interpolation failed at round {round_index}, pair {pair_index}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
