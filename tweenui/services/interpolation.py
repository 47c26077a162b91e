"""
Recursive interpolation engine.

Given two endpoint artifacts, each round asks the oracle for a midpoint at
every adjacency of the current sequence, so a 2-artifact sequence grows to
3, 5, then 9 artifacts. Later rounds refine every boundary rather than only
splitting the original pair.

Rounds are capped at MAX_ROUNDS whatever the caller asks for: every midpoint
is a paid network round trip, and 3 rounds is already 7 calls.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from tweenui.errors import GenerationFailed, InterpolationFailed, InvalidInput
from tweenui.models.artifact import Artifact
from tweenui.services.oracle import OracleClient
from tweenui.services.prompt_builder import position_label

logger = logging.getLogger(__name__)

MAX_ROUNDS = 3


def clamp_rounds(requested: int) -> int:
    """Clamp a requested round count into [0, MAX_ROUNDS]."""
    return max(0, min(requested, MAX_ROUNDS))


def expected_length(rounds: int, initial: int = 2) -> int:
    """Sequence length after `rounds` rounds: every round inserts one artifact per adjacency."""
    length = initial
    for _ in range(clamp_rounds(rounds)):
        length = 2 * length - 1
    return length


def midpoint(a: Artifact, b: Artifact, code: str, round_index: int, pair_index: int) -> Artifact:
    return Artifact(
        id=f"intermediate-{round_index}-{pair_index}",
        code=code,
        label=f"{a.label} → {b.label}",
    )


async def _midpoint_codes(
    oracle: OracleClient,
    sequence: Sequence[Artifact],
    round_index: int,
    max_rounds: int,
    parallel: bool,
) -> list[str]:
    """Ask the oracle for every adjacency of one round, in adjacency order."""
    pairs = list(zip(sequence, sequence[1:]))

    if not parallel:
        codes = []
        for pair_index, (a, b) in enumerate(pairs):
            try:
                codes.append(await oracle.interpolate_once(a, b, position_label(a, b, round_index, max_rounds)))
            except GenerationFailed as e:
                raise InterpolationFailed(round_index, pair_index, str(e)) from e
        return codes

    results = await asyncio.gather(
        *(oracle.interpolate_once(a, b, position_label(a, b, round_index, max_rounds)) for a, b in pairs),
        return_exceptions=True,
    )
    for pair_index, result in enumerate(results):
        if isinstance(result, GenerationFailed):
            raise InterpolationFailed(round_index, pair_index, str(result)) from result
        if isinstance(result, BaseException):
            raise result
    return list(results)


async def expand(
    oracle: OracleClient,
    sequence: Sequence[Artifact],
    round_index: int,
    max_rounds: int,
    parallel: bool = False,
) -> list[Artifact]:
    """
    Run rounds round_index..max_rounds-1 over `sequence`.

    Builds a new list each round; `sequence` and its artifacts are never
    mutated, so a failure leaves the caller's data exactly as it was.

    Raises:
        InterpolationFailed: On the first failing oracle call
    """
    if round_index >= max_rounds:
        return list(sequence)

    t_start = time.time()
    codes = await _midpoint_codes(oracle, sequence, round_index, max_rounds, parallel)

    next_sequence: list[Artifact] = []
    for i, artifact in enumerate(sequence):
        next_sequence.append(artifact)
        if i < len(sequence) - 1:
            next_sequence.append(midpoint(artifact, sequence[i + 1], codes[i], round_index, i))

    logger.info(
        "interpolation: round %d/%d done calls=%d length=%d elapsed_ms=%d",
        round_index + 1,
        max_rounds,
        len(codes),
        len(next_sequence),
        int((time.time() - t_start) * 1000),
    )
    return await expand(oracle, next_sequence, round_index + 1, max_rounds, parallel)


async def interpolate(
    oracle: OracleClient,
    endpoint_a: Artifact | None,
    endpoint_b: Artifact | None,
    rounds: int = MAX_ROUNDS,
    parallel: bool = False,
) -> list[Artifact]:
    """
    Build the full sequence from endpoint_a to endpoint_b.

    Args:
        oracle: Oracle handle used for every midpoint
        endpoint_a: First endpoint (position 0)
        endpoint_b: Last endpoint
        rounds: Requested rounds, clamped to [0, MAX_ROUNDS]
        parallel: Issue a round's calls concurrently (result order is unchanged)

    Returns:
        New list of 2**rounds + 1 artifacts; the first and last are the endpoints passed in

    Raises:
        InvalidInput: Missing endpoint or endpoint without code (no oracle call made)
        InterpolationFailed: Any midpoint call failed; no partial sequence is returned
    """
    if endpoint_a is None or endpoint_b is None:
        raise InvalidInput("Both endpoints are required")
    if not endpoint_a.code.strip() or not endpoint_b.code.strip():
        raise InvalidInput("Both endpoints must have code")

    max_rounds = clamp_rounds(rounds)
    if max_rounds != rounds:
        logger.info("interpolation: requested rounds=%d clamped to %d", rounds, max_rounds)

    logger.info(
        "interpolation: start a=%s b=%s rounds=%d expected_states=%d parallel=%s",
        endpoint_a.id,
        endpoint_b.id,
        max_rounds,
        expected_length(max_rounds),
        parallel,
    )

    try:
        result = await expand(oracle, [endpoint_a, endpoint_b], 0, max_rounds, parallel)
    except InterpolationFailed as e:
        logger.warning(
            "interpolation: aborted round=%d pair=%d reason=%s",
            e.round_index,
            e.pair_index,
            e.reason,
        )
        raise

    logger.info("interpolation: complete length=%d", len(result))
    return result
