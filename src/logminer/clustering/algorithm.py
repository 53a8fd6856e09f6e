"""
Token distance for log line clustering.

The distance between two token sequences P and Q is

    Dist(P, Q) = 1 - SUM[i=1..Min(len(P), len(Q))] Score(P[i], Q[i]) / Max(len(P), len(Q))

with Score(x, y) = 1 if x == y, 0 otherwise (LogMine, Hamooni et al.).
"""

from __future__ import annotations

from typing import Sequence


TOKEN_SEPARATOR = " "


def tokenize(line: str) -> list[str]:
    """Split a line into tokens on single spaces (empty line -> [""])."""
    return line.split(TOKEN_SEPARATOR)


def score(x: str, y: str) -> float:
    """Score two tokens: 1.0 if identical, 0.0 otherwise."""
    return 1.0 if x == y else 0.0


def distance(p: Sequence[str], q: Sequence[str], max_distance: float) -> float:
    """
    Distance between two token sequences, stopping as soon as the verdict
    against max_distance is known.

    Returns the running distance once it drops below max_distance, or 1.0 once
    a match can no longer be reached even if every remaining aligned position
    matched. Either way `distance(p, q, t) < t` agrees with
    `full_distance(p, q) < t`.

    Two empty sequences have distance 0.0.
    """
    longest = max(len(p), len(q))
    if longest == 0:
        return 0.0

    matched = 0
    remaining = min(len(p), len(q))
    for x, y in zip(p, q):
        if score(x, y):
            matched += 1
        remaining -= 1

        current = 1.0 - matched / longest
        if current < max_distance:
            return current
        # Best case from here on: every remaining aligned token matches
        if 1.0 - (matched + remaining) / longest >= max_distance:
            return 1.0

    return 1.0 - matched / longest


def full_distance(p: Sequence[str], q: Sequence[str]) -> float:
    """Distance between two token sequences, scanning every aligned position."""
    longest = max(len(p), len(q))
    if longest == 0:
        return 0.0
    matched = sum(1 for x, y in zip(p, q) if score(x, y))
    return 1.0 - matched / longest
