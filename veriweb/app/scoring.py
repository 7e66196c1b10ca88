"""Additive safety score and status bands.

The score starts at 100 (nothing suspicious) and every fired signal takes its
weight off. Clamping happens once, after all signals are applied, so the
score is always in 0..100.
"""

from enum import Enum

MAX_SCORE = 100
MIN_SCORE = 0

# Lower bound (inclusive) of each band
SAFE_THRESHOLD = 80
SUSPICIOUS_THRESHOLD = 50


class Status(str, Enum):
    SAFE = 'SAFE'
    SUSPICIOUS = 'SUSPICIOUS'
    MALICIOUS = 'MALICIOUS'


def score_signals(signals) -> int:
    score = MAX_SCORE
    for signal in signals:
        score -= signal.weight
    return int(max(MIN_SCORE, min(MAX_SCORE, score)))


def classify_score(score: int) -> Status:
    """Map a score to its band. Boundary values go to the safer band."""
    if score >= SAFE_THRESHOLD:
        return Status.SAFE
    if score >= SUSPICIOUS_THRESHOLD:
        return Status.SUSPICIOUS
    return Status.MALICIOUS
