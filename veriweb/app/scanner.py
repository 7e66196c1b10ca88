"""
Heuristic URL scanner.

Runs the whole pipeline for one URL:

    parse -> extract signals -> score -> classify -> assemble result

Every stage is logged at DEBUG and can be observed through the optional
``on_stage`` callback. Nothing here performs I/O or keeps state between
calls, so ``analyze`` may be called concurrently from any number of threads.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .heuristics import DEFAULT_RULES, extract_signals
from .parser import parse_url
from .scoring import Status, classify_score, score_signals

logger = logging.getLogger("scanner")

RECOMMENDATIONS = {
    Status.SAFE: (
        "Always check for HTTPS and verify the domain name carefully before entering information.",
    ),
    Status.SUSPICIOUS: (
        "Avoid entering credentials or personal information on this site.",
        "Verify the domain manually before proceeding.",
    ),
    Status.MALICIOUS: (
        "Do not click this link or open it in a browser.",
        "Report this URL to your security team or the impersonated organization.",
    ),
}

NO_SIGNALS_EXPLANATION = "No risk indicators were found; the URL has a standard structure."


class AnalysisStage(str, Enum):
    PROCESSING = 'PROCESSING'
    EXTRACTION = 'EXTRACTION'
    PATTERN_ANALYSIS = 'PATTERN_ANALYSIS'
    PREDICTION = 'PREDICTION'
    COMPLETED = 'COMPLETED'


@dataclass(frozen=True)
class AnalysisResult:
    score: int
    status: Status
    threats: tuple
    recommendations: tuple
    explanation: str

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "status": self.status.value,
            "threats": list(self.threats),
            "recommendations": list(self.recommendations),
            "explanation": self.explanation,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


def top_signal(signals):
    """Highest-weight signal; the earliest one wins a tie."""
    best = None
    for signal in signals:
        if best is None or signal.weight > best.weight:
            best = signal
    return best


def explain(signals) -> str:
    if not signals:
        return NO_SIGNALS_EXPLANATION
    count = len(signals)
    noun = "indicator" if count == 1 else "indicators"
    return f"Found {count} risk {noun}. Most significant: {top_signal(signals).description}."


def assemble_result(signals, score: int, status: Status) -> AnalysisResult:
    return AnalysisResult(
        score=score,
        status=status,
        threats=tuple(s.description for s in signals),
        recommendations=RECOMMENDATIONS[status],
        explanation=explain(signals),
    )


def analyze(url, rules=DEFAULT_RULES,
            on_stage: Optional[Callable[[AnalysisStage], None]] = None) -> AnalysisResult:
    """
    Classify url as SAFE, SUSPICIOUS or MALICIOUS.

    Never raises for malformed input: an empty or non-string url is scored
    as a URL without a host.
    """
    def enter(stage: AnalysisStage) -> None:
        logger.debug("stage=%s", stage.value)
        if on_stage is not None:
            on_stage(stage)

    # -------------------------------------
    # 1. URL PROCESSING
    # -------------------------------------
    enter(AnalysisStage.PROCESSING)
    parsed = parse_url(url)

    # -------------------------------------
    # 2. FEATURE EXTRACTION
    # -------------------------------------
    enter(AnalysisStage.EXTRACTION)
    signals = extract_signals(parsed, rules)
    logger.debug("signals=%s", [s.id.value for s in signals])

    # -------------------------------------
    # 3. PATTERN ANALYSIS (scoring)
    # -------------------------------------
    enter(AnalysisStage.PATTERN_ANALYSIS)
    score = score_signals(signals)

    # -------------------------------------
    # 4. RISK PREDICTION
    # -------------------------------------
    enter(AnalysisStage.PREDICTION)
    status = classify_score(score)

    result = assemble_result(signals, score, status)
    enter(AnalysisStage.COMPLETED)
    logger.info("Analyzed %r: score=%d status=%s", parsed.raw, score, status.value)
    return result
