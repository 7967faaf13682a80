"""Keyword triage: category and final severity for an incoming SOS message."""
from __future__ import annotations

from typing import List, Tuple

from loguru import logger

from sos_dispatch.config import MAX_SEVERITY, MIN_SEVERITY
from sos_dispatch.errors import InvalidSeverity
from sos_dispatch.models import Category, TriageResult

# Evaluated top to bottom, first match wins. "fire and trapped" is Fire.
CATEGORY_KEYWORDS: Tuple[Tuple[Category, Tuple[str, ...]], ...] = (
    (Category.FLOOD, ("flood", "water")),
    (Category.FIRE, ("fire", "smoke")),
    (Category.STRUCTURAL, ("collapse", "trapped")),
    (Category.MEDICAL, ("medical", "unconscious", "doctor")),
)

CRITICAL_KEYWORDS = ("trapped", "unconscious", "bleeding", "rising", "chest pain", "baby")
HIGH_KEYWORDS = ("smoke", "stuck", "flood", "elderly", "fire")

CRITICAL_BOOST = 2
HIGH_BOOST = 1


def validate_severity(declared_severity: int) -> int:
    # bool is an int subclass; a checkbox value is not a severity.
    if isinstance(declared_severity, bool) or not isinstance(declared_severity, int):
        raise InvalidSeverity(f"Severity must be an integer, got {declared_severity!r}")
    if not MIN_SEVERITY <= declared_severity <= MAX_SEVERITY:
        raise InvalidSeverity(
            f"Severity {declared_severity} outside [{MIN_SEVERITY}, {MAX_SEVERITY}]"
        )
    return declared_severity


def classify(message: str) -> Category:
    text = message.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return category
    return Category.GENERAL


def matched_signals(message: str) -> List[str]:
    """Return the escalation keywords found in ``message`` from the tier that fired."""

    text = message.lower()
    critical = [keyword for keyword in CRITICAL_KEYWORDS if keyword in text]
    if critical:
        return critical
    return [keyword for keyword in HIGH_KEYWORDS if keyword in text]


def score(message: str, declared_severity: int) -> int:
    """Escalate the reporter's severity by keyword signal and clamp to [1, 5].

    CRITICAL keywords add 2, otherwise HIGH keywords add 1. The tiers do not
    stack.
    """

    validate_severity(declared_severity)
    text = message.lower()

    result = declared_severity
    if any(keyword in text for keyword in CRITICAL_KEYWORDS):
        result += CRITICAL_BOOST
    elif any(keyword in text for keyword in HIGH_KEYWORDS):
        result += HIGH_BOOST

    return min(MAX_SEVERITY, max(MIN_SEVERITY, result))


def triage(message: str, declared_severity: int) -> TriageResult:
    category = classify(message)
    severity = score(message, declared_severity)
    signals = matched_signals(message)
    logger.debug(
        "Triaged message as {} with severity {} (declared {}, signals {})",
        category.value,
        severity,
        declared_severity,
        signals,
    )
    return TriageResult(category=category, severity=severity, signals=signals)
