"""Declarative compliance rules.

Each rule is a conjunction of term groups: a clause matches when every
group has at least one of its terms somewhere in the lower-cased clause
text. Matching is plain substring search, so "terminate" also matches
inside "terminates", while "termination" does not contain it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Finding, Severity, new_id


@dataclass(frozen=True)
class ComplianceRule:
    """A fixed pattern mapped to a fixed severity, explanation and score."""

    key: str
    title: str
    severity: Severity
    risk_score: int
    explanation: str
    # Every group must match; any term within a group is enough
    required: tuple[tuple[str, ...], ...]

    def matches(self, text: str) -> bool:
        lower = text.lower()
        return all(any(term in lower for term in group) for group in self.required)

    def make_finding(self, clause_id: str) -> Finding:
        return Finding(
            id=new_id(),
            severity=self.severity,
            title=self.title,
            explanation=self.explanation,
            clause_id=clause_id,
            risk_score=self.risk_score,
        )


UNILATERAL_TERMINATION = ComplianceRule(
    key="unilateral_termination",
    title="Unilateral termination",
    severity=Severity.HIGH,
    risk_score=30,
    explanation=(
        "This allows termination without cause. Consider adding a notice period, "
        "limiting termination for convenience, and adding cure rights."
    ),
    required=(("terminate",), ("for convenience", "at any time")),
)

BROAD_INDEMNITY = ComplianceRule(
    key="broad_indemnity",
    title="Broad indemnity",
    severity=Severity.MEDIUM,
    risk_score=12,
    explanation=(
        "Indemnity appears broad. Consider narrowing scope, adding caps, "
        "and excluding consequential damages."
    ),
    required=(("indemnify",), ("any and all", "all claims")),
)

UNLIMITED_LIABILITY = ComplianceRule(
    key="unlimited_liability",
    title="Unlimited liability",
    severity=Severity.HIGH,
    risk_score=30,
    explanation=(
        "Unlimited liability is high risk. Consider adding a liability cap tied "
        "to fees paid or insurance limits."
    ),
    required=(("limitation of liability",), ("unlimited",)),
)

PERPETUAL_CONFIDENTIALITY = ComplianceRule(
    key="perpetual_confidentiality",
    title="Perpetual confidentiality",
    severity=Severity.LOW,
    risk_score=5,
    explanation=(
        "Perpetual confidentiality can be hard to comply with. Consider "
        "time-limiting confidentiality except for trade secrets."
    ),
    required=(("confidential",), ("perpetual",)),
)

# Evaluation order; findings for one clause come out in this order
DEFAULT_RULES: tuple[ComplianceRule, ...] = (
    UNILATERAL_TERMINATION,
    BROAD_INDEMNITY,
    UNLIMITED_LIABILITY,
    PERPETUAL_CONFIDENTIALITY,
)
