"""Rule-based compliance engine.

Evaluates each clause in isolation against every rule in the rule table
and sums the fixed risk points of all findings into a capped score.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from .models import Clause, EvaluationResult, Finding
from .rules import DEFAULT_RULES, ComplianceRule

logger = logging.getLogger(__name__)

MIN_RISK_SCORE = 0
MAX_RISK_SCORE = 100


def aggregate_risk_score(findings: Iterable[Finding]) -> int:
    """Sum finding scores and clamp the total to [0, 100].

    The sum is not normalised by clause count, so long documents saturate
    at the cap.
    """
    total = sum(f.risk_score for f in findings)
    return max(MIN_RISK_SCORE, min(MAX_RISK_SCORE, total))


class ComplianceEngine:
    """Score clauses against a fixed, declarative rule table.

    Rules are not mutually exclusive: a clause yields one finding per rule
    it matches.

    Example::

        engine = ComplianceEngine()
        result = engine.evaluate(clauses)
        print(f"{result.findings_count} findings, score {result.risk_score}")

    Args:
        rules: Rule table to evaluate. Uses the built-in rules if None.
    """

    def __init__(self, rules: Sequence[ComplianceRule] | None = None) -> None:
        self.rules = tuple(rules) if rules is not None else DEFAULT_RULES

    def evaluate(self, clauses: object) -> EvaluationResult:
        """Evaluate clauses and return findings with the aggregate score.

        Args:
            clauses: ``Clause`` objects or mappings with ``id`` and ``text``.
                Anything other than a list or tuple counts as no clauses,
                and entries of any other type are skipped.

        Returns:
            EvaluationResult with findings in clause order, then rule order.
        """
        if not isinstance(clauses, (list, tuple)):
            clauses = []

        findings: list[Finding] = []
        for item in clauses:
            clause = self._coerce_clause(item)
            if clause is None:
                continue
            findings.extend(self.evaluate_clause(clause))

        score = aggregate_risk_score(findings)
        logger.debug(
            "Evaluated %d clauses: %d findings, risk score %d",
            len(clauses),
            len(findings),
            score,
        )
        return EvaluationResult(findings=findings, risk_score=score)

    def evaluate_clause(self, clause: Clause) -> list[Finding]:
        """Return one finding per rule the clause matches."""
        return [
            rule.make_finding(clause.id) for rule in self.rules if rule.matches(clause.text)
        ]

    @staticmethod
    def _coerce_clause(item: object) -> Clause | None:
        if isinstance(item, Clause):
            return item
        if isinstance(item, Mapping):
            return Clause.from_dict(item)
        return None
