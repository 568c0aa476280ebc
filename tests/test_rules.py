"""Tests for the declarative compliance rules."""

from __future__ import annotations

import pytest

from doc_review_buddy.models import Severity
from doc_review_buddy.rules import (
    BROAD_INDEMNITY,
    DEFAULT_RULES,
    PERPETUAL_CONFIDENTIALITY,
    UNILATERAL_TERMINATION,
    UNLIMITED_LIABILITY,
    ComplianceRule,
)


class TestRuleTable:
    """The built-in rule table."""

    def test_order(self) -> None:
        assert [r.title for r in DEFAULT_RULES] == [
            "Unilateral termination",
            "Broad indemnity",
            "Unlimited liability",
            "Perpetual confidentiality",
        ]

    @pytest.mark.parametrize(
        "rule, severity, points",
        [
            (UNILATERAL_TERMINATION, Severity.HIGH, 30),
            (BROAD_INDEMNITY, Severity.MEDIUM, 12),
            (UNLIMITED_LIABILITY, Severity.HIGH, 30),
            (PERPETUAL_CONFIDENTIALITY, Severity.LOW, 5),
        ],
    )
    def test_fixed_attributes(self, rule: ComplianceRule, severity: Severity, points: int) -> None:
        assert rule.severity == severity
        assert rule.risk_score == points
        assert rule.explanation

    def test_keys_unique(self) -> None:
        keys = [r.key for r in DEFAULT_RULES]
        assert len(set(keys)) == len(keys)


class TestUnilateralTermination:
    def test_for_convenience(self) -> None:
        assert UNILATERAL_TERMINATION.matches("Client may terminate for convenience.")

    def test_at_any_time(self) -> None:
        assert UNILATERAL_TERMINATION.matches("Provider may terminate at any time.")

    def test_substring_inside_longer_word(self) -> None:
        assert UNILATERAL_TERMINATION.matches("Either party terminates this agreement at any time.")

    def test_termination_is_not_terminate(self) -> None:
        assert not UNILATERAL_TERMINATION.matches("Termination is permitted at any time.")

    def test_needs_both_groups(self) -> None:
        assert not UNILATERAL_TERMINATION.matches("Either party may terminate on notice.")
        assert not UNILATERAL_TERMINATION.matches("Fees may change at any time.")

    def test_case_insensitive(self) -> None:
        assert UNILATERAL_TERMINATION.matches("EITHER PARTY MAY TERMINATE AT ANY TIME.")


class TestBroadIndemnity:
    def test_any_and_all(self) -> None:
        assert BROAD_INDEMNITY.matches("Client shall indemnify Provider from any and all losses.")

    def test_all_claims(self) -> None:
        assert BROAD_INDEMNITY.matches("Vendor will indemnify Buyer against all claims.")

    def test_indemnification_alone_does_not_match(self) -> None:
        # "indemnification" does not contain "indemnify"
        assert not BROAD_INDEMNITY.matches("Indemnification covers any and all claims.")


class TestUnlimitedLiability:
    def test_match(self) -> None:
        assert UNLIMITED_LIABILITY.matches("Limitation of Liability: liability is unlimited.")

    def test_missing_heading_phrase(self) -> None:
        assert not UNLIMITED_LIABILITY.matches("Provider's liability is unlimited.")


class TestPerpetualConfidentiality:
    def test_match(self) -> None:
        assert PERPETUAL_CONFIDENTIALITY.matches("Confidentiality obligations are perpetual.")

    def test_no_match(self) -> None:
        assert not PERPETUAL_CONFIDENTIALITY.matches("Confidentiality lasts five years.")


class TestMakeFinding:
    def test_finding_attributes(self) -> None:
        finding = BROAD_INDEMNITY.make_finding("clause-7")
        assert finding.clause_id == "clause-7"
        assert finding.severity == Severity.MEDIUM
        assert finding.title == "Broad indemnity"
        assert finding.risk_score == 12
        assert finding.explanation == BROAD_INDEMNITY.explanation

    def test_fresh_ids(self) -> None:
        assert BROAD_INDEMNITY.make_finding("c").id != BROAD_INDEMNITY.make_finding("c").id

    def test_custom_rule(self) -> None:
        rule = ComplianceRule(
            key="auto_renewal",
            title="Automatic renewal",
            severity=Severity.MEDIUM,
            risk_score=10,
            explanation="Renews without action.",
            required=(("renew",), ("automatic",)),
        )
        assert rule.matches("This term renews on an automatic basis.")
        assert not rule.matches("This term renews on request.")
