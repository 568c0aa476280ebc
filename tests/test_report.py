"""Tests for derived review views and exports."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone

import pytest

from doc_review_buddy.report import (
    CSV_HEADERS,
    RiskSummary,
    annotate_findings,
    excerpt,
    risk_status,
    to_csv,
    to_json,
    to_markdown,
)
from doc_review_buddy.session import DocumentSession

EXPORTED_AT = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def reviewed(sample_contract_text: str) -> tuple[dict, list[dict]]:
    """Results and clauses for the sample contract."""
    session = DocumentSession("sample")
    session.upsert_text(sample_contract_text)
    session.review()
    return session.get_results(), session.get_clauses()


class TestRiskStatus:
    @pytest.mark.parametrize(
        "score, status",
        [(0, "Low"), (34, "Low"), (35, "Moderate"), (69, "Moderate"), (70, "High"), (100, "High")],
    )
    def test_bands(self, score: int, status: str) -> None:
        assert risk_status(score) == status


class TestRiskSummary:
    def test_from_results(self, reviewed: tuple[dict, list[dict]]) -> None:
        results, _ = reviewed
        summary = RiskSummary.from_results(results)
        assert summary.overall_score == 77
        assert summary.status == "High"
        assert summary.total_findings == 4
        assert summary.findings_by_severity == {"high": 2, "medium": 1, "low": 1}

    def test_idle_results(self) -> None:
        summary = RiskSummary.from_results(DocumentSession("d").get_results())
        assert summary.to_dict() == {
            "overallScore": 0,
            "status": "Low",
            "totalFindings": 0,
            "findingsBySeverity": {"high": 0, "medium": 0, "low": 0},
        }


class TestExcerpt:
    def test_short_text_unchanged(self) -> None:
        assert excerpt("Short clause.") == "Short clause."

    def test_whitespace_collapsed(self) -> None:
        assert excerpt("TERMINATION\nEither  party") == "TERMINATION Either party"

    def test_truncated(self) -> None:
        out = excerpt("word " * 100, limit=20)
        assert len(out) <= 20
        assert out.endswith("...")

    @pytest.mark.parametrize("limit", [1, 2, 3])
    def test_tiny_limit(self, limit: int) -> None:
        assert excerpt("abcdefghij", limit) == "abcdefghij"[:limit]

    def test_limit_four(self) -> None:
        assert excerpt("abcdefghij", 4) == "a..."


class TestAnnotateFindings:
    def test_joins_clause_text(self, reviewed: tuple[dict, list[dict]]) -> None:
        results, clauses = reviewed
        rows = annotate_findings(results["findings"], clauses)
        assert all(row["excerpt"] for row in rows)
        assert all(row["page"] is None for row in rows)

    def test_missing_clause(self) -> None:
        finding = {"id": "f1", "clauseId": "gone", "title": "T", "severity": "low"}
        rows = annotate_findings([finding], [])
        assert rows[0]["excerpt"] == ""
        assert rows[0]["page"] is None
        assert "excerpt" not in finding


class TestExports:
    def test_json(self, reviewed: tuple[dict, list[dict]]) -> None:
        results, clauses = reviewed
        data = json.loads(to_json("contract.txt", results, clauses, exported_at=EXPORTED_AT))
        assert data["documentName"] == "contract.txt"
        assert data["exportedAt"] == "2024-03-10T12:00:00+00:00"
        assert data["status"] == "done"
        assert data["summary"]["overallScore"] == 77
        assert len(data["findings"]) == 4

    def test_markdown(self, reviewed: tuple[dict, list[dict]]) -> None:
        results, clauses = reviewed
        md = to_markdown("contract.txt", results, clauses, exported_at=EXPORTED_AT)
        assert md.startswith("# Document Review Report")
        assert "**Generated:** 2024-03-10" in md
        assert "- **Overall Score:** 77/100" in md
        assert "- **Status:** High" in md
        assert md.index("### High Severity") < md.index("### Medium Severity") < md.index(
            "### Low Severity"
        )
        assert "#### 1. Broad indemnity" in md

    def test_markdown_without_findings(self) -> None:
        md = to_markdown("empty.txt", DocumentSession("d").get_results())
        assert "No findings." in md
        assert "Severity" not in md

    def test_csv(self, reviewed: tuple[dict, list[dict]]) -> None:
        results, clauses = reviewed
        rows = list(csv.reader(io.StringIO(to_csv(results, clauses))))
        assert tuple(rows[0]) == CSV_HEADERS
        assert len(rows) == 5
        by_title = {row[0]: row for row in rows[1:]}
        assert by_title["Broad indemnity"][1] == "medium"
        assert by_title["Broad indemnity"][2] == "12"
        assert by_title["Broad indemnity"][3] == ""
        assert "indemnify" in by_title["Broad indemnity"][5]

    def test_csv_quotes_commas(self) -> None:
        results = {
            "findings": [
                {
                    "id": "f1",
                    "severity": "high",
                    "title": "Unilateral termination",
                    "explanation": 'Says "terminate", at will.',
                    "clauseId": "c1",
                    "riskScore": 30,
                }
            ]
        }
        rows = list(csv.reader(io.StringIO(to_csv(results))))
        assert rows[1][4] == 'Says "terminate", at will.'
