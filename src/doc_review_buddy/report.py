"""Derived review views and export formats.

Everything here reads the output of ``DocumentSession.get_results()`` and
``get_clauses()`` without changing it. Findings are joined to clauses by
``clauseId``; a finding whose clause is gone gets an empty excerpt.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .models import Severity

HIGH_RISK_THRESHOLD = 70
MODERATE_RISK_THRESHOLD = 35

_SEVERITY_ORDER = (Severity.HIGH, Severity.MEDIUM, Severity.LOW)

CSV_HEADERS = ("Title", "Severity", "Risk Points", "Page", "Explanation", "Excerpt")


def risk_status(score: int) -> str:
    """Map an aggregate score to a High / Moderate / Low band."""
    if score >= HIGH_RISK_THRESHOLD:
        return "High"
    if score >= MODERATE_RISK_THRESHOLD:
        return "Moderate"
    return "Low"


def excerpt(text: str, limit: int = 160) -> str:
    """Collapse whitespace and cut text to ``limit`` characters."""
    flat = " ".join(text.split())
    if len(flat) <= limit:
        return flat
    if limit <= 3:
        return flat[:limit]
    return flat[: limit - 3].rstrip() + "..."


@dataclass
class RiskSummary:
    """Headline numbers for a finished review."""

    overall_score: int
    status: str
    total_findings: int
    findings_by_severity: dict[str, int] = field(default_factory=dict)

    @classmethod
    def from_results(cls, results: dict) -> RiskSummary:
        score = int(results.get("risk", {}).get("score", 0))
        findings = results.get("findings", [])
        counts = {level.value: 0 for level in _SEVERITY_ORDER}
        for finding in findings:
            severity = finding.get("severity")
            if severity in counts:
                counts[severity] += 1
        return cls(
            overall_score=score,
            status=risk_status(score),
            total_findings=len(findings),
            findings_by_severity=counts,
        )

    def to_dict(self) -> dict:
        return {
            "overallScore": self.overall_score,
            "status": self.status,
            "totalFindings": self.total_findings,
            "findingsBySeverity": dict(self.findings_by_severity),
        }


def annotate_findings(
    findings: Iterable[dict],
    clauses: Iterable[dict],
    limit: int = 160,
) -> list[dict]:
    """Return copies of findings with ``excerpt`` and ``page`` from their clause."""
    by_id = {c.get("id"): c for c in clauses}
    annotated: list[dict] = []
    for finding in findings:
        clause = by_id.get(finding.get("clauseId"))
        row = dict(finding)
        row["excerpt"] = excerpt(clause.get("text", ""), limit) if clause else ""
        row["page"] = clause.get("page") if clause else None
        annotated.append(row)
    return annotated


# ------------------------------------------------------------------
# Exports
# ------------------------------------------------------------------


def to_json(
    document_name: str,
    results: dict,
    clauses: Iterable[dict] = (),
    exported_at: datetime | None = None,
    limit: int = 160,
) -> str:
    exported_at = exported_at or datetime.now(timezone.utc)
    data = {
        "documentName": document_name,
        "exportedAt": exported_at.isoformat(),
        "status": results.get("status"),
        "summary": RiskSummary.from_results(results).to_dict(),
        "findings": annotate_findings(results.get("findings", []), clauses, limit),
    }
    return json.dumps(data, indent=2)


def to_markdown(
    document_name: str,
    results: dict,
    clauses: Iterable[dict] = (),
    exported_at: datetime | None = None,
    limit: int = 160,
) -> str:
    """Render a review report grouped by severity, high first."""
    exported_at = exported_at or datetime.now(timezone.utc)
    summary = RiskSummary.from_results(results)
    findings = annotate_findings(results.get("findings", []), clauses, limit)
    counts = summary.findings_by_severity

    lines: list[str] = [
        "# Document Review Report",
        "",
        f"**Document:** {document_name}",
        f"**Generated:** {exported_at.date().isoformat()}",
        "",
        "---",
        "",
        "## Risk Summary",
        "",
        f"- **Overall Score:** {summary.overall_score}/100",
        f"- **Status:** {summary.status}",
        f"- **Total Findings:** {summary.total_findings}",
        f"  - High: {counts.get('high', 0)}",
        f"  - Medium: {counts.get('medium', 0)}",
        f"  - Low: {counts.get('low', 0)}",
        "",
        "---",
        "",
        "## Findings",
        "",
    ]

    if not findings:
        lines.append("No findings.")
        lines.append("")

    for level in _SEVERITY_ORDER:
        group = [f for f in findings if f.get("severity") == level.value]
        if not group:
            continue
        lines.append(f"### {level.value.title()} Severity")
        lines.append("")
        for index, finding in enumerate(group, 1):
            lines.append(f"#### {index}. {finding['title']}")
            lines.append("")
            lines.append(f"- **Risk Points:** {finding['riskScore']}")
            if finding["page"] is not None:
                lines.append(f"- **Page:** {finding['page']}")
            lines.append("")
            lines.append("**Remediation:**")
            lines.append(finding["explanation"])
            lines.append("")
            if finding["excerpt"]:
                lines.append("**Clause Excerpt:**")
                lines.append(f"> {finding['excerpt']}")
                lines.append("")
            lines.append("---")
            lines.append("")

    return "\n".join(lines)


def to_csv(
    results: dict,
    clauses: Iterable[dict] = (),
    limit: int = 160,
) -> str:
    """One row per finding under ``CSV_HEADERS``."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for finding in annotate_findings(results.get("findings", []), clauses, limit):
        writer.writerow(
            [
                finding["title"],
                finding["severity"],
                finding["riskScore"],
                "" if finding["page"] is None else finding["page"],
                finding["explanation"],
                finding["excerpt"],
            ]
        )
    return buffer.getvalue()
