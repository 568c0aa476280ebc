"""Data models for clause review runs."""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


def new_id() -> str:
    """Return a fresh identifier for a clause or finding."""
    return str(uuid.uuid4())


class Severity(str, Enum):
    """Finding severity levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RunStatus(str, Enum):
    """Lifecycle of the most recent compliance run."""

    IDLE = "idle"
    PROCESSING = "processing"
    DONE = "done"


@dataclass
class Clause:
    """A single clause-sized segment of document text."""

    id: str
    text: str
    page: Optional[int] = None
    start_offset: Optional[int] = None
    end_offset: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Clause:
        """Build a clause from its wire form.

        A missing ``id`` becomes an empty string and other ids are converted
        with ``str``. Missing or non-string ``text`` becomes an empty string.
        """
        clause_id = data.get("id")
        text = data.get("text")
        return cls(
            id="" if clause_id is None else str(clause_id),
            text=text if isinstance(text, str) else "",
            page=data.get("page"),
            start_offset=data.get("startOffset"),
            end_offset=data.get("endOffset"),
        )

    def to_dict(self) -> dict:
        d: dict = {"id": self.id, "text": self.text}
        if self.page is not None:
            d["page"] = self.page
        if self.start_offset is not None:
            d["startOffset"] = self.start_offset
        if self.end_offset is not None:
            d["endOffset"] = self.end_offset
        return d


@dataclass
class Finding:
    """A single rule match tied to one clause.

    ``clause_id`` is a plain identifier. The clause it names may no longer
    exist once the document has been segmented again.
    """

    id: str
    severity: Severity
    title: str
    explanation: str
    clause_id: str
    risk_score: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "severity": self.severity.value,
            "title": self.title,
            "explanation": self.explanation,
            "clauseId": self.clause_id,
            "riskScore": self.risk_score,
        }


@dataclass
class RunMeta:
    """Aggregate outcome of the most recent compliance run."""

    status: RunStatus = RunStatus.IDLE
    risk_score: int = 0


@dataclass
class EvaluationResult:
    """Findings and capped aggregate score produced by one evaluation."""

    findings: list[Finding] = field(default_factory=list)
    risk_score: int = 0

    @property
    def findings_count(self) -> int:
        return len(self.findings)

    @property
    def high_findings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == Severity.HIGH]

    def to_dict(self) -> dict:
        return {
            "findingsCount": self.findings_count,
            "riskScore": self.risk_score,
        }
