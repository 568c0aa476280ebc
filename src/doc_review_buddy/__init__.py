"""Doc Review Buddy -- clause segmentation and compliance risk scoring."""

__version__ = "0.1.0"

from .engine import ComplianceEngine, aggregate_risk_score
from .models import Clause, EvaluationResult, Finding, RunMeta, RunStatus, Severity
from .parsers import ParsedDocument, parse_document
from .report import RiskSummary, risk_status
from .rules import DEFAULT_RULES, ComplianceRule
from .segmenter import MAX_CLAUSES, ClauseSegmenter, split_clauses
from .session import DocumentNotFoundError, DocumentRegistry, DocumentSession

__all__ = [
    # Core
    "ClauseSegmenter",
    "ComplianceEngine",
    "ComplianceRule",
    "DEFAULT_RULES",
    "MAX_CLAUSES",
    "aggregate_risk_score",
    "split_clauses",
    # Models
    "Clause",
    "Finding",
    "EvaluationResult",
    "RunMeta",
    "RunStatus",
    "Severity",
    # Sessions
    "DocumentSession",
    "DocumentRegistry",
    "DocumentNotFoundError",
    # Ingestion and reporting
    "ParsedDocument",
    "parse_document",
    "RiskSummary",
    "risk_status",
]
