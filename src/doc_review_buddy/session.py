"""Per-document review state and the operations exposed to callers.

A ``DocumentSession`` owns one document's text, clauses, findings and run
metadata. Every operation on a session holds its lock, so a reader never
observes a run halfway through replacing the stored results.
``DocumentRegistry`` hands out one session per document id.
"""

from __future__ import annotations

import logging
import threading

from .engine import ComplianceEngine
from .models import Clause, Finding, RunMeta, RunStatus, new_id
from .segmenter import ClauseSegmenter

logger = logging.getLogger(__name__)


class DocumentNotFoundError(KeyError):
    """Raised when a document id has no session and creation is disabled."""


class DocumentSession:
    """Review state for a single document.

    Example::

        session = DocumentSession("doc-1")
        session.upsert_text(text)
        session.extract_clauses()
        session.run_compliance(session.get_clauses())
        results = session.get_results()

    Args:
        doc_id: Identity of the document this session belongs to.
        segmenter: Custom ClauseSegmenter instance (optional).
        engine: Custom ComplianceEngine instance (optional).
    """

    def __init__(
        self,
        doc_id: str,
        segmenter: ClauseSegmenter | None = None,
        engine: ComplianceEngine | None = None,
    ) -> None:
        self.doc_id = doc_id
        self._segmenter = segmenter or ClauseSegmenter()
        self._engine = engine or ComplianceEngine()
        self._lock = threading.RLock()
        self._text = ""
        self._clauses: list[Clause] = []
        self._findings: list[Finding] = []
        self._meta = RunMeta()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        with self._lock:
            return self._text

    @property
    def status(self) -> RunStatus:
        with self._lock:
            return self._meta.status

    def upsert_text(self, text: object) -> dict:
        """Replace the stored source text. Non-string input is stored as ''."""
        with self._lock:
            self._text = text if isinstance(text, str) else ""
            logger.debug("Stored %d chars for document %s", len(self._text), self.doc_id)
            return {"ok": True}

    def extract_clauses(self) -> dict:
        """Segment the stored text, replacing the whole clause set."""
        with self._lock:
            clauses = self._segmenter.segment(self._text)
            self._clauses = clauses
            logger.debug("Extracted %d clauses for document %s", len(clauses), self.doc_id)
            return {"clausesCount": len(clauses)}

    def get_clauses(self) -> list[dict]:
        """Return the current clause set in wire form."""
        with self._lock:
            return [c.to_dict() for c in self._clauses]

    def run_compliance(self, clauses: object) -> dict:
        """Evaluate clauses and replace the stored findings and run metadata.

        Args:
            clauses: ``Clause`` objects or mappings with ``id`` and ``text``.
                Anything else is treated as an empty list.

        Returns:
            ``{"findingsCount": int, "riskScore": int}``
        """
        with self._lock:
            previous = (self._findings, self._meta)
            self._meta = RunMeta(status=RunStatus.PROCESSING, risk_score=0)
            self._findings = []
            try:
                result = self._engine.evaluate(clauses)
            except Exception:
                self._findings, self._meta = previous
                raise
            self._findings = result.findings
            self._meta = RunMeta(status=RunStatus.DONE, risk_score=result.risk_score)
            logger.debug(
                "Compliance run for document %s: %d findings, risk score %d",
                self.doc_id,
                result.findings_count,
                result.risk_score,
            )
            return result.to_dict()

    def get_results(self) -> dict:
        """Return a snapshot of the latest compliance run.

        ``breakdown`` is always empty; categorising findings is left to the
        presentation layer.
        """
        with self._lock:
            return {
                "status": self._meta.status.value,
                "risk": {"score": self._meta.risk_score, "breakdown": {}},
                "findings": [f.to_dict() for f in self._findings],
            }

    def review(self) -> dict:
        """Segment the stored text and run compliance over the new clauses."""
        with self._lock:
            self.extract_clauses()
            out = self.run_compliance(self.get_clauses())
            return {"ok": True, **out}


class DocumentRegistry:
    """Map document ids to their sessions.

    Sessions are created explicitly on first access and live until
    discarded. Sessions for different documents share nothing.
    """

    def __init__(
        self,
        segmenter: ClauseSegmenter | None = None,
        engine: ComplianceEngine | None = None,
    ) -> None:
        self._segmenter = segmenter or ClauseSegmenter()
        self._engine = engine or ComplianceEngine()
        self._sessions: dict[str, DocumentSession] = {}
        self._lock = threading.Lock()

    def create(self) -> str:
        """Create a session under a fresh document id and return the id."""
        doc_id = new_id()
        self.get(doc_id)
        return doc_id

    def get(self, doc_id: str, create: bool = True) -> DocumentSession:
        """Return the session for ``doc_id``.

        Raises:
            DocumentNotFoundError: If the id is unknown and ``create`` is False.
        """
        with self._lock:
            session = self._sessions.get(doc_id)
            if session is None:
                if not create:
                    raise DocumentNotFoundError(doc_id)
                session = DocumentSession(doc_id, segmenter=self._segmenter, engine=self._engine)
                self._sessions[doc_id] = session
                logger.debug("Created session for document %s", doc_id)
            return session

    def discard(self, doc_id: str) -> bool:
        """Drop a document's session. Returns False if there was none."""
        with self._lock:
            return self._sessions.pop(doc_id, None) is not None

    def __contains__(self, doc_id: object) -> bool:
        with self._lock:
            return doc_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
