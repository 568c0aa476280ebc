"""Shared test fixtures for doc-review-buddy tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from doc_review_buddy.engine import ComplianceEngine
from doc_review_buddy.segmenter import ClauseSegmenter
from doc_review_buddy.session import DocumentSession


@pytest.fixture
def sample_contract_path() -> Path:
    """Path to the sample contract text file."""
    return Path(__file__).parent.parent / "examples" / "sample_contract.txt"


@pytest.fixture
def sample_contract_text(sample_contract_path: Path) -> str:
    """Full text of the sample contract."""
    return sample_contract_path.read_text(encoding="utf-8")


@pytest.fixture
def segmenter() -> ClauseSegmenter:
    return ClauseSegmenter()


@pytest.fixture
def engine() -> ComplianceEngine:
    return ComplianceEngine()


@pytest.fixture
def session() -> DocumentSession:
    return DocumentSession("doc-test")


@pytest.fixture
def termination_text() -> str:
    return "Either party may terminate this agreement for convenience at any time."


@pytest.fixture
def indemnity_text() -> str:
    return "Client shall indemnify Provider from any and all claims."


@pytest.fixture
def neutral_text() -> str:
    return "Payment is due within 30 days."


@pytest.fixture
def tmp_text_file(tmp_path: Path, sample_contract_text: str) -> Path:
    """Copy of the sample contract in a temporary directory."""
    file = tmp_path / "test_contract.txt"
    file.write_text(sample_contract_text, encoding="utf-8")
    return file


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DOC_REVIEW_* settings from the host out of the tests."""
    for name in ("DOC_REVIEW_LOG_LEVEL", "DOC_REVIEW_OUTPUT", "DOC_REVIEW_EXCERPT_LENGTH"):
        monkeypatch.delenv(name, raising=False)
