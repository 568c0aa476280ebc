"""Document ingestion: turn PDF, DOCX, or plain text files into text.

The review core only ever sees plain text. Parsers keep the page
structure around so clauses can be mapped back to page numbers and
character offsets for display.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

# Pages are joined with a blank line so each page break is also a clause break
PAGE_SEPARATOR = "\n\n"


@dataclass
class ParsedPage:
    """A single page of extracted text."""

    page_number: int
    text: str


@dataclass
class ParsedDocument:
    """Plain text extracted from a file, page by page."""

    filename: str
    pages: list[ParsedPage] = field(default_factory=list)
    metadata: dict = field(default_factory=dict)

    @property
    def full_text(self) -> str:
        return PAGE_SEPARATOR.join(page.text for page in self.pages)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def get_page_for_char_offset(self, offset: int) -> int | None:
        """Given a character offset in full_text, return the page number."""
        current = 0
        for page in self.pages:
            page_end = current + len(page.text) + len(PAGE_SEPARATOR)
            if offset < page_end:
                return page.page_number
            current = page_end
        return self.pages[-1].page_number if self.pages else None

    def locate_clauses(self, clauses: Iterable[dict]) -> None:
        """Fill in ``page``, ``startOffset`` and ``endOffset`` on clause dicts.

        Clauses are searched for in order, each one after the previous
        match. A clause whose text cannot be found is left untouched.
        """
        text = self.full_text
        cursor = 0
        for clause in clauses:
            snippet = clause.get("text") or ""
            if not snippet:
                continue
            start = text.find(snippet, cursor)
            if start < 0:
                continue
            end = start + len(snippet)
            clause["page"] = self.get_page_for_char_offset(start)
            clause["startOffset"] = start
            clause["endOffset"] = end
            cursor = end


class DocumentParser(ABC):
    """Base class for file parsers."""

    supported_extensions: tuple[str, ...] = ()

    def can_handle(self, path: Path) -> bool:
        return path.suffix.lower() in self.supported_extensions

    @abstractmethod
    def parse(self, path: Path) -> ParsedDocument:
        """Extract page-annotated text from a file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file extension is not supported.
        """
        ...

    def _validate_path(self, path: Path) -> None:
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if not self.can_handle(path):
            raise ValueError(
                f"Unsupported file extension '{path.suffix}' for {self.__class__.__name__}. "
                f"Supported: {self.supported_extensions}"
            )


class TextParser(DocumentParser):
    """Plain text files. Form feeds (``\\f``) separate pages."""

    supported_extensions = (".txt", ".text", ".md")

    def parse(self, path: Path) -> ParsedDocument:
        self._validate_path(path)
        raw = path.read_text(encoding="utf-8", errors="replace")

        pages = [
            ParsedPage(page_number=i + 1, text=chunk.strip())
            for i, chunk in enumerate(raw.split("\f"))
            if chunk.strip()
        ]
        return ParsedDocument(filename=path.name, pages=pages, metadata={"format": "txt"})


class PDFParser(DocumentParser):
    """PDF files, read page by page with pdfplumber."""

    supported_extensions = (".pdf",)

    def parse(self, path: Path) -> ParsedDocument:
        self._validate_path(path)

        try:
            import pdfplumber
        except ImportError as exc:
            raise ImportError(
                "pdfplumber is required for PDF parsing. Install it with: pip install pdfplumber"
            ) from exc

        pages: list[ParsedPage] = []
        with pdfplumber.open(str(path)) as pdf:
            for i, page in enumerate(pdf.pages):
                text = (page.extract_text() or "").strip()
                if text:
                    pages.append(ParsedPage(page_number=i + 1, text=text))
            total = len(pdf.pages)

        return ParsedDocument(
            filename=path.name,
            pages=pages,
            metadata={"format": "pdf", "page_count": total},
        )


class DOCXParser(DocumentParser):
    """Word documents via python-docx.

    DOCX has no page boundaries, so the whole body is one page with one
    paragraph per block.
    """

    supported_extensions = (".docx",)

    def parse(self, path: Path) -> ParsedDocument:
        self._validate_path(path)

        try:
            from docx import Document
        except ImportError as exc:
            raise ImportError(
                "python-docx is required for DOCX parsing. Install it with: pip install python-docx"
            ) from exc

        doc = Document(str(path))
        paragraphs = [p.text.strip() for p in doc.paragraphs if p.text.strip()]
        text = PAGE_SEPARATOR.join(paragraphs)
        pages = [ParsedPage(page_number=1, text=text)] if text else []

        return ParsedDocument(
            filename=path.name,
            pages=pages,
            metadata={"format": "docx", "paragraph_count": len(paragraphs)},
        )


_PARSERS: tuple[DocumentParser, ...] = (PDFParser(), DOCXParser(), TextParser())


def get_parser(path: Path) -> DocumentParser:
    """Return the parser for a file based on its extension.

    Raises:
        ValueError: If no parser supports the extension.
    """
    for parser in _PARSERS:
        if parser.can_handle(path):
            return parser

    supported = sorted(ext for p in _PARSERS for ext in p.supported_extensions)
    raise ValueError(
        f"No parser available for '{path.suffix}'. Supported formats: {', '.join(supported)}"
    )


def parse_document(file_path: str | Path) -> ParsedDocument:
    """Parse a file with the matching parser."""
    path = Path(file_path)
    parsed = get_parser(path).parse(path)
    logger.debug("Parsed %s: %d page(s)", parsed.filename, parsed.page_count)
    return parsed
