"""
Document codec boundary for the Rendering context.

Reads a document into plain text lines and writes a rebuilt paragraph stream
back out. Word documents go through python-docx; .txt and .md files are read
and written as UTF-8 text. Every codec error surfaces as CodecFailure so
callers can isolate a bad document without aborting a batch.
"""

from pathlib import Path
from typing import Sequence
from zipfile import BadZipFile

from docx import Document
from docx.opc.exceptions import PackageNotFoundError
from lxml import etree

from resplice.contexts.intake.exceptions import CodecFailure
from resplice.contexts.rendering.logger import _log_debug
from resplice.contexts.rendering.rebuilder import Paragraph

DOCX_SUFFIXES = (".docx",)
TEXT_SUFFIXES = (".txt", ".md")
SUPPORTED_SUFFIXES = DOCX_SUFFIXES + TEXT_SUFFIXES


def _check_suffix(path: Path) -> str:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise CodecFailure(
            f"Unsupported document type '{suffix or path.name}' (expected one of {SUPPORTED_SUFFIXES})",
            source=path,
        )
    return suffix


def read_document_text(path: Path) -> str:
    """
    Extract plain text from a document, one line per paragraph.

    Args:
        path: .docx, .txt, or .md file

    Returns:
        Document text with paragraphs joined by newlines

    Raises:
        CodecFailure: If the file is missing, unsupported, or cannot be parsed
    """
    path = Path(path)
    suffix = _check_suffix(path)

    if not path.exists():
        raise CodecFailure("Document not found", source=path)

    try:
        if suffix in DOCX_SUFFIXES:
            document = Document(str(path))
            text = "\n".join(paragraph.text for paragraph in document.paragraphs)
        else:
            text = path.read_text(encoding="utf-8")
    except (
        PackageNotFoundError,
        BadZipFile,
        KeyError,
        etree.XMLSyntaxError,
        ValueError,
        OSError,
    ) as e:
        raise CodecFailure("Could not read document", source=path, original_error=e) from e

    _log_debug(f"Read {len(text)} chars from {path.name}")
    return text


def write_document(paragraphs: Sequence[Paragraph], path: Path) -> Path:
    """
    Write a paragraph stream to disk.

    Word output renders bold paragraphs (inserted headers) in bold; text
    output writes one line per paragraph.

    Args:
        paragraphs: Paragraph stream from rebuild_document()
        path: Output .docx, .txt, or .md path (parent directories are created)

    Returns:
        The written path

    Raises:
        CodecFailure: If the output type is unsupported or the file cannot be written
    """
    path = Path(path)
    suffix = _check_suffix(path)

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if suffix in DOCX_SUFFIXES:
            document = Document()
            for paragraph in paragraphs:
                docx_paragraph = document.add_paragraph()
                run = docx_paragraph.add_run(paragraph.text)
                run.bold = paragraph.bold
            document.save(str(path))
        else:
            path.write_text("\n".join(p.text for p in paragraphs), encoding="utf-8")
    # lxml rejects control characters in run text with ValueError
    except (ValueError, OSError) as e:
        raise CodecFailure("Could not write document", source=path, original_error=e) from e

    _log_debug(f"Wrote {len(paragraphs)} paragraph(s) to {path}")
    return path
