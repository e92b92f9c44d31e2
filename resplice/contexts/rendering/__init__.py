"""
Rendering Context

Responsibilities:
- Converts a bullet distribution into line edits and a rebuilt paragraph stream
- Assembles previews (insertion points, statistics, detected technologies)
- Reads and writes documents at the codec boundary (.docx via python-docx, plain text)

Owns: Paragraph stream, previews, document I/O
Never: Decides which bullets go where
"""

from resplice.contexts.rendering.docx_codec import read_document_text, write_document
from resplice.contexts.rendering.preview import (
    PreviewResult,
    PreviewStatistics,
    assemble_preview,
    detect_technologies,
)
from resplice.contexts.rendering.rebuilder import (
    LineEdit,
    Paragraph,
    RebuildResult,
    apply_edits,
    rebuild_document,
)

__all__ = [
    # Rebuild
    "Paragraph",
    "LineEdit",
    "RebuildResult",
    "apply_edits",
    "rebuild_document",
    # Preview
    "PreviewResult",
    "PreviewStatistics",
    "assemble_preview",
    "detect_technologies",
    # Codec
    "read_document_text",
    "write_document",
]
