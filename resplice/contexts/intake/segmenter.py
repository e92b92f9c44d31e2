"""
Section segmentation for the Intake context.

Splits a resume's plain-text extraction into candidate "project" sections
(one per job, role, or project entry) using the line heuristics defined in
section_patterns.py.

Sections are returned in document order with non-overlapping line bounds.
Ranking by relevance happens later in the targeting context and never
reorders this list.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from resplice.contexts.intake.logger import log_segmentation_result
from resplice.contexts.intake.section_patterns import (
    is_responsibility_marker,
    is_section_boundary,
    is_section_opener,
)

# Sections whose stripped content is this short or shorter are noise
MIN_SECTION_CHARS = 50

# Title of the synthetic section used when nothing is detected
FALLBACK_SECTION_TITLE = "Professional Experience"


@dataclass(frozen=True)
class ProjectSection:
    """
    A contiguous line range interpreted as one job/project entry.

    Attributes:
        title: Stripped text of the opening line
        content: Section lines joined with trailing newlines
        start_index: Index of the opening line in the document
        end_index: Index of the last absorbed line (inclusive)
        responsibilities_index: Character offset in content of the first
            "Responsibilities:"-like marker line, or None if there is none
    """

    title: str
    content: str
    start_index: int
    end_index: int
    responsibilities_index: Optional[int] = None

    @property
    def line_count(self) -> int:
        return self.end_index - self.start_index + 1

    def contains_line(self, index: int) -> bool:
        return self.start_index <= index <= self.end_index

    def to_dict(self) -> dict:
        """Summary used in previews (camelCase, JSON-compatible)."""
        return {
            "title": self.title,
            "startIndex": self.start_index,
            "endIndex": self.end_index,
            "responsibilitiesIndex": self.responsibilities_index,
            "contentLength": len(self.content),
        }


def split_lines(document: Union[str, Sequence[str]]) -> List[str]:
    """
    Normalize a document into its list of lines.

    Accepts raw text or an already split sequence of lines (including a
    length-one list holding the whole text).
    """
    if isinstance(document, str):
        return document.split("\n")
    return "\n".join(document).split("\n")


def _collect_section(lines: List[str], start: int) -> tuple[ProjectSection, int]:
    """
    Absorb lines from an opening line until the next boundary.

    Args:
        lines: Document lines
        start: Index of the opening line

    Returns:
        (section, next_index) where next_index is the first line not absorbed
    """
    content_parts = []
    offset = 0
    responsibilities_index = None
    j = start

    while j < len(lines) and not is_section_boundary(lines[j], is_first_line=(j == start)):
        line = lines[j]
        if responsibilities_index is None and is_responsibility_marker(line):
            responsibilities_index = offset
        content_parts.append(line + "\n")
        offset += len(line) + 1
        j += 1

    section = ProjectSection(
        title=lines[start].strip(),
        content="".join(content_parts),
        start_index=start,
        end_index=j - 1,
        responsibilities_index=responsibilities_index,
    )
    return section, j


def fallback_section(lines: List[str], title: str = FALLBACK_SECTION_TITLE) -> ProjectSection:
    """Build the synthetic section spanning the whole document."""
    return ProjectSection(
        title=title,
        content="\n".join(lines),
        start_index=0,
        end_index=len(lines) - 1,
        responsibilities_index=None,
    )


def segment_sections(
    document: Union[str, Sequence[str]],
    min_section_chars: int = MIN_SECTION_CHARS,
    fallback_title: str = FALLBACK_SECTION_TITLE,
) -> List[ProjectSection]:
    """
    Split a document into candidate project sections.

    Scans top to bottom. An opener line starts a section that absorbs lines
    until a boundary line or the end of the document. A kept section consumes
    its lines, so the scan resumes at the boundary line (which may itself open
    the next section). A section whose content is too short is discarded and
    the scan resumes right after its opening line.

    If nothing is detected, a single synthetic section spanning the whole
    document is returned, so the result is never empty.

    Args:
        document: Raw text or sequence of lines
        min_section_chars: Discard sections with stripped content this short or shorter
        fallback_title: Title of the synthetic whole-document section

    Returns:
        Sections in document order with non-overlapping bounds
    """
    lines = split_lines(document)
    sections = []

    i = 0
    while i < len(lines):
        if not is_section_opener(lines[i]):
            i += 1
            continue

        section, next_index = _collect_section(lines, i)

        if len(section.content.strip()) > min_section_chars:
            sections.append(section)
            i = next_index
        else:
            i += 1

    used_fallback = not sections
    if used_fallback:
        sections = [fallback_section(lines, fallback_title)]

    log_segmentation_result(sections, len(lines), used_fallback)
    return sections
