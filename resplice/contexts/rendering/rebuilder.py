"""
Document rebuild for the Rendering context.

Turns a Distribution into concrete line edits and applies them to the
original lines, producing the paragraph stream handed to a document writer.

Guarantees:
- Every original line appears verbatim and in order in the output
- Bullets are only ever inserted, never substituted for original text
- With skip_existing enabled, re-running over an already tailored document adds nothing
"""

from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from resplice.contexts.intake.exceptions import InputError
from resplice.contexts.intake.request import normalize_bullet
from resplice.contexts.intake.section_patterns import ResponsibilityPatterns
from resplice.contexts.rendering.logger import log_rebuild_result
from resplice.contexts.targeting.distribution import Distribution

RESPONSIBILITIES_HEADER_TEXT = "Responsibilities:"
FALLBACK_HEADER_TEXT = "Key Contributions:"
BULLET_PREFIX = "• "

# Paragraph kinds
ORIGINAL = "original"
HEADER = "header"
BULLET = "bullet"


@dataclass(frozen=True)
class Paragraph:
    """
    One paragraph of the rebuilt document.

    Attributes:
        text: Paragraph text (bullets carry their "• " prefix)
        kind: "original", "header", or "bullet"
        bold: Render in bold (inserted headers)
    """

    text: str
    kind: str = ORIGINAL
    bold: bool = False

    @property
    def is_original(self) -> bool:
        return self.kind == ORIGINAL

    def to_dict(self) -> dict:
        return {"text": self.text, "kind": self.kind, "bold": self.bold}


@dataclass(frozen=True)
class LineEdit:
    """
    Paragraphs to insert after an original line.

    Attributes:
        after_line: Index of the original line the paragraphs follow
        paragraphs: Inserted paragraphs, in order
    """

    after_line: int
    paragraphs: Tuple[Paragraph, ...]

    def to_dict(self) -> dict:
        return {"afterLine": self.after_line, "paragraphs": [p.to_dict() for p in self.paragraphs]}


@dataclass
class RebuildResult:
    """
    Result of rebuilding a document.

    Attributes:
        paragraphs: Full output paragraph stream
        edits: The edits that produced it (apply_edits(lines, edits) == paragraphs)
        bullets_added: Number of bullet paragraphs inserted
        skipped_bullets: Bullets not inserted because the document already has them
    """

    paragraphs: List[Paragraph] = field(default_factory=list)
    edits: List[LineEdit] = field(default_factory=list)
    bullets_added: int = 0
    skipped_bullets: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(paragraph.text for paragraph in self.paragraphs)


def header_paragraph(text: str) -> Paragraph:
    return Paragraph(text=text, kind=HEADER, bold=True)


def bullet_paragraph(text: str) -> Paragraph:
    return Paragraph(text=f"{BULLET_PREFIX}{text}", kind=BULLET)


def existing_bullet_texts(lines: Sequence[str]) -> set:
    """Bare text of every non-empty line, as compared against incoming bullets."""
    return {normalize_bullet(line) for line in lines if line.strip()}


def _anchors_title(lines: Sequence[str], index: int, title: str) -> bool:
    return 0 <= index < len(lines) and lines[index].strip().lower() == title.strip().lower()


def plan_edits(
    lines: Sequence[str],
    distribution: Distribution,
    fallback_bullets: Sequence[str] = (),
    skip_existing: bool = True,
) -> Tuple[List[LineEdit], List[str]]:
    """
    Convert a Distribution into ordered line edits.

    Each top section's bullets go right after its title line, under a bold
    "Responsibilities:" header unless the title line already carries one.
    Bullets for sections whose title line cannot be found in the document
    (the synthetic whole-document section) go at the end under
    "Key Contributions:". With no top sections at all, fallback_bullets are
    appended there instead.

    Args:
        lines: Original document lines
        distribution: Per-section bullet assignment
        fallback_bullets: Bullets to append when the distribution has no sections
        skip_existing: Leave out bullets already present as a document line

    Returns:
        (edits sorted by line, bullets skipped as already present)
    """
    existing = existing_bullet_texts(lines) if skip_existing else set()
    skipped: List[str] = []

    def fresh(bullets):
        kept = []
        for bullet in bullets:
            if bullet in existing:
                skipped.append(bullet)
            else:
                kept.append(bullet)
        return kept

    anchored: Dict[int, List[str]] = {}
    unanchored: List[str] = []

    for assignment in distribution.assignments:
        bullets = fresh(bullet for entry in assignment.entries for bullet in entry.bullets)
        if not bullets:
            continue
        anchor = assignment.section.start_index
        if _anchors_title(lines, anchor, assignment.section.title):
            anchored.setdefault(anchor, []).extend(bullets)
        else:
            unanchored.extend(bullets)

    if not distribution.assignments:
        unanchored.extend(fresh(fallback_bullets))

    edits = []
    for anchor in sorted(anchored):
        paragraphs = []
        if not ResponsibilityPatterns.RESPONSIBILITIES_HEADER.search(lines[anchor]):
            paragraphs.append(header_paragraph(RESPONSIBILITIES_HEADER_TEXT))
        paragraphs.extend(bullet_paragraph(bullet) for bullet in anchored[anchor])
        edits.append(LineEdit(after_line=anchor, paragraphs=tuple(paragraphs)))

    if unanchored:
        paragraphs = [header_paragraph(FALLBACK_HEADER_TEXT)]
        paragraphs.extend(bullet_paragraph(bullet) for bullet in unanchored)
        edits.append(LineEdit(after_line=len(lines) - 1, paragraphs=tuple(paragraphs)))

    return edits, skipped


def apply_edits(lines: Sequence[str], edits: Sequence[LineEdit]) -> List[Paragraph]:
    """
    Apply line edits to the original lines.

    Edits targeting the same line are applied in the given order.

    Args:
        lines: Original document lines
        edits: Edits from plan_edits()

    Returns:
        Paragraph stream with every original line preserved in order

    Raises:
        InputError: If an edit points outside the document
    """
    inserts: Dict[int, List[Paragraph]] = {}
    for edit in edits:
        if not 0 <= edit.after_line < len(lines):
            raise InputError(
                f"Edit targets line {edit.after_line} of a {len(lines)}-line document",
                field="afterLine",
            )
        inserts.setdefault(edit.after_line, []).extend(edit.paragraphs)

    paragraphs = []
    for index, line in enumerate(lines):
        paragraphs.append(Paragraph(text=line))
        paragraphs.extend(inserts.get(index, []))
    return paragraphs


def rebuild_document(
    lines: Sequence[str],
    distribution: Distribution,
    fallback_bullets: Sequence[str] = (),
    skip_existing: bool = True,
) -> RebuildResult:
    """
    Rebuild a document's paragraph stream with distributed bullets spliced in.

    Args:
        lines: Original document lines
        distribution: Per-section bullet assignment
        fallback_bullets: Bullets appended under "Key Contributions:" when there are no top sections
        skip_existing: Leave out bullets already present in the document

    Returns:
        RebuildResult with paragraphs, edits, and counts

    Example:
        >>> result = rebuild_document(lines, distribution)
        >>> [p.text for p in result.paragraphs if p.is_original] == list(lines)
        True
    """
    edits, skipped = plan_edits(lines, distribution, fallback_bullets, skip_existing)
    paragraphs = apply_edits(lines, edits)

    result = RebuildResult(
        paragraphs=paragraphs,
        edits=edits,
        bullets_added=sum(1 for p in paragraphs if p.kind == BULLET),
        skipped_bullets=skipped,
    )
    log_rebuild_result(result, len(lines))
    return result
