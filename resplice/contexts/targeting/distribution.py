"""
Bullet distribution for the Targeting context.

Spreads planned bullets across the top-ranked sections in one of two modes:

- Insertion-point mode (previews): every top section x technology pair that is
  relevant enough becomes an InsertionPoint carrying all of the technology's
  selected bullets and a concrete line to insert them at.

- Equal-distribution mode (document rewrite): every selected bullet is scored
  against each top section, then each technology's bullets are cut into
  ceil(count / sections)-sized chunks that are dealt round-robin over the
  sections in ranked order. Spread wins over best match.
"""

import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from resplice.contexts.intake.section_patterns import is_insertion_marker
from resplice.contexts.intake.segmenter import ProjectSection
from resplice.contexts.targeting.defaults import (
    ACTION_VERBS,
    BULLET_ACTION_VERB_WEIGHT,
    BULLET_KEYWORD_WEIGHT,
    BULLET_MIN_TOKEN_CHARS,
    BULLET_TECH_MENTION_BONUS,
)
from resplice.contexts.targeting.extraction_planner import ExtractionPlan
from resplice.contexts.targeting.logger import _log_debug, log_distribution
from resplice.contexts.targeting.relevance import ScoredSection, ScoringWeights, score_relevance
from resplice.utils.text_processing import count_word_occurrences, word_tokens

# Lines of context shown on each side of an insertion line
CONTEXT_LINES = 2


# =============================================================================
# INSERTION-POINT MODE
# =============================================================================


@dataclass(frozen=True)
class InsertionPoint:
    """
    A planned edit location plus the bullets to insert there.

    Attributes:
        technology: Technology label
        project: Title of the target section
        bullets: Selected bullets of the technology, strongest first
        relevance_score: Pair score of the technology against the section
        insertion_line: Line index the bullets are inserted before
        context_before: Up to two lines preceding the insertion line (trimmed)
        context_after: Up to two lines from the insertion line on (trimmed)
    """

    technology: str
    project: str
    bullets: Tuple[str, ...]
    relevance_score: int
    insertion_line: int
    context_before: str = ""
    context_after: str = ""

    def to_dict(self) -> dict:
        return {
            "technology": self.technology,
            "project": self.project,
            "bullets": list(self.bullets),
            "relevanceScore": self.relevance_score,
            "insertionLine": self.insertion_line,
            "contextBefore": self.context_before,
            "contextAfter": self.context_after,
        }


def find_insertion_line(lines: Sequence[str], section: ProjectSection) -> int:
    """
    Choose where bullets go inside a section.

    Defaults to the line after the section title; moves to the line after the
    first "Responsibilities:"/"Duties:"/"Achievements:" marker in the section.

    Args:
        lines: Document lines
        section: Target section

    Returns:
        Line index to insert before
    """
    last = min(section.end_index, len(lines) - 1)
    for index in range(section.start_index, last + 1):
        if is_insertion_marker(lines[index]):
            return index + 1
    return section.start_index + 1


def context_snippets(lines: Sequence[str], insertion_line: int) -> Tuple[str, str]:
    """Return the trimmed lines surrounding an insertion line, for display."""
    before = "\n".join(lines[max(0, insertion_line - CONTEXT_LINES) : insertion_line]).strip()
    after = "\n".join(lines[insertion_line : insertion_line + CONTEXT_LINES]).strip()
    return before, after


def build_insertion_points(
    lines: Sequence[str],
    top_sections: Sequence[ScoredSection],
    plans: Sequence[ExtractionPlan],
    weights: ScoringWeights = ScoringWeights(),
) -> List[InsertionPoint]:
    """
    Build insertion points for every relevant (top section, technology) pair.

    A pair qualifies when the section mentions the technology or the pair
    score exceeds the weights' relevance threshold. Technologies with no
    selected bullets contribute nothing.

    Args:
        lines: Document lines
        top_sections: Ranked top sections
        plans: Extraction plans (selected bullets are used)
        weights: Scoring profile

    Returns:
        Insertion points, highest relevance first (stable for ties)
    """
    points = []
    for scored in top_sections:
        section = scored.section
        content_lower = section.content.lower()
        insertion_line = find_insertion_line(lines, section)
        before, after = context_snippets(lines, insertion_line)

        for plan in plans:
            if not plan.selected:
                continue

            pair_score = score_relevance(plan.technology, plan.selected, section.content, weights)
            mentioned = plan.technology.lower() in content_lower
            if not mentioned and pair_score <= weights.relevance_threshold:
                continue

            points.append(
                InsertionPoint(
                    technology=plan.technology,
                    project=section.title,
                    bullets=plan.selected,
                    relevance_score=pair_score,
                    insertion_line=insertion_line,
                    context_before=before,
                    context_after=after,
                )
            )

    _log_debug(f"Built {len(points)} insertion point(s) across {len(top_sections)} top section(s)")
    return sorted(points, key=lambda point: point.relevance_score, reverse=True)


# =============================================================================
# EQUAL-DISTRIBUTION MODE
# =============================================================================


@dataclass(frozen=True)
class BulletPlacement:
    """
    Per-bullet relevance against each top section.

    Attributes:
        technology: Technology the bullet belongs to
        bullet: Bullet text
        section_scores: Score against each top section, in ranked order
    """

    technology: str
    bullet: str
    section_scores: Tuple[int, ...]

    @property
    def best_index(self) -> int:
        """Ranked index of the best-matching section (first one wins ties)."""
        best = max(self.section_scores)
        return self.section_scores.index(best)

    @property
    def best_score(self) -> int:
        return max(self.section_scores)

    def to_dict(self) -> dict:
        return {
            "technology": self.technology,
            "bullet": self.bullet,
            "sectionScores": list(self.section_scores),
            "bestSection": self.best_index,
        }


@dataclass(frozen=True)
class DistributionEntry:
    """Bullets of one technology assigned to one section."""

    technology: str
    bullets: Tuple[str, ...]

    def to_dict(self) -> dict:
        return {"technology": self.technology, "bullets": list(self.bullets)}


@dataclass(frozen=True)
class SectionAssignment:
    """Ordered bullet entries assigned to one top section."""

    section: ProjectSection
    entries: Tuple[DistributionEntry, ...] = ()

    @property
    def bullet_count(self) -> int:
        return sum(len(entry.bullets) for entry in self.entries)


@dataclass(frozen=True)
class Distribution:
    """
    Final per-section bullet assignment used to rewrite a document.

    Attributes:
        assignments: One SectionAssignment per top section, in ranked order
        placements: Per-bullet scores that drove the assignment
    """

    assignments: Tuple[SectionAssignment, ...] = ()
    placements: Tuple[BulletPlacement, ...] = field(default=(), repr=False)

    @property
    def total_bullets(self) -> int:
        return sum(assignment.bullet_count for assignment in self.assignments)

    def by_title(self) -> Dict[str, List[DistributionEntry]]:
        """Project title -> ordered entries (sections sharing a title are merged)."""
        mapping: Dict[str, List[DistributionEntry]] = {}
        for assignment in self.assignments:
            mapping.setdefault(assignment.section.title, []).extend(assignment.entries)
        return mapping

    def to_dict(self) -> dict:
        return {
            title: [entry.to_dict() for entry in entries]
            for title, entries in self.by_title().items()
        }


def bullet_placement_score(technology: str, bullet: str, content: str) -> int:
    """
    Score one bullet against one section's content.

    Components:
    - 10 per distinct bullet word (4+ chars) found in the section
    - 25 if the section mentions the technology
    - 5 per action verb occurrence in the bullet (same for every section)

    Example:
        >>> bullet_placement_score("Python", "Built Django APIs", "python django services")
        40
    """
    content_lower = content.lower()
    bullet_lower = bullet.lower()

    tokens = dict.fromkeys(t for t in word_tokens(bullet_lower) if len(t) >= BULLET_MIN_TOKEN_CHARS)
    score = BULLET_KEYWORD_WEIGHT * sum(1 for token in tokens if token in content_lower)

    if technology.lower() in content_lower:
        score += BULLET_TECH_MENTION_BONUS

    score += BULLET_ACTION_VERB_WEIGHT * sum(
        count_word_occurrences(bullet_lower, verb) for verb in ACTION_VERBS
    )
    return score


def place_bullets(
    top_sections: Sequence[ScoredSection], plans: Sequence[ExtractionPlan]
) -> List[BulletPlacement]:
    """Score every selected bullet against every top section."""
    placements = []
    for plan in plans:
        for bullet in plan.selected:
            scores = tuple(
                bullet_placement_score(plan.technology, bullet, scored.section.content)
                for scored in top_sections
            )
            placements.append(BulletPlacement(plan.technology, bullet, scores))
    return placements


def distribute_equally(
    top_sections: Sequence[ScoredSection], plans: Sequence[ExtractionPlan]
) -> Distribution:
    """
    Assign every selected bullet to a top section with an even spread.

    For each technology (in tech-stack order), its bullets are sorted by their
    best per-section score and cut into ceil(count / sections)-sized chunks.
    Chunks are dealt round-robin over the sections in ranked order: the k-th
    chunk dealt goes to section k mod n, whichever section its bullets match
    best. The count carries over from one technology to the next, so a run of
    single-bullet technologies does not pile onto the top section.

    Args:
        top_sections: Ranked top sections
        plans: Extraction plans (selected bullets are distributed)

    Returns:
        Distribution with one assignment per top section (empty if there are none)
    """
    if not top_sections:
        return Distribution()

    section_count = len(top_sections)
    entries: List[List[DistributionEntry]] = [[] for _ in range(section_count)]
    placements: List[BulletPlacement] = []
    turn = 0

    for plan in plans:
        own = place_bullets(top_sections, [plan])
        placements.extend(own)
        if not own:
            continue

        own.sort(key=lambda p: p.best_score, reverse=True)
        chunk_size = math.ceil(len(own) / section_count)

        for start in range(0, len(own), chunk_size):
            chunk = own[start : start + chunk_size]
            target = turn % section_count
            turn += 1
            bullets = tuple(p.bullet for p in chunk)

            section_entries = entries[target]
            if section_entries and section_entries[-1].technology == plan.technology:
                merged = section_entries[-1].bullets + bullets
                section_entries[-1] = DistributionEntry(plan.technology, merged)
            else:
                section_entries.append(DistributionEntry(plan.technology, bullets))

    distribution = Distribution(
        assignments=tuple(
            SectionAssignment(section=scored.section, entries=tuple(entries[index]))
            for index, scored in enumerate(top_sections)
        ),
        placements=tuple(placements),
    )
    log_distribution(distribution.by_title())
    return distribution
