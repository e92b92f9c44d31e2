"""
Preview assembly for the Rendering context.

Collects the targeting outputs for one document into the JSON-compatible
preview shape (insertion points, top projects, per-technology distribution,
statistics) without touching the document itself.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from resplice.contexts.targeting.defaults import KNOWN_TECHNOLOGIES
from resplice.contexts.targeting.distribution import InsertionPoint
from resplice.contexts.targeting.extraction_planner import ExtractionPlan
from resplice.contexts.targeting.relevance import ScoredSection
from resplice.utils.text_processing import round_half_up

EXCERPT_SUFFIX = "..."


@dataclass
class PreviewStatistics:
    """
    Summary numbers shown with a preview (and returned by process calls).

    Attributes:
        total_projects: Sections detected in the document
        projects_to_modify: Top sections selected to receive bullets
        total_bullets_to_add: Bullets that would be (or were) inserted
        average_relevance_score: Mean relevance across insertion points, rounded
    """

    total_projects: int = 0
    projects_to_modify: int = 0
    total_bullets_to_add: int = 0
    average_relevance_score: int = 0

    def to_dict(self) -> dict:
        return {
            "totalProjects": self.total_projects,
            "projectsToModify": self.projects_to_modify,
            "totalBulletsToAdd": self.total_bullets_to_add,
            "averageRelevanceScore": self.average_relevance_score,
        }


@dataclass
class PreviewResult:
    """
    Preview of the edits the engine would make to one document.

    Attributes:
        filename: Source document name
        original_content: Leading excerpt of the document text
        processing_mode: "single" or "bulk"
        insertion_points: Planned insertions, highest relevance first
        top_projects: Ranked top sections
        tech_stack_distribution: Technology -> [{project, relevanceScore, bulletCount}]
        statistics: Summary numbers
        detected_technologies: Known technologies found in the document text
        extraction_plans: Per-technology extraction decisions
    """

    filename: str
    original_content: str
    processing_mode: str = "single"
    insertion_points: List[InsertionPoint] = field(default_factory=list)
    top_projects: List[ScoredSection] = field(default_factory=list)
    tech_stack_distribution: Dict[str, List[dict]] = field(default_factory=dict)
    statistics: PreviewStatistics = field(default_factory=PreviewStatistics)
    detected_technologies: List[str] = field(default_factory=list)
    extraction_plans: List[ExtractionPlan] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "originalContent": self.original_content,
            "processingMode": self.processing_mode,
            "insertionPoints": [point.to_dict() for point in self.insertion_points],
            "topProjects": [scored.to_dict() for scored in self.top_projects],
            "techStackDistribution": self.tech_stack_distribution,
            "statistics": self.statistics.to_dict(),
            "detectedTechnologies": self.detected_technologies,
            "extractionPlans": [plan.to_dict() for plan in self.extraction_plans],
        }


def excerpt(text: str, max_chars: int) -> str:
    """
    Leading excerpt of a document for display.

    The suffix is always appended, matching what preview consumers expect.

    Example:
        >>> excerpt("Jane Doe\\nEngineer", 4)
        'Jane...'
    """
    return text[:max_chars] + EXCERPT_SUFFIX


def detect_technologies(raw_text: str, catalogue: Sequence[str] = KNOWN_TECHNOLOGIES) -> List[str]:
    """
    Find known technology keywords in a document.

    Matches are case-insensitive and must not sit inside a longer word, so
    "go" does not match "good" while "c++" and "node.js" still match.

    Args:
        raw_text: Document text
        catalogue: Keywords to look for

    Returns:
        Keywords found, in catalogue order, without duplicates
    """
    text = raw_text.lower()
    found = []
    for tech in catalogue:
        pattern = r"(?<![a-z0-9])" + re.escape(tech) + r"(?![a-z0-9])"
        if tech not in found and re.search(pattern, text):
            found.append(tech)
    return found


def tech_stack_distribution(points: Sequence[InsertionPoint]) -> Dict[str, List[dict]]:
    """Group insertion points by technology, keeping their order."""
    distribution: Dict[str, List[dict]] = {}
    for point in points:
        distribution.setdefault(point.technology, []).append(
            {
                "project": point.project,
                "relevanceScore": point.relevance_score,
                "bulletCount": len(point.bullets),
            }
        )
    return distribution


def preview_statistics(
    total_projects: int,
    top_projects: Sequence[ScoredSection],
    points: Sequence[InsertionPoint],
) -> PreviewStatistics:
    """
    Compute preview statistics.

    Example:
        >>> preview_statistics(4, top, []).average_relevance_score
        0
    """
    average = sum(p.relevance_score for p in points) / len(points) if points else 0
    return PreviewStatistics(
        total_projects=total_projects,
        projects_to_modify=len(top_projects),
        total_bullets_to_add=sum(len(p.bullets) for p in points),
        average_relevance_score=round_half_up(average),
    )


def assemble_preview(
    filename: str,
    raw_text: str,
    total_projects: int,
    top_projects: Sequence[ScoredSection],
    points: Sequence[InsertionPoint],
    plans: Sequence[ExtractionPlan] = (),
    processing_mode: str = "single",
    excerpt_chars: int = 500,
    detected: Optional[List[str]] = None,
) -> PreviewResult:
    """
    Build the PreviewResult for one document.

    Args:
        filename: Source document name
        raw_text: Document text
        total_projects: Number of detected sections
        top_projects: Ranked top sections
        points: Insertion points from build_insertion_points()
        plans: Extraction plans (reported as-is)
        processing_mode: Request processing mode
        excerpt_chars: Length of the original content excerpt
        detected: Pre-computed detected technologies (computed if None)

    Returns:
        PreviewResult
    """
    return PreviewResult(
        filename=filename,
        original_content=excerpt(raw_text, excerpt_chars),
        processing_mode=processing_mode,
        insertion_points=list(points),
        top_projects=list(top_projects),
        tech_stack_distribution=tech_stack_distribution(points),
        statistics=preview_statistics(total_projects, top_projects, points),
        detected_technologies=detect_technologies(raw_text) if detected is None else detected,
        extraction_plans=list(plans),
    )
