"""
Extraction planning for the Targeting context.

Decides, per technology, how many of its bullets to keep (the extraction
budget) and which ones (the strongest bullets by length and metrics).

Budget per technology:
    proportional = round(available / total_available * min(target, total_available))
    bonus        = 1 if summed relevance across sections > threshold else 0
    planned      = clamp(proportional + bonus, min(min_points, available), min(max_points, available))
"""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from resplice.contexts.intake.request import ExtractionSettings, TechGroup
from resplice.contexts.intake.segmenter import ProjectSection
from resplice.contexts.targeting.logger import log_extraction_plans
from resplice.contexts.targeting.relevance import ScoringWeights, score_relevance
from resplice.utils.text_processing import round_half_up

# Each ASCII digit in a bullet is worth this many characters of length
DIGIT_WEIGHT = 5

_DIGIT = re.compile(r"[0-9]")


@dataclass(frozen=True)
class ExtractionPlan:
    """
    Extraction decision for one technology.

    Attributes:
        technology: Technology label
        available_bullets: Number of bullets supplied for the technology
        planned_extract: Number of bullets to keep
        bullets: All supplied bullets, in caller order
        selected: The kept bullets, strongest first
        tech_relevance: Relevance summed over every section
    """

    technology: str
    available_bullets: int
    planned_extract: int
    bullets: Tuple[str, ...]
    selected: Tuple[str, ...] = ()
    tech_relevance: int = 0

    def to_dict(self) -> dict:
        return {
            "technology": self.technology,
            "availableBullets": self.available_bullets,
            "plannedExtract": self.planned_extract,
            "selectedBullets": list(self.selected),
            "techRelevance": self.tech_relevance,
        }


def bullet_strength(text: str) -> int:
    """
    Score a bullet for selection: longer, metric-bearing bullets win.

    Example:
        >>> bullet_strength("Cut latency by 40%")
        28
    """
    return len(text) + DIGIT_WEIGHT * len(_DIGIT.findall(text))


def select_bullets(bullets: Sequence[str], count: int) -> Tuple[str, ...]:
    """
    Pick the strongest bullets.

    Sorting is stable, so equal-strength bullets keep their original order.

    Args:
        bullets: Candidate bullets in caller order
        count: How many to keep

    Returns:
        Up to count bullets, strongest first
    """
    if count <= 0:
        return ()
    ranked = sorted(bullets, key=bullet_strength, reverse=True)
    return tuple(ranked[:count])


def plan_extraction(
    tech_stack: Sequence[TechGroup],
    sections: Sequence[ProjectSection],
    settings: ExtractionSettings = ExtractionSettings(),
    weights: ScoringWeights = ScoringWeights(),
) -> List[ExtractionPlan]:
    """
    Build one ExtractionPlan per technology.

    With dynamic extraction disabled, every technology keeps its capped maximum.
    An empty tech stack or one without any bullets yields zero-bullet plans
    rather than an error.

    Args:
        tech_stack: Technologies with their bullets, in caller order
        sections: All detected sections (relevance is summed across them)
        settings: Extraction budget
        weights: Scoring profile used for technology relevance

    Returns:
        Plans in tech-stack order
    """
    total_available = sum(len(group.bullets) for group in tech_stack)
    target_points = min(settings.total_target_points, total_available)

    plans = []
    for group in tech_stack:
        available = len(group.bullets)
        min_extract = min(settings.min_points_per_tech, available)
        max_extract = min(settings.max_points_per_tech, available)

        tech_relevance = sum(
            score_relevance(group.technology, group.bullets, section.content, weights)
            for section in sections
        )

        if not settings.dynamic_extraction:
            planned = max_extract
        elif total_available == 0:
            planned = min_extract
        else:
            proportional = round_half_up(available / total_available * target_points)
            bonus = 1 if tech_relevance > weights.relevance_bonus_threshold else 0
            planned = max(min_extract, min(max_extract, proportional + bonus))

        plans.append(
            ExtractionPlan(
                technology=group.technology,
                available_bullets=available,
                planned_extract=planned,
                bullets=tuple(group.bullets),
                selected=select_bullets(group.bullets, planned),
                tech_relevance=tech_relevance,
            )
        )

    log_extraction_plans(plans, target_points)
    return plans
