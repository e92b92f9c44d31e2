"""
Relevance scoring for the Targeting context.

Scores how well a technology (and its candidate bullets) matches the text of
one project section. One scorer serves every caller; the preview and process
paths differ only in the ScoringWeights profile they pass in.

Scoring components (all case-insensitive, summed):
1. Direct mentions of the technology label
2. Mentions of terms from the technology's family (e.g., python -> django)
3. Keyword overlap between the technology's bullets and the section
4. Context bonus when the section's domain favours the technology
5. Length adjustment (short sections damped, long sections optionally boosted)
"""

from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Sequence

from resplice.contexts.intake.exceptions import ConfigError
from resplice.contexts.intake.request import TechGroup
from resplice.contexts.intake.segmenter import ProjectSection
from resplice.contexts.targeting.defaults import (
    CONTEXT_DOMAINS,
    DEFAULT_SCORING_PROFILES,
    MAX_IGNORED_TOKEN_CHARS,
    STOP_WORDS,
    TECH_FAMILIES,
)
from resplice.contexts.targeting.logger import _log_debug
from resplice.utils.text_processing import count_occurrences, round_half_up, split_tokens


@dataclass(frozen=True)
class ScoringWeights:
    """
    Weight table for the relevance scorer.

    Attributes:
        direct_mention: Points per occurrence of the technology label
        family_mention: Points per occurrence of a related family term
        keyword: Points per occurrence of a bullet keyword
        context_bonus: Flat bonus per matching project-type domain
        short_content_chars: Sections shorter than this are damped
        short_content_factor: Multiplier applied to short sections
        long_content_chars: Sections longer than this are boosted
        long_content_factor: Multiplier applied to long sections (1.0 disables)
        relevance_threshold: Minimum pair score for an insertion point without a direct mention
        relevance_bonus_threshold: Total technology relevance above which the planner adds a bullet
    """

    direct_mention: int = 50
    family_mention: int = 25
    keyword: int = 3
    context_bonus: int = 20
    short_content_chars: int = 200
    short_content_factor: float = 0.7
    long_content_chars: int = 800
    long_content_factor: float = 1.0
    relevance_threshold: int = 10
    relevance_bonus_threshold: int = 50

    @classmethod
    def from_dict(cls, data: Dict[str, Any], name: str = "custom") -> "ScoringWeights":
        """
        Build weights from a plain dict (e.g., a resolved OmegaConf node).

        Raises:
            ConfigError: If the dict has unknown keys or non-numeric values
        """
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown keys in scoring profile '{name}': {sorted(unknown)}")

        for key, value in data.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"Scoring profile '{name}' key '{key}' must be numeric, got {value!r}")
            if value < 0:
                raise ConfigError(f"Scoring profile '{name}' key '{key}' must not be negative")

        return cls(**data)

    @classmethod
    def profile(cls, name: str) -> "ScoringWeights":
        """Built-in profile by name ("preview" or "process")."""
        if name not in DEFAULT_SCORING_PROFILES:
            raise ConfigError(
                f"Scoring profile '{name}' not found. Available profiles: {list(DEFAULT_SCORING_PROFILES)}"
            )
        return cls.from_dict(DEFAULT_SCORING_PROFILES[name], name=name)


def bullet_keywords(bullets: Sequence[str]) -> List[str]:
    """
    Extract scoring keywords from a technology's bullets.

    Tokens keep their punctuation and duplicates are preserved, so a word that
    recurs across bullets weighs more.

    Args:
        bullets: Bullet texts of one technology

    Returns:
        Lowercased tokens longer than 3 characters that are not stop words
    """
    tokens = split_tokens(" ".join(bullets).lower())
    return [
        token
        for token in tokens
        if len(token) > MAX_IGNORED_TOKEN_CHARS and token not in STOP_WORDS
    ]


def context_bonus(technology: str, content: str, bonus: int) -> int:
    """
    Sum the flat bonus for every project-type domain that favours the technology.

    Args:
        technology: Lowercased technology label
        content: Lowercased section content
        bonus: Points per matching domain

    Returns:
        Total context bonus
    """
    total = 0
    for domain in CONTEXT_DOMAINS.values():
        has_context = any(keyword in content for keyword in domain["keywords"])
        if has_context and technology in domain["technologies"]:
            total += bonus
    return total


def score_relevance(
    technology: str,
    bullets: Sequence[str],
    content: str,
    weights: ScoringWeights = ScoringWeights(),
) -> int:
    """
    Score how relevant a technology is to one section's text.

    Pure and deterministic: the same inputs always give the same score.

    Args:
        technology: Technology label (any case)
        bullets: The technology's bullets (keywords come from these)
        content: Section content
        weights: Weight profile

    Returns:
        Non-negative integer score

    Example:
        >>> score_relevance("Python", ["Built Django APIs"], "Python and Django services")
        55
    """
    content_lower = content.lower()
    tech_lower = technology.lower()
    score = 0.0

    # 1. Direct technology mentions
    score += count_occurrences(content_lower, tech_lower) * weights.direct_mention

    # 2. Technology family mentions
    for related in TECH_FAMILIES.get(tech_lower, []):
        score += count_occurrences(content_lower, related) * weights.family_mention

    # 3. Keyword overlap with the bullets
    for keyword in bullet_keywords(bullets):
        score += count_occurrences(content_lower, keyword) * weights.keyword

    # 4. Project-type context
    score += context_bonus(tech_lower, content_lower, weights.context_bonus)

    # 5. Length adjustment
    if len(content) < weights.short_content_chars:
        score *= weights.short_content_factor
    elif len(content) > weights.long_content_chars:
        score *= weights.long_content_factor

    return round_half_up(score)


@dataclass(frozen=True)
class ScoredSection:
    """
    A section paired with its per-technology relevance scores.

    The section itself is never mutated; scores live alongside it.

    Attributes:
        section: The scored ProjectSection
        scores: Technology label -> summed score (duplicate labels accumulate)
    """

    section: ProjectSection
    scores: Dict[str, int] = field(default_factory=dict)

    @property
    def relevance_score(self) -> int:
        """Total relevance across all technologies (used for ranking)."""
        return sum(self.scores.values())

    @property
    def title(self) -> str:
        return self.section.title

    def to_dict(self) -> dict:
        """Section summary plus its total score (camelCase, JSON-compatible)."""
        return {**self.section.to_dict(), "relevanceScore": self.relevance_score}


def score_sections(
    sections: Sequence[ProjectSection],
    tech_stack: Sequence[TechGroup],
    weights: ScoringWeights = ScoringWeights(),
) -> List[ScoredSection]:
    """
    Score every (section, technology) pair.

    Args:
        sections: Sections in document order
        tech_stack: Technologies with their full bullet lists
        weights: Weight profile

    Returns:
        ScoredSection per section, in the same (document) order
    """
    scored = []
    for section in sections:
        scores: Dict[str, int] = {}
        for group in tech_stack:
            pair_score = score_relevance(group.technology, group.bullets, section.content, weights)
            scores[group.technology] = scores.get(group.technology, 0) + pair_score
        scored.append(ScoredSection(section=section, scores=scores))
        _log_debug(f"Section '{section.title}' scored {sum(scores.values())} {scores}")
    return scored


def rank_sections(scored: Sequence[ScoredSection], top_n: int) -> List[ScoredSection]:
    """
    Pick the top-N sections by total relevance.

    Sorting is stable: equal scores keep document order. The input is not reordered.

    Args:
        scored: Scored sections in document order
        top_n: How many sections to keep

    Returns:
        Up to top_n sections, highest score first
    """
    ranked = sorted(scored, key=lambda item: item.relevance_score, reverse=True)
    return ranked[:top_n]
