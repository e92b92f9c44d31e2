"""
Targeting Context

Responsibilities:
- Scores every (section, technology) pair with a single weight-profiled scorer
- Ranks sections and selects the top ones to receive bullets
- Plans how many bullets each technology contributes and which ones
- Distributes bullets across top sections (insertion points or equal spread)
- Resolves engine configuration (defaults + YAML overrides)

Owns: Relevance scoring, extraction budget, bullet placement decisions
Never: Reads/writes documents or mutates sections
"""

from resplice.contexts.targeting.config_resolver import EngineConfig, load_engine_config
from resplice.contexts.targeting.distribution import (
    Distribution,
    DistributionEntry,
    InsertionPoint,
    build_insertion_points,
    distribute_equally,
)
from resplice.contexts.targeting.extraction_planner import ExtractionPlan, plan_extraction
from resplice.contexts.targeting.relevance import (
    ScoredSection,
    ScoringWeights,
    rank_sections,
    score_relevance,
    score_sections,
)

__all__ = [
    # Configuration
    "EngineConfig",
    "load_engine_config",
    # Scoring and ranking
    "ScoringWeights",
    "ScoredSection",
    "score_relevance",
    "score_sections",
    "rank_sections",
    # Extraction budget
    "ExtractionPlan",
    "plan_extraction",
    # Distribution
    "InsertionPoint",
    "build_insertion_points",
    "Distribution",
    "DistributionEntry",
    "distribute_equally",
]
