"""
Default values for the targeting context.

Provides the shared lookup tables and weight profiles used by:
- relevance.py (technology families, context domains, stop words)
- distribution.py (action verbs, top section count)
- config_resolver.py (base configuration that YAML overrides merge into)

Domain tables are small and hand-curated.
"""

from typing import Any, Dict

from resplice.contexts.intake.request import (
    DEFAULT_MAX_POINTS_PER_TECH,
    DEFAULT_MIN_POINTS_PER_TECH,
    DEFAULT_TOTAL_TARGET_POINTS,
)
from resplice.contexts.intake.segmenter import FALLBACK_SECTION_TITLE, MIN_SECTION_CHARS

# Number of highest-scoring sections that receive bullets
TOP_SECTION_COUNT = 3

# Related terms that count as partial mentions of a technology.
# Keyed by the lowercased technology label; only the matching family applies.
TECH_FAMILIES = {
    "javascript": ["js", "node", "react", "vue", "angular", "typescript", "es6", "jquery"],
    "python": ["django", "flask", "fastapi", "pandas", "numpy", "tensorflow", "pytorch"],
    "java": ["spring", "hibernate", "maven", "gradle", "jvm", "kotlin"],
    "react": ["jsx", "redux", "hooks", "nextjs", "gatsby", "styled-components"],
    "node": ["express", "npm", "yarn", "socket.io", "mongoose", "sequelize"],
    "aws": ["ec2", "lambda", "s3", "rds", "cloudformation", "dynamodb", "api gateway"],
    "docker": ["container", "kubernetes", "k8s", "containerization", "orchestration"],
    "database": ["sql", "mysql", "postgresql", "mongodb", "redis", "nosql"],
}

# Project-type context: keywords that reveal the domain, and the technologies it favours
CONTEXT_DOMAINS = {
    "web": {
        "keywords": ["web", "frontend", "backend", "fullstack", "website", "application"],
        "technologies": ["javascript", "react", "vue", "angular", "html", "css", "node"],
    },
    "mobile": {
        "keywords": ["mobile", "ios", "android", "app", "react native", "flutter"],
        "technologies": ["react native", "flutter", "swift", "kotlin", "java"],
    },
    "data": {
        "keywords": ["data", "analytics", "machine learning", "ai", "analysis", "visualization"],
        "technologies": ["python", "r", "sql", "tensorflow", "pytorch", "pandas"],
    },
}

# Bullet tokens ignored when scoring keyword overlap
STOP_WORDS = frozenset({"with", "using", "from", "that", "this", "have", "been", "were", "will"})

# Bullet tokens shorter than or equal to this are ignored by the section scorer
MAX_IGNORED_TOKEN_CHARS = 3

# Verbs that signal an achievement-style bullet
ACTION_VERBS = ("developed", "implemented", "built", "created", "designed", "optimized", "managed")

# Per-bullet placement weights (equal-distribution mode)
BULLET_KEYWORD_WEIGHT = 10
BULLET_MIN_TOKEN_CHARS = 4
BULLET_TECH_MENTION_BONUS = 25
BULLET_ACTION_VERB_WEIGHT = 5

# Technology keywords recognised in raw documents (reported in previews)
KNOWN_TECHNOLOGIES = (
    # Programming languages
    "javascript", "typescript", "python", "java", "c++", "c#", "php", "ruby", "go", "rust",
    "swift", "kotlin", "scala", "matlab", "perl", "haskell", "clojure",
    # Web
    "html", "css", "react", "vue", "angular", "node.js", "express", "django", "flask",
    "spring", "laravel", "rails", "asp.net", "jquery", "bootstrap", "sass", "graphql",
    # Databases
    "mysql", "postgresql", "mongodb", "redis", "elasticsearch", "cassandra", "dynamodb",
    "sqlite", "oracle", "sql server", "mariadb", "neo4j",
    # Cloud and DevOps
    "aws", "azure", "gcp", "docker", "kubernetes", "jenkins", "gitlab", "github",
    "terraform", "ansible", "nginx",
    # Mobile
    "react native", "flutter", "android", "ios",
    # Data and ML
    "tensorflow", "pytorch", "scikit-learn", "pandas", "numpy", "jupyter",
    "tableau", "power bi", "apache spark", "hadoop", "kafka",
    # Tooling
    "git", "jira", "linux",
)

# Scoring weight profiles. The preview and process paths historically drifted apart;
# both are kept as named profiles of the single scorer.
DEFAULT_SCORING_PROFILES: Dict[str, Dict[str, Any]] = {
    "preview": {
        "direct_mention": 50,
        "family_mention": 25,
        "keyword": 3,
        "context_bonus": 20,
        "short_content_chars": 200,
        "short_content_factor": 0.7,
        "long_content_chars": 800,
        "long_content_factor": 1.0,
        "relevance_threshold": 10,
        "relevance_bonus_threshold": 50,
    },
    "process": {
        "direct_mention": 50,
        "family_mention": 25,
        "keyword": 5,
        "context_bonus": 30,
        "short_content_chars": 200,
        "short_content_factor": 0.7,
        "long_content_chars": 800,
        "long_content_factor": 1.2,
        "relevance_threshold": 10,
        "relevance_bonus_threshold": 50,
    },
}


def get_default_config() -> Dict[str, Any]:
    """
    Get the complete default engine configuration.

    Used by config_resolver as the base that YAML overrides are merged into.

    Returns:
        Dict with every configuration key the engine reads
    """
    return {
        "top_section_count": TOP_SECTION_COUNT,
        "min_section_chars": MIN_SECTION_CHARS,
        "fallback_section_title": FALLBACK_SECTION_TITLE,
        "preview_excerpt_chars": 500,
        "preview_profile": "preview",
        "process_profile": "process",
        "skip_existing_bullets": True,
        "extraction": {
            "dynamic_extraction": True,
            "min_points_per_tech": DEFAULT_MIN_POINTS_PER_TECH,
            "max_points_per_tech": DEFAULT_MAX_POINTS_PER_TECH,
            "total_target_points": DEFAULT_TOTAL_TARGET_POINTS,
        },
        "scoring_profiles": {name: dict(weights) for name, weights in DEFAULT_SCORING_PROFILES.items()},
    }
