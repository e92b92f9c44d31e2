"""
Engine configuration resolution.

Merges an optional YAML override file onto the built-in defaults and resolves
the result into an EngineConfig. Overrides only need the keys they change.

Examples:
    # Defaults only
    >>> config = load_engine_config()

    # Override file (or set RESPLICE_CONFIG_PATH in .env)
    >>> config = load_engine_config(Path("configs/engine.yaml"))
    >>> weights = config.weights_for("process")
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from omegaconf import OmegaConf
from omegaconf.errors import OmegaConfBaseException

from resplice.contexts.intake.exceptions import ConfigError, InputError
from resplice.contexts.intake.request import ExtractionSettings
from resplice.contexts.targeting.defaults import get_default_config
from resplice.contexts.targeting.logger import _log_debug
from resplice.contexts.targeting.relevance import ScoringWeights

load_dotenv()
CONFIG_ENV_VAR = "RESPLICE_CONFIG_PATH"


@dataclass(frozen=True)
class EngineConfig:
    """
    Resolved engine configuration.

    Attributes:
        top_section_count: Sections that receive bullets
        min_section_chars: Minimum content length for a detected section
        fallback_section_title: Title of the whole-document fallback section
        preview_excerpt_chars: Characters of the document echoed in previews
        preview_profile: Scoring profile name used by previews
        process_profile: Scoring profile name used by document rewrites
        skip_existing_bullets: Do not re-insert bullets already in the document
        extraction: Default extraction budget for requests that omit one
        scoring_profiles: Profile name -> ScoringWeights
    """

    top_section_count: int = 3
    min_section_chars: int = 50
    fallback_section_title: str = "Professional Experience"
    preview_excerpt_chars: int = 500
    preview_profile: str = "preview"
    process_profile: str = "process"
    skip_existing_bullets: bool = True
    extraction: ExtractionSettings = ExtractionSettings()
    scoring_profiles: Dict[str, ScoringWeights] = field(
        default_factory=lambda: {
            "preview": ScoringWeights.profile("preview"),
            "process": ScoringWeights.profile("process"),
        }
    )

    def weights_for(self, profile_name: str) -> ScoringWeights:
        """
        Look up a scoring profile by name.

        Raises:
            ConfigError: If the profile is not configured
        """
        if profile_name not in self.scoring_profiles:
            available = list(self.scoring_profiles)
            raise ConfigError(f"Scoring profile '{profile_name}' not found. Available profiles: {available}")
        return self.scoring_profiles[profile_name]

    @property
    def preview_weights(self) -> ScoringWeights:
        return self.weights_for(self.preview_profile)

    @property
    def process_weights(self) -> ScoringWeights:
        return self.weights_for(self.process_profile)


def _resolve_config_path(config_path: Optional[Path]) -> Optional[Path]:
    if config_path is not None:
        return Path(config_path)
    env_value = os.getenv(CONFIG_ENV_VAR)
    return Path(env_value) if env_value else None


def _require_positive_int(data: Dict[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config key '{key}' must be a positive integer, got {value!r}")
    return value


def build_engine_config(data: Dict[str, Any]) -> EngineConfig:
    """
    Validate a fully merged config dict and build an EngineConfig.

    Args:
        data: Plain dict with every key from get_default_config()

    Returns:
        EngineConfig

    Raises:
        ConfigError: On unknown keys, wrong types, or inconsistent values
    """
    unknown = set(data) - set(get_default_config())
    if unknown:
        raise ConfigError(f"Unknown config keys: {sorted(unknown)}")

    profiles = {
        name: ScoringWeights.from_dict(weights, name=name)
        for name, weights in data["scoring_profiles"].items()
    }

    extraction_data = data["extraction"]
    try:
        extraction = ExtractionSettings(
            dynamic_extraction=bool(extraction_data["dynamic_extraction"]),
            min_points_per_tech=extraction_data["min_points_per_tech"],
            max_points_per_tech=extraction_data["max_points_per_tech"],
            total_target_points=extraction_data["total_target_points"],
        )
        extraction.validate()
    except InputError as e:
        raise ConfigError(f"Invalid extraction defaults: {e}") from e

    config = EngineConfig(
        top_section_count=_require_positive_int(data, "top_section_count"),
        min_section_chars=_require_positive_int(data, "min_section_chars"),
        fallback_section_title=str(data["fallback_section_title"]),
        preview_excerpt_chars=_require_positive_int(data, "preview_excerpt_chars"),
        preview_profile=str(data["preview_profile"]),
        process_profile=str(data["process_profile"]),
        skip_existing_bullets=bool(data["skip_existing_bullets"]),
        extraction=extraction,
        scoring_profiles=profiles,
    )

    # Fail early on profile names that do not exist
    for profile_name in (config.preview_profile, config.process_profile):
        config.weights_for(profile_name)
    return config


def load_engine_config(config_path: Path = None) -> EngineConfig:
    """
    Load the engine configuration.

    Defaults come from get_default_config(). If config_path is given (or
    RESPLICE_CONFIG_PATH is set), that YAML file is merged on top.

    Args:
        config_path: Optional path to a YAML override file

    Returns:
        Resolved EngineConfig

    Raises:
        ConfigError: If the file is missing, unparsable, or holds invalid values
    """
    base = OmegaConf.create(get_default_config())
    path = _resolve_config_path(config_path)

    if path is not None:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
        try:
            merged = OmegaConf.merge(base, OmegaConf.load(path))
        except OmegaConfBaseException as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e
        _log_debug(f"Loaded config overrides from {path}")
    else:
        merged = base

    data = OmegaConf.to_container(merged, resolve=True)
    return build_engine_config(data)
