"""
Tailoring request model for the Intake context.

Provides the validated, immutable inputs consumed by the targeting and rendering
contexts: tech groups, extraction settings, and the request wrapper that ties
them to a document's raw text.

Pattern follows the rest of the package: parsing produces plain dataclasses,
downstream contexts only ever read them.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from resplice.contexts.intake.exceptions import InputError

# Default extraction budget (per request, overridable per call)
DEFAULT_MIN_POINTS_PER_TECH = 1
DEFAULT_MAX_POINTS_PER_TECH = 4
DEFAULT_TOTAL_TARGET_POINTS = 18

PROCESSING_MODES = ("single", "bulk")

# Leading bullet glyphs callers commonly paste in: "• text", "- text", "* text"
BULLET_GLYPH = re.compile(r"^\s*[•\-\*●▪]+\s*")


def normalize_bullet(text: str) -> str:
    """
    Strip leading bullet glyphs and surrounding whitespace from a bullet.

    Args:
        text: Raw bullet text as supplied by the caller

    Returns:
        Bare bullet text

    Example:
        >>> normalize_bullet("  • Built 5 REST APIs ")
        'Built 5 REST APIs'
    """
    return BULLET_GLYPH.sub("", text).strip()


def _require_int(value: Any, name: str) -> int:
    # bool is an int subclass; "true" as a point count is a caller bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise InputError("Extraction setting must be an integer", field=name, value=value)
    if value < 0:
        raise InputError("Extraction setting must not be negative", field=name, value=value)
    return value


@dataclass(frozen=True)
class TechGroup:
    """
    A technology label paired with its candidate achievement bullets.

    Bullet order is significant and duplicates are kept.
    """

    technology: str
    bullets: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any], position: int = 0) -> "TechGroup":
        """
        Build a TechGroup from a JSON-compatible dict.

        Accepts both {technology, bullets} and the legacy {name, points} shape.

        Raises:
            InputError: If the technology is blank or a bullet is not a non-empty string
        """
        if not isinstance(data, dict):
            raise InputError("Tech stack entry must be an object", field=f"techStack[{position}]", value=data)

        technology = data.get("technology", data.get("name"))
        bullets = data.get("bullets", data.get("points", []))

        if not isinstance(technology, str) or not technology.strip():
            raise InputError(
                "Tech stack name is required", field=f"techStack[{position}].technology", value=technology
            )
        if not isinstance(bullets, (list, tuple)):
            raise InputError(
                "Bullets must be a list of strings", field=f"techStack[{position}].bullets", value=bullets
            )

        cleaned = []
        for index, bullet in enumerate(bullets):
            if not isinstance(bullet, str):
                raise InputError(
                    "Bullet must be a string",
                    field=f"techStack[{position}].bullets[{index}]",
                    value=bullet,
                )
            text = normalize_bullet(bullet)
            if not text:
                raise InputError(
                    "Point cannot be empty", field=f"techStack[{position}].bullets[{index}]", value=bullet
                )
            cleaned.append(text)

        return cls(technology=technology.strip(), bullets=tuple(cleaned))


@dataclass(frozen=True)
class ExtractionSettings:
    """
    Budget controlling how many bullets each technology may contribute.

    Attributes:
        dynamic_extraction: Use the proportional, relevance-weighted budget (else keep max per tech)
        min_points_per_tech: Lower bound per technology (capped by available bullets)
        max_points_per_tech: Upper bound per technology
        total_target_points: Total budget shared proportionally across technologies
    """

    dynamic_extraction: bool = True
    min_points_per_tech: int = DEFAULT_MIN_POINTS_PER_TECH
    max_points_per_tech: int = DEFAULT_MAX_POINTS_PER_TECH
    total_target_points: int = DEFAULT_TOTAL_TARGET_POINTS

    def validate(self) -> "ExtractionSettings":
        """
        Check settings invariants.

        Raises:
            InputError: If a value is negative, not an integer, or min exceeds max
        """
        if not isinstance(self.dynamic_extraction, bool):
            raise InputError(
                "dynamicExtraction must be a boolean",
                field="extractionSettings.dynamicExtraction",
                value=self.dynamic_extraction,
            )
        _require_int(self.min_points_per_tech, "extractionSettings.minPointsPerTech")
        _require_int(self.max_points_per_tech, "extractionSettings.maxPointsPerTech")
        _require_int(self.total_target_points, "extractionSettings.totalTargetPoints")

        if self.min_points_per_tech > self.max_points_per_tech:
            raise InputError(
                f"minPointsPerTech ({self.min_points_per_tech}) exceeds "
                f"maxPointsPerTech ({self.max_points_per_tech})",
                field="extractionSettings",
            )
        return self

    @classmethod
    def from_dict(
        cls, data: Optional[Dict[str, Any]], defaults: Optional["ExtractionSettings"] = None
    ) -> "ExtractionSettings":
        """
        Build settings from the camelCase request shape, filling gaps from defaults.

        Args:
            data: {dynamicExtraction, minPointsPerTech, maxPointsPerTech, totalTargetPoints} or None
            defaults: Settings used for missing keys (built-in defaults if None)
        """
        base = defaults or cls()
        if data is None:
            return base.validate()
        if not isinstance(data, dict):
            raise InputError("extractionSettings must be an object", field="extractionSettings", value=data)

        settings = cls(
            dynamic_extraction=data.get("dynamicExtraction", base.dynamic_extraction),
            min_points_per_tech=data.get("minPointsPerTech", base.min_points_per_tech),
            max_points_per_tech=data.get("maxPointsPerTech", base.max_points_per_tech),
            total_target_points=data.get("totalTargetPoints", base.total_target_points),
        )
        return settings.validate()


@dataclass(frozen=True)
class TailoringRequest:
    """
    A validated request: document text, tech stack, and extraction settings.

    Factory methods:
        from_dict(data) - Parse the JSON-compatible camelCase request
    """

    raw_text: str
    tech_stack: Tuple[TechGroup, ...]
    extraction_settings: ExtractionSettings = field(default_factory=ExtractionSettings)
    processing_mode: str = "single"

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Reject requests that cannot be processed.

        Raises:
            InputError: For empty raw text, empty tech stack, bad settings, or unknown mode
        """
        if not isinstance(self.raw_text, str) or not self.raw_text.strip():
            raise InputError("No document text provided", field="rawText")
        if not self.tech_stack:
            raise InputError("No tech stack provided", field="techStack")
        if self.processing_mode not in PROCESSING_MODES:
            raise InputError(
                f"processingMode must be one of {PROCESSING_MODES}",
                field="processingMode",
                value=self.processing_mode,
            )
        self.extraction_settings.validate()

    @property
    def lines(self) -> list[str]:
        """Document split into lines (the RawDocument)."""
        return self.raw_text.split("\n")

    @classmethod
    def from_dict(
        cls, data: Dict[str, Any], default_settings: Optional[ExtractionSettings] = None
    ) -> "TailoringRequest":
        """
        Parse a JSON-compatible request.

        Args:
            data: {rawText, techStack: [{technology, bullets}], extractionSettings?, processingMode?}
            default_settings: Settings used for keys missing from extractionSettings

        Returns:
            Validated TailoringRequest

        Raises:
            InputError: If any part of the request is malformed
        """
        if not isinstance(data, dict):
            raise InputError("Request must be an object", value=data)

        raw_text = data.get("rawText", "")
        tech_stack = data.get("techStack") or []
        if not isinstance(tech_stack, (list, tuple)):
            raise InputError("techStack must be a list", field="techStack", value=tech_stack)

        groups = tuple(TechGroup.from_dict(item, position) for position, item in enumerate(tech_stack))
        settings = ExtractionSettings.from_dict(data.get("extractionSettings"), defaults=default_settings)

        return cls(
            raw_text=raw_text,
            tech_stack=groups,
            extraction_settings=settings,
            processing_mode=data.get("processingMode", "single"),
        )
