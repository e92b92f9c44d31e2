"""
Intake Context

Responsibilities:
- Validates tailoring requests (raw text, tech stack, extraction settings)
- Normalizes caller-supplied achievement bullets
- Segments raw document text into candidate project sections

Owns: Request model, section heuristics
Never: Scores sections or decides where bullets go
"""

from resplice.contexts.intake.exceptions import (
    CodecFailure,
    ConfigError,
    InputError,
    ResplicerError,
)
from resplice.contexts.intake.request import (
    ExtractionSettings,
    TailoringRequest,
    TechGroup,
)
from resplice.contexts.intake.segmenter import ProjectSection, segment_sections

__all__ = [
    # Errors
    "ResplicerError",
    "InputError",
    "CodecFailure",
    "ConfigError",
    # Request model
    "TechGroup",
    "ExtractionSettings",
    "TailoringRequest",
    # Segmentation
    "ProjectSection",
    "segment_sections",
]
