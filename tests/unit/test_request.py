"""
Unit tests for the tailoring request model.

Tests parsing and validation in resplice.contexts.intake.request.
"""

import pytest

from resplice.contexts.intake.exceptions import InputError, ResplicerError
from resplice.contexts.intake.request import (
    ExtractionSettings,
    TailoringRequest,
    TechGroup,
    normalize_bullet,
)


def request_data(**overrides):
    data = {
        "rawText": "ACME CORP - SOFTWARE ENGINEER\n• Maintained services",
        "techStack": [{"technology": "Python", "bullets": ["Built APIs", "Wrote tests"]}],
    }
    data.update(overrides)
    return data


class TestTechGroup:
    """Tests for TechGroup parsing."""

    def test_from_dict(self):
        """Test the canonical {technology, bullets} shape."""
        group = TechGroup.from_dict({"technology": " Python ", "bullets": ["Built APIs"]})
        assert group == TechGroup("Python", ("Built APIs",))

    def test_legacy_name_points_shape(self):
        """Test the legacy {name, points} shape."""
        group = TechGroup.from_dict({"name": "Go", "points": ["Wrote a CLI"]})
        assert group.technology == "Go"
        assert group.bullets == ("Wrote a CLI",)

    def test_bullet_glyphs_are_stripped(self):
        """Test that pasted bullet glyphs are removed and duplicates kept."""
        group = TechGroup.from_dict({"technology": "Go", "bullets": ["• Wrote a CLI", "- Wrote a CLI"]})
        assert group.bullets == ("Wrote a CLI", "Wrote a CLI")

    def test_missing_bullets_means_none(self):
        """Test that a technology may come without bullets."""
        assert TechGroup.from_dict({"technology": "Rust"}).bullets == ()

    @pytest.mark.parametrize("technology", [None, "", "   "])
    def test_blank_technology(self, technology):
        """Test that a blank technology name is rejected."""
        with pytest.raises(InputError, match="Tech stack name is required"):
            TechGroup.from_dict({"technology": technology, "bullets": []})

    @pytest.mark.parametrize("bullet", ["", "  ", "•"])
    def test_empty_bullet(self, bullet):
        """Test that an empty bullet is rejected with its position."""
        with pytest.raises(InputError, match="Point cannot be empty") as exc_info:
            TechGroup.from_dict({"technology": "Go", "bullets": ["ok", bullet]}, position=2)
        assert exc_info.value.field == "techStack[2].bullets[1]"

    def test_non_string_bullet(self):
        """Test that a non-string bullet is rejected."""
        with pytest.raises(InputError):
            TechGroup.from_dict({"technology": "Go", "bullets": [42]})


class TestExtractionSettings:
    """Tests for extraction settings validation."""

    def test_defaults(self):
        """Test the built-in defaults."""
        settings = ExtractionSettings.from_dict(None)
        assert settings == ExtractionSettings(True, 1, 4, 18)

    def test_partial_dict_uses_given_defaults(self):
        """Test that missing keys come from the supplied defaults."""
        base = ExtractionSettings(False, 2, 5, 10)
        settings = ExtractionSettings.from_dict({"maxPointsPerTech": 6}, defaults=base)
        assert settings == ExtractionSettings(False, 2, 6, 10)

    def test_none_returns_defaults(self):
        """Test that omitted settings fall back to the supplied defaults."""
        base = ExtractionSettings(True, 0, 3, 9)
        assert ExtractionSettings.from_dict(None, base) == base

    def test_min_above_max(self):
        """Test that min greater than max is rejected."""
        with pytest.raises(InputError, match="exceeds"):
            ExtractionSettings.from_dict({"minPointsPerTech": 5, "maxPointsPerTech": 2})

    @pytest.mark.parametrize(
        "data",
        [
            {"minPointsPerTech": -1},
            {"totalTargetPoints": True},
            {"maxPointsPerTech": "4"},
            {"dynamicExtraction": "yes"},
        ],
    )
    def test_invalid_values(self, data):
        """Test that negatives, bools as counts, strings, and non-bool flags are rejected."""
        with pytest.raises(InputError):
            ExtractionSettings.from_dict(data)


class TestTailoringRequest:
    """Tests for TailoringRequest parsing."""

    def test_from_dict(self):
        """Test a complete request."""
        request = TailoringRequest.from_dict(
            request_data(extractionSettings={"totalTargetPoints": 6}, processingMode="bulk")
        )

        assert request.tech_stack == (TechGroup("Python", ("Built APIs", "Wrote tests")),)
        assert request.extraction_settings.total_target_points == 6
        assert request.processing_mode == "bulk"
        assert request.lines == ["ACME CORP - SOFTWARE ENGINEER", "• Maintained services"]

    @pytest.mark.parametrize(
        "overrides, field",
        [
            ({"rawText": "   "}, "rawText"),
            ({"techStack": []}, "techStack"),
            ({"techStack": "Python"}, "techStack"),
            ({"processingMode": "parallel"}, "processingMode"),
        ],
    )
    def test_rejected_requests(self, overrides, field):
        """Test that malformed requests name the failing field."""
        with pytest.raises(InputError) as exc_info:
            TailoringRequest.from_dict(request_data(**overrides))
        assert exc_info.value.field == field

    def test_input_error_is_value_error(self):
        """Test the exception hierarchy used by callers."""
        with pytest.raises(ValueError):
            TailoringRequest.from_dict(request_data(rawText=""))
        assert issubclass(InputError, ResplicerError)

    def test_error_message_includes_field(self):
        """Test that the rendered message carries the field reference."""
        error = InputError("Bad value", field="techStack", value=[1])
        assert "Field: techStack" in str(error)
        assert "Value: [1]" in str(error)


@pytest.mark.unit
def test_normalize_bullet():
    """Test glyph stripping on a few common shapes."""
    assert normalize_bullet("  • Built 5 REST APIs ") == "Built 5 REST APIs"
    assert normalize_bullet("* Shipped") == "Shipped"
    assert normalize_bullet("Cut costs by -5%") == "Cut costs by -5%"
