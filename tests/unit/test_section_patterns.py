"""
Unit tests for section heuristics.

Tests the opener/boundary rule tables in resplice.contexts.intake.section_patterns.
"""

import pytest

from resplice.contexts.intake.section_patterns import (
    BOUNDARY_RULES,
    OPENER_RULES,
    is_insertion_marker,
    is_responsibility_marker,
    is_section_boundary,
    is_section_opener,
    match_rule,
)


class TestSectionOpeners:
    """Tests for is_section_opener and the opener rule table."""

    @pytest.mark.parametrize(
        "line",
        [
            "Project: Billing Platform",
            "Capstone Project",
            "Software Engineer",
            "Acme Widgets Inc. (Remote)",
            "2019 - 2022",
            "2021 – Present",
            "Team Lead at Initech",
            "ACME CORP - SOFTWARE ENGINEER",
        ],
    )
    def test_opener_lines(self, line):
        """Test that typical job/project headings open a section."""
        assert is_section_opener(line)

    @pytest.mark.parametrize(
        "line",
        ["", "   ", "Jane Doe", "jane@example.com", "Built a thing.", "EXPERIENCE"],
    )
    def test_non_opener_lines(self, line):
        """Test that names, contact lines, and sentences do not open a section."""
        assert not is_section_opener(line)

    def test_first_matching_rule_wins(self):
        """Test that match_rule reports the first rule in table order."""
        assert match_rule("Project: Billing", OPENER_RULES) == "keyword_colon"
        assert match_rule("2019 - 2022", OPENER_RULES) == "date_range"
        assert match_rule("Team Lead at Initech", OPENER_RULES) == "short_title"

    def test_no_rule_matches(self):
        """Test that match_rule returns None when nothing matches."""
        assert match_rule("Jane Doe", OPENER_RULES) is None

    def test_short_title_rejects_sentences(self):
        """Test that a period disqualifies the short job-title heuristic."""
        assert match_rule("Worked with a lead.", OPENER_RULES) is None


class TestSectionBoundaries:
    """Tests for is_section_boundary."""

    @pytest.mark.parametrize(
        "line",
        ["EDUCATION", "Technical Skills", "Skills: Python", "SQL DATABASES", "ACHIEVEMENTS:"],
    )
    def test_boundary_lines(self, line):
        """Test canonical, upper-case, and colon headers close a section."""
        assert is_section_boundary(line)

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "2019 - 2021",
            "AWS",
            "Led a team of 5 engineers, shipping weekly.",
            "Responsibilities:",
            "Key Responsibilities:",
            "Role: Backend Developer",
        ],
    )
    def test_non_boundary_lines(self, line):
        """Test that content, dates, short acronyms, and duty markers stay in the section."""
        assert not is_section_boundary(line)

    def test_first_line_is_never_a_boundary(self):
        """Test that the opening line does not close its own section."""
        assert is_section_boundary("EDUCATION")
        assert not is_section_boundary("EDUCATION", is_first_line=True)

    def test_comma_disables_colon_header(self):
        """Test that a colon line with a comma reads as content, not a header."""
        assert match_rule("Skills: Python, SQL", BOUNDARY_RULES) is None


class TestResponsibilityMarkers:
    """Tests for responsibility and insertion markers."""

    def test_responsibility_markers(self):
        """Test the broad marker set used during segmentation."""
        assert is_responsibility_marker("Key Responsibilities:")
        assert is_responsibility_marker("Tasks:")
        assert is_responsibility_marker("Role: Lead")
        assert not is_responsibility_marker("Responsible for billing")

    def test_insertion_markers_are_narrower(self):
        """Test that role/tasks markers do not move the insertion line."""
        assert is_insertion_marker("Duties:")
        assert is_insertion_marker("Achievements :")
        assert not is_insertion_marker("Role: Lead")
        assert not is_insertion_marker("Tasks:")
