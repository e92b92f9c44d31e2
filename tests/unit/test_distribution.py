"""
Unit tests for bullet distribution.

Covers insertion-point mode (previews) and equal-distribution mode
(document rewrites) in resplice.contexts.targeting.distribution.
"""

import math

import pytest

from resplice.contexts.intake.segmenter import ProjectSection
from resplice.contexts.targeting.distribution import (
    bullet_placement_score,
    build_insertion_points,
    distribute_equally,
    find_insertion_line,
)
from resplice.contexts.targeting.extraction_planner import ExtractionPlan
from resplice.contexts.targeting.relevance import ScoredSection

LINES = [
    "ACME CORP - SOFTWARE ENGINEER",
    "Responsibilities:",
    "• Maintained Python services",
    "",
    "GLOBEX - DATA ANALYST",
    "• Wrote reports",
    "",
]


def make_plan(technology: str, bullets) -> ExtractionPlan:
    bullets = tuple(bullets)
    return ExtractionPlan(
        technology=technology,
        available_bullets=len(bullets),
        planned_extract=len(bullets),
        bullets=bullets,
        selected=bullets,
    )


def section_from_lines(lines, start: int, end: int) -> ProjectSection:
    content = "".join(line + "\n" for line in lines[start : end + 1])
    return ProjectSection(title=lines[start].strip(), content=content, start_index=start, end_index=end)


def scored(title: str, content: str, start: int = 0) -> ScoredSection:
    section = ProjectSection(title=title, content=content, start_index=start, end_index=start + 1)
    return ScoredSection(section=section, scores={})


class TestInsertionPoints:
    """Tests for insertion-point mode."""

    def test_insertion_line_defaults_after_title(self):
        """Test that bullets go right after the title line without a marker."""
        section = section_from_lines(LINES, 4, 6)
        assert find_insertion_line(LINES, section) == 5

    def test_insertion_line_follows_marker(self):
        """Test that bullets go right after a 'Responsibilities:' marker."""
        section = section_from_lines(LINES, 0, 3)
        assert find_insertion_line(LINES, section) == 2

    def test_builds_points_for_relevant_pairs(self):
        """Test inclusion by mention or threshold, ordering, and context snippets."""
        top = [
            ScoredSection(section_from_lines(LINES, 0, 3)),
            ScoredSection(section_from_lines(LINES, 4, 6)),
        ]
        plans = [
            make_plan("Python", ["Built Django APIs"]),
            make_plan("Cobol", ["Ported COBOL batch jobs"]),
        ]

        points = build_insertion_points(LINES, top, plans)

        assert [(p.technology, p.project) for p in points] == [
            ("Python", "ACME CORP - SOFTWARE ENGINEER"),
            ("Python", "GLOBEX - DATA ANALYST"),
        ]
        assert [p.relevance_score for p in points] == [49, 14]
        assert [p.insertion_line for p in points] == [2, 5]
        assert points[0].bullets == ("Built Django APIs",)
        assert points[0].context_before == "ACME CORP - SOFTWARE ENGINEER\nResponsibilities:"
        assert points[0].context_after == "• Maintained Python services"

    def test_technologies_without_bullets_contribute_nothing(self):
        """Test that an empty selection yields no insertion point."""
        top = [ScoredSection(section_from_lines(LINES, 0, 3))]
        assert build_insertion_points(LINES, top, [make_plan("Python", [])]) == []

    def test_point_summary(self):
        """Test the camelCase insertion point summary."""
        top = [ScoredSection(section_from_lines(LINES, 0, 3))]
        [point] = build_insertion_points(LINES, top, [make_plan("Python", ["Built Django APIs"])])

        summary = point.to_dict()
        assert summary["insertionLine"] == 2
        assert summary["relevanceScore"] == 49
        assert summary["bullets"] == ["Built Django APIs"]


class TestBulletPlacementScore:
    """Tests for per-bullet section relevance."""

    def test_components(self):
        """Test keyword overlap, technology mention, and action verbs."""
        # django + services overlap (20), python mentioned (25), "built" (5)
        assert bullet_placement_score("Python", "Built Django services", "python django services") == 50

    def test_action_verbs_count_regardless_of_section(self):
        """Test that action verbs add the same amount for every section."""
        assert bullet_placement_score("Cobol", "Designed and built ledgers", "nothing related") == 10


class TestEqualDistribution:
    """Tests for distribute_equally."""

    def test_chunks_dealt_in_ranked_order(self):
        """Test that the strongest chunk goes to the top ranked section, not its best match."""
        top = [
            scored("A", "frontend ui"),
            scored("B", "reports", 3),
            scored("C", "python django services", 6),
        ]
        plans = [make_plan("Python", ["Built Django pipelines", "Built Django jobs", "Built Django services"])]

        distribution = distribute_equally(top, plans)
        got = [
            [bullet for entry in assignment.entries for bullet in entry.bullets]
            for assignment in distribution.assignments
        ]

        assert got == [["Built Django services"], ["Built Django pipelines"], ["Built Django jobs"]]
        assert [p.best_index for p in distribution.placements] == [2, 2, 2]

    def test_dealing_continues_across_technologies(self):
        """Test that the round-robin position carries over between technologies."""
        top = [scored("A", "a"), scored("B", "b", 3), scored("C", "c", 6)]
        plans = [make_plan(tech, ["Wrote code"]) for tech in ["Go", "Rust", "Java", "Ruby", "Perl"]]

        distribution = distribute_equally(top, plans)
        by_title = distribution.by_title()

        assert [e.technology for e in by_title["A"]] == ["Go", "Ruby"]
        assert [e.technology for e in by_title["B"]] == ["Rust", "Perl"]
        assert [e.technology for e in by_title["C"]] == ["Java"]

    def test_placement_summary(self):
        """Test the camelCase per-bullet placement summary."""
        top = [scored("A", "frontend ui"), scored("C", "python django services", 3)]
        distribution = distribute_equally(top, [make_plan("Python", ["Built Django services"])])

        assert distribution.placements[0].to_dict() == {
            "technology": "Python",
            "bullet": "Built Django services",
            "sectionScores": [5, 50],
            "bestSection": 1,
        }

    def test_every_bullet_assigned_once_with_bounded_spread(self):
        """Test that all bullets land somewhere and loads stay within ceil(N/3)."""
        top = [
            scored("A", "python django services"),
            scored("B", "react frontend web", 3),
            scored("C", "data analytics pipelines", 6),
        ]
        plans = [
            make_plan("Python", ["Built APIs", "Wrote tests", "Cut latency by 40%", "Managed releases"]),
            make_plan("React", ["Built dashboards", "Designed a component library"]),
            make_plan("SQL", ["Optimized reporting queries"]),
        ]
        total = sum(len(plan.selected) for plan in plans)

        distribution = distribute_equally(top, plans)
        loads = [assignment.bullet_count for assignment in distribution.assignments]
        assigned = sorted(
            bullet
            for assignment in distribution.assignments
            for entry in assignment.entries
            for bullet in entry.bullets
        )

        assert distribution.total_bullets == total
        assert assigned == sorted(b for plan in plans for b in plan.selected)
        assert max(loads) - min(loads) <= math.ceil(total / 3)

    def test_same_technology_entries_are_merged(self):
        """Test that a section never lists the same technology twice in a row."""
        top = [scored("A", "python"), scored("B", "go", 3)]
        plans = [make_plan("Go", ["Wrote a CLI"] * 3), make_plan("Python", ["Built APIs"] * 5)]

        distribution = distribute_equally(top, plans)

        for assignment in distribution.assignments:
            technologies = [entry.technology for entry in assignment.entries]
            assert all(a != b for a, b in zip(technologies, technologies[1:]))

    def test_no_top_sections(self):
        """Test that an empty top list gives an empty distribution."""
        distribution = distribute_equally([], [make_plan("Python", ["Built APIs"])])

        assert distribution.assignments == ()
        assert distribution.total_bullets == 0
        assert distribution.to_dict() == {}
