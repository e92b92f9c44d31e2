"""Unit tests for extraction planning and bullet selection."""

import pytest

from resplice.contexts.intake.request import ExtractionSettings, TechGroup
from resplice.contexts.intake.segmenter import ProjectSection
from resplice.contexts.targeting.extraction_planner import (
    bullet_strength,
    plan_extraction,
    select_bullets,
)

PYTHON_BULLETS = (
    "Built 5 REST APIs using Django",
    "Wrote unit tests",
    "Optimized query performance by 40%",
)


def make_section(content: str) -> ProjectSection:
    return ProjectSection(title="Backend Engineer", content=content, start_index=0, end_index=1)


@pytest.mark.unit
def test_bullet_strength_rewards_length_and_digits():
    """Test that each digit is worth five characters of length."""
    assert bullet_strength("Cut latency by 40%") == 28
    assert bullet_strength("Wrote unit tests") == 16


@pytest.mark.unit
def test_select_bullets_orders_by_strength():
    """Test that the strongest bullets come first."""
    selected = select_bullets(PYTHON_BULLETS, 3)
    assert selected == (
        "Optimized query performance by 40%",
        "Built 5 REST APIs using Django",
        "Wrote unit tests",
    )


@pytest.mark.unit
def test_select_bullets_is_stable_for_ties():
    """Test that equal-strength bullets keep their original order."""
    assert select_bullets(["bbbb", "aaaa", "cc"], 2) == ("bbbb", "aaaa")


@pytest.mark.unit
def test_select_bullets_zero_count():
    """Test that a zero budget selects nothing."""
    assert select_bullets(PYTHON_BULLETS, 0) == ()


@pytest.mark.unit
def test_keeps_all_bullets_when_under_max():
    """Test that three bullets under a max of four are all planned."""
    group = TechGroup("Python", PYTHON_BULLETS)
    sections = [make_section("Python services built with Django")]

    [plan] = plan_extraction([group], sections, ExtractionSettings(True, 1, 4, 18))

    assert plan.available_bullets == 3
    assert plan.planned_extract == 3
    assert set(plan.selected) == set(PYTHON_BULLETS)


@pytest.mark.unit
def test_relevance_bonus_adds_one_bullet():
    """Test that a technology scoring over 50 gets exactly one more bullet."""
    relevant = TechGroup("Python", ("alpha one", "alpha two", "alpha three", "alpha four"))
    unrelated = TechGroup("Cobol", ("beta one", "beta two", "beta three", "beta four"))
    sections = [make_section("Python python services")]

    plans = plan_extraction([relevant, unrelated], sections, ExtractionSettings(True, 1, 4, 4))

    assert plans[0].tech_relevance > 50
    assert plans[1].tech_relevance <= 50
    assert plans[0].planned_extract == 3
    assert plans[1].planned_extract == 2


@pytest.mark.unit
def test_bonus_is_clamped_by_max():
    """Test that the bonus never pushes a plan past maxPointsPerTech."""
    relevant = TechGroup("Python", ("alpha one", "alpha two", "alpha three", "alpha four"))
    sections = [make_section("Python python services")]

    [plan] = plan_extraction([relevant], sections, ExtractionSettings(True, 1, 2, 18))

    assert plan.planned_extract == 2


@pytest.mark.unit
def test_coverage_bounds_hold_across_settings():
    """Test minimum and maximum bounds for a spread of budgets."""
    groups = [
        TechGroup("Python", PYTHON_BULLETS),
        TechGroup("React", ("Built dashboards", "Shipped a design system")),
        TechGroup("Go", ("Wrote a CLI",)),
        TechGroup("Rust", ()),
    ]
    sections = [make_section("Python and React web services for data teams")]

    for min_points, max_points, target in [(0, 1, 1), (1, 2, 3), (1, 4, 18), (2, 3, 0), (3, 3, 5)]:
        settings = ExtractionSettings(True, min_points, max_points, target)
        for group, plan in zip(groups, plan_extraction(groups, sections, settings)):
            available = len(group.bullets)
            assert plan.planned_extract <= max_points
            assert plan.planned_extract <= available
            assert plan.planned_extract >= min(min_points, available)
            assert len(plan.selected) == plan.planned_extract


@pytest.mark.unit
def test_no_bullets_anywhere_is_not_an_error():
    """Test that an all-empty tech stack plans zero bullets per technology."""
    groups = [TechGroup("Python"), TechGroup("Go")]

    plans = plan_extraction(groups, [make_section("Python")], ExtractionSettings(True, 1, 4, 18))

    assert [p.planned_extract for p in plans] == [0, 0]


@pytest.mark.unit
def test_static_extraction_keeps_max():
    """Test that disabling dynamic extraction keeps the capped maximum per technology."""
    groups = [TechGroup("Python", PYTHON_BULLETS), TechGroup("Go", ("Wrote a CLI",))]

    plans = plan_extraction(groups, [make_section("Go")], ExtractionSettings(False, 1, 2, 1))

    assert [p.planned_extract for p in plans] == [2, 1]


@pytest.mark.unit
def test_empty_tech_stack():
    """Test that no technologies yields no plans."""
    assert plan_extraction([], [make_section("anything")]) == []


@pytest.mark.unit
def test_plan_summary():
    """Test the camelCase plan summary."""
    [plan] = plan_extraction([TechGroup("Go", ("Wrote a CLI",))], [make_section("Go")])
    assert plan.to_dict() == {
        "technology": "Go",
        "availableBullets": 1,
        "plannedExtract": 1,
        "selectedBullets": ["Wrote a CLI"],
        "techRelevance": plan.tech_relevance,
    }
