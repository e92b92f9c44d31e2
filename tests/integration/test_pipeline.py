"""
Integration tests for the tailoring pipeline - full preview, process, and batch runs.
"""

import zipfile
from pathlib import Path

import pytest
from docx import Document

from resplice.contexts.intake import TailoringRequest
from resplice.contexts.targeting import EngineConfig
from resplice.pipeline import (
    build_request,
    preview_batch,
    preview_document,
    preview_file,
    process_document,
    process_file,
)

RESUME_TEXT = "\n".join(
    [
        "Jane Doe",
        "jane@example.com",
        "",
        "EXPERIENCE",
        "ACME CORP - SOFTWARE ENGINEER",
        "2019 - 2022",
        "Responsibilities:",
        "• Maintained Python services and Django applications for the billing team",
        "• Improved web application performance for enterprise customers",
        "",
        "GLOBEX - DATA ANALYST",
        "2016 - 2019",
        "• Produced weekly analytics reports with SQL and Python notebooks",
        "• Automated data cleaning pipelines for the finance group",
        "",
        "Project: Mobile Banking App",
        "• Shipped an Android client used by thousands of customers",
        "• Coordinated releases with the design team every sprint",
        "",
        "EDUCATION",
        "BSc Computer Science, State University",
    ]
)

TECH_STACK = {
    "techStack": [
        {
            "technology": "Python",
            "bullets": [
                "Built 5 REST APIs using Django",
                "Wrote integration tests for payment flows",
                "Optimized query performance by 40%",
            ],
        },
        {
            "technology": "React",
            "bullets": [
                "Designed a shared component library",
                "Migrated dashboards to React hooks",
                "Cut bundle size by 30%",
            ],
        },
        {
            "technology": "SQL",
            "bullets": [
                "Tuned reporting queries on PostgreSQL",
                "Modelled a data mart for finance",
                "Automated nightly data quality checks",
            ],
        },
    ]
}
ALL_BULLETS = sorted(b for group in TECH_STACK["techStack"] for b in group["bullets"])


def make_request(raw_text: str = RESUME_TEXT) -> TailoringRequest:
    return TailoringRequest.from_dict({**TECH_STACK, "rawText": raw_text})


def write_malformed_docx(path):
    """Word package with an unterminated main document part."""
    source = path.with_name("source.docx")
    document = Document()
    document.add_paragraph("Jane Doe")
    document.save(str(source))
    with zipfile.ZipFile(source) as src, zipfile.ZipFile(path, "w") as dst:
        for item in src.infolist():
            data = src.read(item.filename)
            if item.filename == "word/document.xml":
                data = b"<w:document><not-closed>"
            dst.writestr(item, data)
    return path


@pytest.fixture
def resume_files(tmp_path):
    first = tmp_path / "first.txt"
    first.write_text(RESUME_TEXT, encoding="utf-8")
    second = tmp_path / "second.md"
    second.write_text(RESUME_TEXT.replace("Jane Doe", "John Roe"), encoding="utf-8")
    return first, second


@pytest.mark.integration
def test_preview_reports_sections_and_points():
    """Test a preview of a three-section resume."""
    preview = preview_document(make_request(), filename="resume.txt")

    assert preview.statistics.total_projects == 3
    assert preview.statistics.projects_to_modify == 3
    assert len(preview.top_projects) == 3
    assert preview.insertion_points
    scores = [point.relevance_score for point in preview.insertion_points]
    assert scores == sorted(scores, reverse=True)
    assert preview.statistics.total_bullets_to_add == sum(len(p.bullets) for p in preview.insertion_points)
    assert "python" in preview.detected_technologies
    assert preview.original_content.endswith("...")


@pytest.mark.integration
def test_preview_is_deterministic():
    """Test that identical inputs produce identical previews."""
    assert preview_document(make_request()).to_dict() == preview_document(make_request()).to_dict()


@pytest.mark.integration
def test_process_keeps_every_original_line():
    """Test that rewriting only inserts paragraphs."""
    request = make_request()

    result = process_document(request)

    assert result.success
    assert [p.text for p in result.paragraphs if p.is_original] == request.lines


@pytest.mark.integration
def test_process_spreads_bullets_evenly():
    """Test that nine bullets over three sections give three per section."""
    result = process_document(make_request())

    loads = [assignment.bullet_count for assignment in result.distribution.assignments]
    inserted = sorted(p.text[2:] for p in result.paragraphs if p.kind == "bullet")

    assert loads == [3, 3, 3]
    assert inserted == ALL_BULLETS
    assert result.statistics.total_bullets_to_add == 9
    assert result.skipped_bullets == []

    placements = result.to_dict()["placements"]
    assert sorted(p["bullet"] for p in placements) == ALL_BULLETS
    assert all(len(p["sectionScores"]) == 3 for p in placements)
    assert {p["technology"] for p in placements} == {plan["technology"] for plan in TECH_STACK["techStack"]}


@pytest.mark.integration
def test_reprocessing_output_adds_nothing():
    """Test that processing an already tailored document inserts no bullets."""
    first = process_document(make_request())
    rebuilt_text = "\n".join(p.text for p in first.paragraphs)

    second = process_document(make_request(rebuilt_text))

    assert second.statistics.total_bullets_to_add == 0
    assert sorted(second.skipped_bullets) == ALL_BULLETS
    assert [p.text for p in second.paragraphs] == rebuilt_text.split("\n")


@pytest.mark.integration
def test_top_section_count_limits_targets():
    """Test that a smaller top section count narrows the distribution."""
    result = process_document(make_request(), EngineConfig(top_section_count=1))

    assert len(result.distribution.assignments) == 1
    assert result.distribution.total_bullets == 9


@pytest.mark.integration
def test_document_without_sections_gets_key_contributions():
    """Test the whole-document fallback for unstructured text."""
    raw_text = "Jane Doe\nI like building things with computers and people."

    result = process_document(make_request(raw_text))
    texts = [p.text for p in result.paragraphs]

    assert texts[:2] == raw_text.split("\n")
    assert texts[2] == "Key Contributions:"
    assert sorted(t[2:] for t in texts[3:]) == ALL_BULLETS


@pytest.mark.integration
def test_process_file_writes_text_output(resume_files, tmp_path):
    """Test reading, rebuilding, and writing a text document."""
    first, _ = resume_files
    output = tmp_path / "out" / "tailored.txt"

    result = process_file(first, TECH_STACK, output)

    assert result.success, result.error
    assert result.output_path == output
    written = output.read_text(encoding="utf-8").split("\n")
    assert written[:5] == RESUME_TEXT.split("\n")[:5]
    assert written[5] == "Responsibilities:"
    assert len(written) == len(RESUME_TEXT.split("\n")) + 9 + 3


@pytest.mark.integration
def test_process_file_reports_failures(tmp_path):
    """Test that a missing input is reported rather than raised."""
    result = process_file(tmp_path / "missing.txt", TECH_STACK, tmp_path / "out.txt")

    assert not result.success
    assert "Document not found" in result.error
    assert not (tmp_path / "out.txt").exists()


@pytest.mark.integration
def test_preview_file_uses_filename(resume_files):
    """Test that file previews report the document name."""
    first, _ = resume_files
    assert preview_file(first, TECH_STACK).filename == "first.txt"


@pytest.mark.integration
def test_build_request_uses_config_extraction_defaults():
    """Test that config extraction defaults apply when the request omits them."""
    config = EngineConfig()
    request = build_request(RESUME_TEXT, {**TECH_STACK, "extractionSettings": {"maxPointsPerTech": 2}}, config)

    assert request.extraction_settings.max_points_per_tech == 2
    assert request.extraction_settings.total_target_points == config.extraction.total_target_points


class TestBatchPreview:
    """Tests for preview_batch."""

    def test_failures_are_isolated(self, resume_files, tmp_path):
        """Test that missing or malformed documents do not stop the batch."""
        first, second = resume_files
        missing = tmp_path / "missing.docx"
        malformed = write_malformed_docx(tmp_path / "malformed.docx")

        batch = preview_batch([first, missing, malformed, second], TECH_STACK)

        assert [r.success for r in batch.results] == [True, False, False, True]
        assert [Path(r.source).name for r in batch.results] == [
            "first.txt",
            "missing.docx",
            "malformed.docx",
            "second.md",
        ]
        summary = batch.summary
        assert summary["totalResumes"] == 2
        assert summary["averageProjectsPerResume"] == 3
        assert [f["source"] for f in summary["failed"]] == [str(missing), str(malformed)]
        assert "Could not read document" in batch.results[2].error

    def test_threaded_matches_sequential(self, resume_files):
        """Test that the thread pool preserves order and results."""
        paths = list(resume_files) * 2

        sequential = preview_batch(paths, TECH_STACK, max_workers=1)
        threaded = preview_batch(paths, TECH_STACK, max_workers=4)

        assert threaded.to_dict() == sequential.to_dict()

    def test_invalid_tech_stack_fails_every_document(self, resume_files):
        """Test that a request-level error is reported per document."""
        batch = preview_batch(list(resume_files), {"techStack": []})

        assert batch.summary["totalResumes"] == 0
        assert len(batch.failed) == 2
