"""
Tailoring pipeline.

Orchestrates the three contexts for one document or a batch:

    Intake (validate, segment) -> Targeting (score, rank, plan, distribute)
        -> Rendering (preview, or rebuild + write)

Entry points:
- preview_document / process_document: in-memory, one validated request
- preview_file / process_file: read (and write) through the document codec
- preview_batch: many files, per-document failure isolation, optional thread pool

The engine is synchronous and holds no state between calls; identical inputs
give identical outputs regardless of batch scheduling.
"""

import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from resplice.contexts.intake import ResplicerError, TailoringRequest, segment_sections
from resplice.contexts.intake.segmenter import ProjectSection
from resplice.contexts.rendering.docx_codec import read_document_text, write_document
from resplice.contexts.rendering.logger import log_document_result
from resplice.contexts.rendering.preview import (
    PreviewResult,
    PreviewStatistics,
    assemble_preview,
)
from resplice.contexts.rendering.rebuilder import LineEdit, Paragraph, rebuild_document
from resplice.contexts.targeting import (
    Distribution,
    EngineConfig,
    ExtractionPlan,
    ScoredSection,
    ScoringWeights,
    build_insertion_points,
    distribute_equally,
    plan_extraction,
    rank_sections,
    score_sections,
)
from resplice.utils.text_processing import round_half_up


# Result dataclasses for orchestration functions


@dataclass
class TargetingRun:
    """Intermediate targeting state shared by preview and process calls."""

    lines: List[str]
    sections: List[ProjectSection]
    scored: List[ScoredSection]
    top_sections: List[ScoredSection]
    plans: List[ExtractionPlan]
    weights: ScoringWeights


@dataclass
class ProcessResult:
    """
    Result from process_document() / process_file().

    Attributes:
        success: Whether the document was rebuilt
        paragraphs: Rebuilt paragraph stream (empty on failure)
        edits: Line edits that produced the paragraphs
        distribution: Per-section bullet assignment
        statistics: Same shape as preview statistics
        skipped_bullets: Bullets left out because the document already has them
        input_path: Source document, when read from disk
        output_path: Written document, when saved
        error: Error message on failure
        time_s: Wall time of the call
    """

    success: bool
    paragraphs: List[Paragraph] = field(default_factory=list)
    edits: List[LineEdit] = field(default_factory=list)
    distribution: Optional[Distribution] = None
    statistics: PreviewStatistics = field(default_factory=PreviewStatistics)
    skipped_bullets: List[str] = field(default_factory=list)
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    error: Optional[str] = None
    time_s: float = 0.0

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "error": self.error,
            "statistics": self.statistics.to_dict(),
            "distribution": self.distribution.to_dict() if self.distribution else {},
            "placements": [p.to_dict() for p in self.distribution.placements] if self.distribution else [],
            "edits": [edit.to_dict() for edit in self.edits],
            "outputPath": str(self.output_path) if self.output_path else None,
        }


@dataclass
class DocumentResult:
    """One document's outcome inside a batch."""

    source: str
    success: bool
    preview: Optional[PreviewResult] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "success": self.success,
            "preview": self.preview.to_dict() if self.preview else None,
            "error": self.error,
        }


@dataclass
class BatchResult:
    """Batch preview outcome: per-document results in input order plus a summary."""

    results: List[DocumentResult] = field(default_factory=list)

    @property
    def previews(self) -> List[PreviewResult]:
        return [r.preview for r in self.results if r.success and r.preview is not None]

    @property
    def failed(self) -> List[DocumentResult]:
        return [r for r in self.results if not r.success]

    @property
    def summary(self) -> dict:
        previews = self.previews
        total_projects = sum(p.statistics.total_projects for p in previews)
        return {
            "totalResumes": len(previews),
            "totalInsertions": sum(len(p.insertion_points) for p in previews),
            "totalBulletsToAdd": sum(p.statistics.total_bullets_to_add for p in previews),
            "averageProjectsPerResume": round_half_up(total_projects / len(previews)) if previews else 0,
            "failed": [{"source": r.source, "error": r.error} for r in self.failed],
        }

    def to_dict(self) -> dict:
        return {
            "previews": [r.to_dict() for r in self.results],
            "summary": self.summary,
        }


# Orchestration


def _resolve_config(config: Optional[EngineConfig]) -> EngineConfig:
    return config if config is not None else EngineConfig()


def run_targeting(request: TailoringRequest, config: EngineConfig, weights: ScoringWeights) -> TargetingRun:
    """
    Segment, score, rank, and plan for one validated request.

    Args:
        request: Validated request
        config: Engine configuration
        weights: Scoring profile for this call

    Returns:
        TargetingRun with every intermediate result
    """
    lines = request.lines
    sections = segment_sections(
        lines,
        min_section_chars=config.min_section_chars,
        fallback_title=config.fallback_section_title,
    )
    scored = score_sections(sections, request.tech_stack, weights)
    top_sections = rank_sections(scored, config.top_section_count)
    plans = plan_extraction(request.tech_stack, sections, request.extraction_settings, weights)
    return TargetingRun(lines, sections, scored, top_sections, plans, weights)


def build_request(raw_text: str, tech_stack_data: Dict[str, Any], config: EngineConfig) -> TailoringRequest:
    """
    Combine document text with a tech stack definition into a validated request.

    Args:
        raw_text: Document text from the codec
        tech_stack_data: {techStack, extractionSettings?, processingMode?}
        config: Engine configuration (supplies default extraction settings)

    Raises:
        InputError: If the combined request is invalid
    """
    data = {**tech_stack_data, "rawText": raw_text}
    return TailoringRequest.from_dict(data, default_settings=config.extraction)


def preview_document(
    request: TailoringRequest, filename: str = "document", config: EngineConfig = None
) -> PreviewResult:
    """
    Preview where bullets would be inserted, without changing the document.

    Args:
        request: Validated request
        filename: Name reported in the preview
        config: Engine configuration (defaults if None)

    Returns:
        PreviewResult
    """
    config = _resolve_config(config)
    run = run_targeting(request, config, config.preview_weights)
    points = build_insertion_points(run.lines, run.top_sections, run.plans, run.weights)

    preview = assemble_preview(
        filename=filename,
        raw_text=request.raw_text,
        total_projects=len(run.sections),
        top_projects=run.top_sections,
        points=points,
        plans=run.plans,
        processing_mode=request.processing_mode,
        excerpt_chars=config.preview_excerpt_chars,
    )
    logger.info(
        f"Preview {filename}: {len(points)} insertion point(s), "
        f"{preview.statistics.total_bullets_to_add} bullet(s) across {len(run.top_sections)} project(s)"
    )
    return preview


def process_document(request: TailoringRequest, config: EngineConfig = None) -> ProcessResult:
    """
    Rebuild a document with bullets spread evenly across its top sections.

    Args:
        request: Validated request
        config: Engine configuration (defaults if None)

    Returns:
        ProcessResult (always success=True; failures surface as exceptions here)
    """
    start_time = time.time()
    config = _resolve_config(config)
    run = run_targeting(request, config, config.process_weights)

    distribution = distribute_equally(run.top_sections, run.plans)
    fallback_bullets = [bullet for plan in run.plans for bullet in plan.selected]
    rebuilt = rebuild_document(
        run.lines,
        distribution,
        fallback_bullets=fallback_bullets,
        skip_existing=config.skip_existing_bullets,
    )

    top_scores = [scored.relevance_score for scored in run.top_sections]
    statistics = PreviewStatistics(
        total_projects=len(run.sections),
        projects_to_modify=len(run.top_sections),
        total_bullets_to_add=rebuilt.bullets_added,
        average_relevance_score=round_half_up(sum(top_scores) / len(top_scores)) if top_scores else 0,
    )

    return ProcessResult(
        success=True,
        paragraphs=rebuilt.paragraphs,
        edits=rebuilt.edits,
        distribution=distribution,
        statistics=statistics,
        skipped_bullets=rebuilt.skipped_bullets,
        time_s=time.time() - start_time,
    )


def preview_file(path: Path, tech_stack_data: Dict[str, Any], config: EngineConfig = None) -> PreviewResult:
    """
    Read a document through the codec and preview it.

    Raises:
        CodecFailure: If the document cannot be read
        InputError: If the request is invalid
    """
    config = _resolve_config(config)
    path = Path(path)
    raw_text = read_document_text(path)
    request = build_request(raw_text, tech_stack_data, config)
    return preview_document(request, filename=path.name, config=config)


def process_file(
    input_path: Path,
    tech_stack_data: Dict[str, Any],
    output_path: Path,
    config: EngineConfig = None,
) -> ProcessResult:
    """
    Read, rebuild, and write one document.

    Codec and validation failures are reported in the result instead of raised.

    Args:
        input_path: Source document
        tech_stack_data: {techStack, extractionSettings?, processingMode?}
        output_path: Destination (.docx, .txt, or .md)
        config: Engine configuration (defaults if None)

    Returns:
        ProcessResult with success status, output path, and timing
    """
    start_time = time.time()
    config = _resolve_config(config)
    input_path = Path(input_path)

    try:
        raw_text = read_document_text(input_path)
        request = build_request(raw_text, tech_stack_data, config)
        result = process_document(request, config)
        result.output_path = write_document(result.paragraphs, Path(output_path))
    except ResplicerError as e:
        result = ProcessResult(success=False, error=str(e))

    result.input_path = input_path
    result.time_s = time.time() - start_time

    if result.success:
        detail = f"{result.statistics.total_bullets_to_add} bullet(s) added ({result.time_s:.2f}s)"
    else:
        detail = f"failed ({result.error.splitlines()[0]})"
    log_document_result(input_path.name, result.success, detail)
    return result


def _preview_one(path: Path, tech_stack_data: Dict[str, Any], config: EngineConfig) -> DocumentResult:
    path = Path(path)
    try:
        preview = preview_file(path, tech_stack_data, config)
    except ResplicerError as e:
        log_document_result(path.name, False, str(e).splitlines()[0])
        return DocumentResult(source=str(path), success=False, error=str(e))
    return DocumentResult(source=str(path), success=True, preview=preview)


def preview_batch(
    paths: Sequence[Path],
    tech_stack_data: Dict[str, Any],
    config: EngineConfig = None,
    max_workers: int = 1,
) -> BatchResult:
    """
    Preview many documents against one tech stack.

    Each document is isolated: a codec or validation failure marks only that
    item as failed. With max_workers > 1 documents are previewed on a thread
    pool; results keep input order either way.

    Args:
        paths: Documents to preview
        tech_stack_data: {techStack, extractionSettings?, processingMode?}
        config: Engine configuration (defaults if None)
        max_workers: Thread pool size (1 runs sequentially)

    Returns:
        BatchResult with per-document results and a summary
    """
    config = _resolve_config(config)

    if max_workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(lambda p: _preview_one(p, tech_stack_data, config), paths))
    else:
        results = [_preview_one(p, tech_stack_data, config) for p in paths]

    batch = BatchResult(results=results)
    logger.info(f"Batch preview: {len(batch.previews)}/{len(results)} document(s) succeeded")
    return batch
