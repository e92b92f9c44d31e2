#!/usr/bin/env python3
"""
Resume Tailoring CLI

Splices technology achievement bullets into the most relevant sections of a
resume. Tech stack files are YAML or JSON with the request shape:

    techStack:
      - technology: Python
        bullets:
          - Built 5 REST APIs using Django
    extractionSettings:        # optional
      maxPointsPerTech: 3

Commands:
    preview - Show where bullets would go, without changing the document
    process - Rebuild a document with bullets spliced in
    batch   - Preview many documents against one tech stack

Examples:\n

    tailor_resume.py preview resume.docx stack.yaml                  # Preview insertion points

    tailor_resume.py preview resume.docx stack.yaml --json-out p.json  # Also dump preview JSON

    tailor_resume.py process resume.docx stack.yaml tailored.docx    # Write tailored document

    tailor_resume.py batch stack.yaml a.docx b.docx --workers 4      # Preview several documents
"""

import json
from pathlib import Path
from typing import List, Optional

import typer
from omegaconf import OmegaConf
from typing_extensions import Annotated

from resplice.contexts.intake import ConfigError, ResplicerError
from resplice.contexts.rendering.logger import setup_rendering_logger
from resplice.contexts.targeting import EngineConfig, load_engine_config
from resplice.pipeline import preview_batch, preview_file, process_file
from resplice.utils.logger import session_log_dir
from resplice.utils.report_formatter import Column, TableFormatter, format_key_values


app = typer.Typer(
    help="Splice tech-stack achievement bullets into the most relevant resume sections",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def load_tech_stack(path: Path) -> dict:
    """Load a YAML/JSON tech stack file into a plain dict."""
    try:
        data = OmegaConf.to_container(OmegaConf.load(path), resolve=True)
    except FileNotFoundError:
        typer.secho(f"Error: Tech stack file not found: {path}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if isinstance(data, list):
        data = {"techStack": data}
    if not isinstance(data, dict) or "techStack" not in data:
        typer.secho(f"Error: {path} must define a 'techStack' list\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return data


def load_config(config_path: Optional[Path]) -> EngineConfig:
    try:
        return load_engine_config(config_path)
    except ConfigError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def start_session(command: str, config_path: Optional[Path]) -> Path:
    return setup_rendering_logger(session_log_dir(command), {"Config": config_path or "defaults"})


def print_preview(preview) -> None:
    stats = preview.statistics.to_dict()
    typer.echo(format_key_values(f"Preview: {preview.filename}", stats))
    if preview.detected_technologies:
        typer.echo(f"  {'detectedTechnologies':<24} {', '.join(preview.detected_technologies)}")
    typer.echo("")

    if not preview.insertion_points:
        typer.secho("No relevant insertion points found.", fg=typer.colors.YELLOW)
        return

    table = TableFormatter(
        [
            Column("Technology", 16),
            Column("Project", 36),
            Column("Line", 6, ">"),
            Column("Score", 7, ">"),
            Column("Bullets", 8, ">"),
        ]
    )
    table.add_header()
    for point in preview.insertion_points:
        table.add_row(
            [point.technology, point.project, point.insertion_line, point.relevance_score, len(point.bullets)]
        )
    typer.echo(table.render())


@app.command("preview")
def preview_command(
    document: Annotated[Path, typer.Argument(help="Resume document (.docx, .txt, .md)")],
    tech_stack: Annotated[Path, typer.Argument(help="Tech stack YAML/JSON file")],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Engine config YAML (defaults to RESPLICE_CONFIG_PATH)"),
    ] = None,
    json_out: Annotated[
        Optional[Path],
        typer.Option("--json-out", "-o", help="Also write the preview as JSON"),
    ] = None,
):
    """
    Preview where bullets would be inserted.

    Examples:\n

        $ tailor_resume.py preview resume.docx stack.yaml

        $ tailor_resume.py preview resume.docx stack.yaml --json-out preview.json
    """
    config = load_config(config_path)
    data = load_tech_stack(tech_stack)
    log_file = start_session("preview", config_path)

    typer.secho(f"\nPreviewing: {document}", fg=typer.colors.BLUE, bold=True)
    try:
        preview = preview_file(document, data, config)
    except ResplicerError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.echo("")
    print_preview(preview)

    if json_out:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_text(json.dumps(preview.to_dict(), indent=2), encoding="utf-8")
        typer.echo(f"\n  JSON: {json_out}")
    typer.echo(f"  Log: {log_file}\n")


@app.command("process")
def process_command(
    document: Annotated[Path, typer.Argument(help="Resume document (.docx, .txt, .md)")],
    tech_stack: Annotated[Path, typer.Argument(help="Tech stack YAML/JSON file")],
    output: Annotated[Path, typer.Argument(help="Output document (.docx, .txt, .md)")],
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Engine config YAML (defaults to RESPLICE_CONFIG_PATH)"),
    ] = None,
):
    """
    Rebuild a document with bullets spread across its top sections.

    Examples:\n

        $ tailor_resume.py process resume.docx stack.yaml tailored.docx
    """
    config = load_config(config_path)
    data = load_tech_stack(tech_stack)
    log_file = start_session("process", config_path)

    typer.secho(f"\nProcessing: {document}", fg=typer.colors.BLUE, bold=True)
    result = process_file(document, data, output, config)
    typer.echo("")

    if result.success:
        typer.secho("✓ Document tailored", fg=typer.colors.GREEN, bold=True)
        typer.echo(format_key_values("Statistics", result.statistics.to_dict()))
        if result.skipped_bullets:
            typer.echo(f"  Skipped {len(result.skipped_bullets)} bullet(s) already in the document")
        if result.distribution:
            for title, entries in result.distribution.by_title().items():
                count = sum(len(entry.bullets) for entry in entries)
                typer.echo(f"  {title}: {count} bullet(s)")
        typer.echo(f"  Output: {result.output_path}")
    else:
        typer.secho("✗ Processing failed", fg=typer.colors.RED, bold=True)
        typer.secho(f"  {result.error}", fg=typer.colors.RED)

    typer.echo(f"  Log: {log_file}\n")
    raise typer.Exit(code=0 if result.success else 1)


@app.command("batch")
def batch_command(
    tech_stack: Annotated[Path, typer.Argument(help="Tech stack YAML/JSON file")],
    documents: Annotated[List[Path], typer.Argument(help="Resume documents to preview")],
    workers: Annotated[
        int,
        typer.Option("--workers", "-w", help="Documents previewed in parallel", min=1, max=32),
    ] = 1,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Engine config YAML (defaults to RESPLICE_CONFIG_PATH)"),
    ] = None,
    json_out: Annotated[
        Optional[Path],
        typer.Option("--json-out", "-o", help="Also write all previews and the summary as JSON"),
    ] = None,
):
    """
    Preview many documents; failures are reported per document.

    Exits non-zero if any document failed.

    Examples:\n

        $ tailor_resume.py batch stack.yaml resumes/*.docx --workers 4
    """
    config = load_config(config_path)
    data = load_tech_stack(tech_stack)
    log_file = start_session("batch", config_path)

    typer.secho(f"\nPreviewing {len(documents)} document(s)", fg=typer.colors.BLUE, bold=True)
    batch = preview_batch(documents, data, config, max_workers=workers)
    typer.echo("")

    table = TableFormatter(
        [Column("Document", 40), Column("Status", 8), Column("Insertions", 11, ">"), Column("Bullets", 8, ">")]
    )
    table.add_title(f"Batch preview: {tech_stack.name}")
    table.add_header()
    for item in batch.results:
        if item.success:
            table.add_row(
                [
                    Path(item.source).name,
                    "ok",
                    len(item.preview.insertion_points),
                    item.preview.statistics.total_bullets_to_add,
                ]
            )
        else:
            table.add_row([Path(item.source).name, "failed", "-", "-"])
    typer.echo(table.render())

    summary = {key: value for key, value in batch.summary.items() if key != "failed"}
    typer.echo("")
    typer.echo(format_key_values("Summary", summary))

    for item in batch.failed:
        typer.secho(f"  ✗ {Path(item.source).name}: {item.error.splitlines()[0]}", fg=typer.colors.RED)

    if json_out:
        json_out.parent.mkdir(parents=True, exist_ok=True)
        json_out.write_text(json.dumps(batch.to_dict(), indent=2), encoding="utf-8")
        typer.echo(f"\n  JSON: {json_out}")
    typer.echo(f"  Log: {log_file}\n")

    raise typer.Exit(code=1 if batch.failed else 0)


if __name__ == "__main__":
    app()
