"""
podium.cli - Typer CLI entry point.

Provides the subcommands for analyzing recorded talks.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from podium import __version__
from podium.config import CONFIG_FILENAME, PodiumConfig, create_default_config, write_config
from podium.exceptions import LLMError, PodiumError
from podium.logging import configure_logging
from podium.models import AnalysisReport, Narration, RawMetrics, Transcript
from podium.utils import format_duration, get_score_style

app = typer.Typer(
    name="podium",
    help="Speech delivery metrics for recorded talks.\n\n"
    "Measures pace, pitch, filler words and repetition in a clip and "
    "scores its energy, disfluency and cadence.",
    add_completion=False,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        console.print(f"podium {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Podium - speech delivery metrics for recorded talks."""
    pass


def _load_config(config_path: Path | None) -> PodiumConfig:
    from podium.config import load_config

    try:
        return load_config(config_path)
    except (FileNotFoundError, PodiumError) as e:
        console.print(f"[red]Error loading config: {e}[/red]")
        raise typer.Exit(1)


def _metrics_table(metrics: RawMetrics) -> Table:
    table = Table(title="Delivery Metrics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="white")
    table.add_column("Rating")

    pitch = f"{metrics.pitch} Hz" if metrics.pitch_available else "N/A"
    variation = f"{metrics.pitch_variation} Hz" if metrics.pitch_available else "N/A"

    table.add_row("Pace", f"{metrics.wpm} wpm", "")
    table.add_row("Median pitch", pitch, "")
    table.add_row("Pitch variation", variation, "")
    table.add_row("Filler words", str(metrics.filler_word_total), "")
    table.add_row("Repeated phrases", str(metrics.repetition_score), "")

    for name, score, label in (
        ("Energy", metrics.energy_score, metrics.energy_label),
        ("Disfluency", metrics.disfluency_score, metrics.disfluency_label),
        ("Cadence", metrics.cadence_score, metrics.cadence_description),
    ):
        style = get_score_style(score)
        table.add_row(name, f"{score}/10", f"[{style}]{label}[/{style}]")

    return table


def _print_report(metrics: RawMetrics, narration: Narration | None) -> None:
    console.print(_metrics_table(metrics))

    if metrics.filler_word_breakdown:
        breakdown = Table(title="Filler Words")
        breakdown.add_column("Filler", style="cyan")
        breakdown.add_column("Count", style="green")
        for label, count in sorted(
            metrics.filler_word_breakdown.items(), key=lambda item: (-item[1], item[0])
        ):
            breakdown.add_row(label, str(count))
        console.print(breakdown)

    if metrics.repetitive_phrases:
        phrases = sorted(metrics.repetitive_phrases)
        shown = ", ".join(f'"{p}"' for p in phrases[:8])
        more = f" [dim]… and {len(phrases) - 8} more[/dim]" if len(phrases) > 8 else ""
        console.print(f"\n[cyan]Repeated:[/cyan] {shown}{more}")

    if narration:
        console.print(f"\n[cyan]Tone:[/cyan] {narration.tone}")
        if narration.summary:
            console.print(f"[cyan]Summary:[/cyan] {narration.summary}")
        if narration.feedback:
            console.print(f"[cyan]Feedback:[/cyan] {narration.feedback}")


def _run_metrics(
    config: PodiumConfig,
    transcript: Transcript,
    audio: bytes | None,
) -> RawMetrics:
    from podium.analyze.engine import MetricsEngine
    from podium.validation import validate_segments

    segment_check = validate_segments(transcript.segments)
    for warning in segment_check["warnings"]:
        console.print(f"[yellow]  Warning: {warning}[/yellow]")

    if transcript.segments:
        span = max(0.0, transcript.segments[-1].end - transcript.segments[0].start)
        console.print(
            f"[dim]  {len(transcript.segments)} segment(s), "
            f"{format_duration(span)} of speech[/dim]"
        )

    engine = MetricsEngine(config.engine)
    return engine.analyze(transcript.text, transcript.segments, audio)


def _write_report(
    output: Path,
    source: Path | None,
    transcript: Transcript,
    metrics: RawMetrics,
    narration: Narration | None,
) -> None:
    from podium.io import write_json

    report = AnalysisReport(
        source=str(source) if source else None,
        analyzed_at=datetime.now().isoformat(timespec="seconds"),
        transcript=transcript,
        metrics=metrics,
        narration=narration,
    )
    write_json(output, report.to_dict())
    console.print(f"\n[green]✓[/green] Report written to {output}")


@app.command("analyze")
def analyze_clip(
    media: Path = typer.Argument(..., help="Audio or video file to analyze"),
    transcript_path: Optional[Path] = typer.Option(
        None, "--transcript", "-t", help="Use an existing transcript JSON instead of transcribing"
    ),
    no_narrate: bool = typer.Option(False, "--no-narrate", help="Skip the LLM narration pass"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON report here"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to podium.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Transcribe a clip, measure its delivery and narrate the result."""
    configure_logging(verbose)
    config = _load_config(config_path)

    from podium.extract.audio import read_media
    from podium.llm.client import create_client_from_config
    from podium.llm.narrate import narrate
    from podium.transcribe.engine import load_transcript, transcribe_media
    from podium.validation import validate_media_file

    try:
        validate_media_file(media)

        if transcript_path:
            transcript = load_transcript(transcript_path)
        else:
            console.print(f"[cyan]Transcribing {media.name}...[/cyan]")
            transcript = transcribe_media(
                media,
                backend=config.whisper_backend,
                model=config.whisper_model,
                language=config.whisper_language,
                console=console,
            )

        console.print("[cyan]Measuring delivery (pitch, pace, fillers, repetition)...[/cyan]")
        metrics = _run_metrics(config, transcript, read_media(media))
    except PodiumError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    narration = None
    if config.narrate and not no_narrate:
        console.print("[cyan]Narrating results...[/cyan]")
        try:
            narration = narrate(
                transcript.text,
                metrics,
                create_client_from_config(config),
                console=console,
            )
        except LLMError as e:
            console.print(f"[yellow]  Narration skipped: {e}[/yellow]")

    console.print()
    _print_report(metrics, narration)

    if output:
        _write_report(output, media, transcript, metrics, narration)


@app.command("metrics")
def metrics_only(
    transcript_path: Path = typer.Argument(..., help="Transcript JSON file"),
    audio_path: Optional[Path] = typer.Option(
        None, "--audio", "-a", help="Audio or video file for pitch analysis"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write JSON report here"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to podium.yaml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Compute delivery metrics from an existing transcript, without any LLM."""
    configure_logging(verbose)
    config = _load_config(config_path)

    from podium.extract.audio import read_media
    from podium.transcribe.engine import load_transcript
    from podium.validation import validate_media_file

    try:
        transcript = load_transcript(transcript_path)
        audio = None
        if audio_path:
            validate_media_file(audio_path)
            audio = read_media(audio_path)
        else:
            console.print("[dim]  No audio given, pitch will be N/A[/dim]")

        metrics = _run_metrics(config, transcript, audio)
    except PodiumError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print()
    _print_report(metrics, None)

    if output:
        _write_report(output, audio_path, transcript, metrics, None)


@app.command("init")
def init_config(
    path: Path = typer.Option(Path("."), "--path", "-d", help="Directory to write podium.yaml in"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing podium.yaml"),
) -> None:
    """Write a default podium.yaml."""
    config_file = path / CONFIG_FILENAME

    if config_file.exists() and not force:
        console.print(f"[red]Error: '{config_file}' already exists[/red]")
        raise typer.Exit(1)

    write_config(create_default_config(), config_file)
    console.print(f"[green]✓[/green] Wrote {config_file}")


@app.command("doctor")
def run_doctor(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to podium.yaml"),
) -> None:
    """Check dependencies and environment setup."""
    console.print("[cyan]Running preflight checks...[/cyan]\n")

    from podium.exceptions import DependencyError
    from podium.validation import check_ffmpeg

    config = _load_config(config_path)

    table = Table(title="Dependency Status")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Version/Details")

    all_passed = True

    try:
        versions = check_ffmpeg(config.engine.ffmpeg_path)
        table.add_row("FFmpeg", "✓ Installed", versions.get("ffmpeg_version", "unknown"))
    except DependencyError as e:
        table.add_row("FFmpeg", "✗ Missing", e.install_hint or "")
        all_passed = False

    table.add_row("Transcription", config.whisper_backend, config.whisper_model)
    table.add_row("LLM Backend", config.llm_backend, config.llm_model)

    console.print(table)

    if all_passed:
        console.print("\n[green]✓ All checks passed[/green]")
    else:
        console.print("\n[yellow]⚠ Some checks failed[/yellow]")
        raise typer.Exit(1)


@app.command("validate")
def validate_transcript(
    transcript_path: Path = typer.Argument(..., help="Transcript JSON file"),
) -> None:
    """Check a transcript file's segments for ordering problems."""
    from podium.transcribe.engine import load_transcript
    from podium.validation import validate_segments

    try:
        transcript = load_transcript(transcript_path)
    except PodiumError as e:
        console.print(f"[red]✗[/red] {transcript_path.name}: {e}")
        raise typer.Exit(1)

    result = validate_segments(transcript.segments)
    if result["valid"]:
        console.print(
            f"[green]✓[/green] {transcript_path.name}: {result['segment_count']} segments"
        )
        return

    for warning in result["warnings"]:
        console.print(f"[yellow]⚠[/yellow] {warning}")
    raise typer.Exit(1)


if __name__ == "__main__":
    app()
