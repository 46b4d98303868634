"""CLI for the match analysis engine.

Commands:
- analyze: Get or compute a job-match, skills-gap or interview-insights analysis
- history: List stored job-match analyses for a job
- compare: Rank a user's jobs by latest match score
- progress: Show skills-gap progress for a job
- trends: Summarise recurring skill gaps across a user's jobs
- export: Write job-match history for selected jobs as CSV
- preferences: Show or update saved job-match weights
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich import print_json

from . import __version__
from .application.engine import MatchAnalysisEngine
from .application.export import format_score
from .config import EngineConfig
from .config_file import load_engine_config_file
from .domain.analysis import JOB_MATCH
from .domain.weights import WEIGHT_FIELDS
from .exceptions import AnalysisEngineError
from .observability import set_engine_log_level
from .protocols import FileSystem


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: EngineConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    engine: MatchAnalysisEngine


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: EngineConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, *, config: EngineConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the match-analysis entry point.")


class WeightOptionError(typer.BadParameter):
    """Raised when a --weight value is not NAME=VALUE."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Expected NAME=VALUE for --weight, got {value!r}.")


UserOption = Annotated[str, typer.Option("--user", "-u", help="User the analyses belong to")]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the raw JSON payload")]


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _parse_weight_options(values: list[str] | None) -> dict[str, object] | None:
    """Turn repeated NAME=VALUE options into a partial weight mapping.

    Names other than the four named weights become custom criteria.
    """
    if not values:
        return None
    partial: dict[str, object] = {}
    custom: dict[str, object] = {}
    for raw in values:
        name, sep, value = raw.partition("=")
        name = name.strip()
        if not sep or not name:
            raise WeightOptionError(raw)
        if name in WEIGHT_FIELDS:
            partial[name] = value.strip()
        else:
            custom[name] = value.strip()
    if custom:
        partial["customCriteria"] = custom
    return partial


@contextmanager
def _engine_errors() -> Iterator[None]:
    try:
        yield
    except AnalysisEngineError as exc:
        rprint(f"[red]✗ {exc}[/red]")
        raise typer.Exit(code=1) from exc


def _print_weights(weights: Mapping[str, object], *, indent: str = "  ") -> None:
    for name, value in weights.items():
        rprint(f"{indent}{name}: {value}")


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"match-analysis {__version__}")
        raise typer.Exit()


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Weighted match-analysis cache: analyze → history / compare / progress / trends",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option("--config", "-c", help="TOML config file overriding environment values"),
        ] = None,
        database_url: Annotated[
            str | None,
            typer.Option("--database-url", help="Override DATABASE_URL"),
        ] = None,
        log_level: Annotated[
            str | None,
            typer.Option("--log-level", help="Engine log level (DEBUG, INFO, WARNING, ...)"),
        ] = None,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        if log_level:
            try:
                set_engine_log_level(log_level)
            except ValueError as exc:
                raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

        config = EngineConfig.from_env()
        if config_path is not None:
            fs = deps_builder(config=config).fs
            with _engine_errors():
                file_config = load_engine_config_file(path=config_path, fs=fs)
            config = config.with_file_overrides(file_config)
        if database_url is not None:
            config = config.with_overrides(database_url=database_url)
        ctx.obj = CliContext(config=config, deps_builder=deps_builder)

    @app.command()
    def analyze(
        ctx: typer.Context,
        job_id: Annotated[str, typer.Argument(help="Job opportunity id")],
        user: UserOption,
        kind: Annotated[
            str,
            typer.Option(
                "--kind",
                "-k",
                help="job-match, skills-gap or interview-insights",
            ),
        ] = JOB_MATCH,
        weight: Annotated[
            list[str] | None,
            typer.Option(
                "--weight",
                "-w",
                help="Weight override NAME=VALUE (repeatable, e.g. --weight skills=2)",
            ),
        ] = None,
        force: Annotated[
            bool,
            typer.Option("--force", help="Recompute even when a fresh analysis is stored"),
        ] = False,
        as_json: JsonOption = False,
    ) -> None:
        """Get or compute an analysis for one job."""
        overrides = _parse_weight_options(weight)
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            outcome = deps.engine.get_or_compute(
                kind, job_id, user, override_weights=overrides, force_refresh=force
            )
        if as_json:
            print_json(data=outcome.to_payload())
            return
        source = "cached" if outcome.cached else "computed"
        rprint(f"[green]✓ {outcome.kind} analysis {source}[/green] for job {outcome.job_id}")
        rprint(f"  Analysis date: {outcome.to_payload()['analysisDate']}")
        score = outcome.result.score
        if score is not None:
            rprint(f"  Score: {format_score(score)}")
        if outcome.weights_used is not None:
            rprint("  Weights:")
            _print_weights(outcome.weights_used.to_payload(), indent="    ")

    @app.command()
    def history(
        ctx: typer.Context,
        job_id: Annotated[str, typer.Argument(help="Job opportunity id")],
        user: UserOption,
        limit: Annotated[
            int | None,
            typer.Option("--limit", "-n", help="Maximum entries (1-100, default 20)"),
        ] = None,
        as_json: JsonOption = False,
    ) -> None:
        """List stored job-match analyses for a job, newest first."""
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            view = deps.engine.get_history(job_id, user, limit=limit)
        if as_json:
            print_json(data=view.to_payload())
            return
        rprint(f"[bold]{view.job.title}[/bold] at {view.job.company or '-'}")
        if not view.entries:
            rprint("[yellow]No job-match analyses yet[/yellow]")
        for entry in view.entries:
            payload = entry.to_payload()
            rprint(f"  {payload['analysisDate']}  {format_score(entry.overall_match_score)}")

    @app.command()
    def compare(
        ctx: typer.Context,
        user: UserOption,
        status: Annotated[
            str | None,
            typer.Option("--status", "-s", help="Only jobs in this lifecycle status"),
        ] = None,
        limit: Annotated[
            int | None,
            typer.Option("--limit", "-n", help="Maximum rows (1-100, default 10)"),
        ] = None,
        min_score: Annotated[
            float | None,
            typer.Option("--min-score", help="Drop jobs scoring below this value"),
        ] = None,
        as_json: JsonOption = False,
    ) -> None:
        """Rank a user's jobs by their latest job-match score."""
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            rows = deps.engine.get_comparison(user, status=status, limit=limit, min_score=min_score)
        if as_json:
            print_json(data=[row.to_payload() for row in rows])
            return
        if not rows:
            rprint("[yellow]No analysed jobs match the filters[/yellow]")
        for rank, row in enumerate(rows, start=1):
            rprint(
                f"  {rank}. {format_score(row.latest_score)}  {row.title}"
                f" ({row.company or '-'}) [{row.status or '-'}]"
            )

    @app.command()
    def progress(
        ctx: typer.Context,
        job_id: Annotated[str, typer.Argument(help="Job opportunity id")],
        user: UserOption,
        as_json: JsonOption = False,
    ) -> None:
        """Show skills-gap progress for a job."""
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            view = deps.engine.get_progress(job_id, user)
        if as_json:
            print_json(data=view.to_payload())
            return
        rprint(f"[bold]{view.job_title}[/bold] at {view.company_name or '-'}")
        if view.metrics is None:
            rprint("[yellow]No skills-gap snapshots yet[/yellow]")
            return
        metrics = view.metrics
        rprint(f"  First score: {format_score(metrics.first_score)}")
        rprint(f"  Latest score: {format_score(metrics.latest_score)}")
        rprint(f"  Improvement: {format_score(metrics.score_improvement)}")
        rprint(f"  Snapshots: {metrics.total_snapshots} over {metrics.time_span_days} days")

    @app.command()
    def trends(
        ctx: typer.Context,
        user: UserOption,
        as_json: JsonOption = False,
    ) -> None:
        """Summarise recurring skill gaps across a user's jobs."""
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            view = deps.engine.get_trends(user)
        if as_json:
            print_json(data=view.to_payload())
            return
        rprint(f"Jobs analysed: {view.total_jobs}")
        rprint(f"Average gap score: {view.average_gap_score}")
        for title, skills in (
            ("Common missing skills", view.common_missing_skills),
            ("Common weak skills", view.common_weak_skills),
        ):
            if skills:
                rprint(f"[bold]{title}[/bold]")
            for skill in skills:
                rprint(f"  {skill.skill_name}: {skill.frequency} ({skill.percentage}%)")

    @app.command()
    def export(
        ctx: typer.Context,
        job_ids: Annotated[list[str], typer.Argument(help="Job opportunity ids to export")],
        user: UserOption,
        out_path: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Write CSV here instead of stdout"),
        ] = None,
    ) -> None:
        """Export job-match history for selected jobs as CSV."""
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            csv_text = deps.engine.export_csv(user, job_ids)
        if out_path is None:
            typer.echo(csv_text, nl=False)
            return
        deps.fs.write_text(csv_text, out_path)
        rprint(f"[green]✓ Exported:[/green] {out_path}")

    @app.command()
    def preferences(
        ctx: typer.Context,
        user: UserOption,
        weight: Annotated[
            list[str] | None,
            typer.Option(
                "--set",
                help="Save a weight NAME=VALUE (repeatable, e.g. --set skills=2)",
            ),
        ] = None,
        as_json: JsonOption = False,
    ) -> None:
        """Show or update saved job-match weights."""
        updates = _parse_weight_options(weight)
        deps = _get_context(ctx).build_dependencies()
        with _engine_errors():
            if updates is None:
                view = deps.engine.get_preferences(user)
            else:
                view = deps.engine.update_preferences(user, updates)
        if as_json:
            print_json(data=view.to_payload())
            return
        label = "custom" if view.is_custom else "default"
        rprint(f"Weights ({label}):")
        _print_weights(view.weights.to_payload())

    _ = (main, analyze, history, compare, progress, trends, export, preferences)

    return app
