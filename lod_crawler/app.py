"""Typer CLI entrypoint for the LOD crawler."""

from __future__ import annotations

import asyncio
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import typer
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from .config import OUTPUT_FORMATS, ConfigRepository, CrawlerConfig, FetchConfig
from .crawler import CrawlSummary, crawl
from .engine import LodFetcher, RewriteChain, compile_filter
from .engine.facts import Fact
from .logging_conf import configure_logging, crawler_log_path, tail_log

app = typer.Typer(
    help="Follow owl:sameAs links across Linked Open Data endpoints.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
config_app = typer.Typer(
    name="config",
    help="Inspect or initialise the crawler configuration.",
    no_args_is_help=True,
    rich_markup_mode=None,
)
log_app = typer.Typer(
    name="log",
    help="Inspect crawler logs.",
    no_args_is_help=True,
    rich_markup_mode=None,
)

console = Console()


@dataclass
class AppState:
    repository: ConfigRepository
    config: CrawlerConfig
    fetcher_factory: Callable[[FetchConfig], LodFetcher]


def build_state(verbose: bool, config_path: Path | None = None) -> AppState:
    repository = ConfigRepository()
    config = repository.load(config_path)
    configure_logging(verbose=verbose)
    return AppState(repository=repository, config=config, fetcher_factory=LodFetcher)


def _get_state(ctx: typer.Context) -> AppState:
    state = ctx.obj
    if state is None:
        state = build_state(verbose=False)
        ctx.obj = state
    return state


def _format_fact(fact: Fact) -> str:
    return f"<{fact.subject}> <{fact.predicate}> {fact.object.n3()}"


def _render_summary(summary: CrawlSummary) -> Table:
    table = Table(title="Crawl summary", box=box.SIMPLE_HEAD, show_header=False)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="cyan")
    table.add_row("Seed", summary.seed)
    table.add_row("Sources", str(len(summary.sources)))
    table.add_row("Facts", str(summary.fact_count))
    table.add_row("Failed sources", str(len(summary.failures)))
    table.add_row("Skipped sources", str(len(summary.skipped)))
    return table


def _render_sources(summary: CrawlSummary, chain: RewriteChain) -> Table:
    failed = {error.uri for error in summary.failures}
    skipped = set(summary.skipped)
    table = Table(title="Sources", box=box.SIMPLE_HEAD)
    table.add_column("#", style="dim", justify="right")
    table.add_column("URI", style="green")
    table.add_column("Facts", justify="right")
    table.add_column("Status")
    for index, source in enumerate(summary.sources, start=1):
        facts = len(summary.store.match(graph=chain(source)))
        if source in failed:
            status = "[red]failed[/red]"
        elif source in skipped:
            status = "[dim]skipped[/dim]"
        else:
            status = "ok"
        table.add_row(str(index), source, str(facts), status)
    return table


async def _run_crawl(state: AppState, uri: str, pattern: Optional[str], quiet: bool) -> CrawlSummary:
    def _on_fact(fact: Fact) -> None:
        console.print(_format_fact(fact), markup=False, highlight=False)

    def _on_source(source: str) -> None:
        console.print(f"source: {source}", style="cyan", markup=False)

    async with state.fetcher_factory(state.config.fetch) as fetcher:
        return await crawl(
            uri,
            fetcher.fetch,
            config=state.config,
            on_fact=None if quiet else _on_fact,
            on_source=_on_source,
            pattern=pattern,
        )


app.add_typer(config_app, name="config")
app.add_typer(log_app, name="log")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
    config_path: Optional[Path] = typer.Option(
        None, "--config", help="Read configuration from this YAML/JSON file."
    ),
) -> None:
    ctx.obj = build_state(verbose, config_path)


@app.command("crawl", help="Crawl from URI, following equivalence links.")
def crawl_command(
    ctx: typer.Context,
    uri: str = typer.Argument(..., help="Seed resource URI."),
    pattern: Optional[str] = typer.Option(
        None, "--pattern", "-p", help="Only print facts matching this regular expression."
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Write all facts to this file; relative paths go under outputs_dir."
    ),
    fmt: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: nquads, trig, nt, turtle."),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not print facts."),
) -> None:
    state = _get_state(ctx)
    output_format = fmt or state.config.default_output_format
    if output_format not in OUTPUT_FORMATS:
        raise typer.BadParameter(f"Unknown format {output_format!r}", param_hint="--format")
    if pattern is not None:
        try:
            compile_filter(pattern)
        except re.error as exc:
            raise typer.BadParameter(f"Invalid pattern: {exc}", param_hint="--pattern") from exc

    summary = asyncio.run(_run_crawl(state, uri, pattern, quiet))

    console.print(_render_sources(summary, RewriteChain.from_config(state.config.rewrite_rules)))
    console.print(_render_summary(summary))
    if summary.failures:
        console.print(
            f"{len(summary.failures)} source(s) could not be fetched; results may be incomplete.",
            style="yellow",
        )
    if output is not None:
        if not output.is_absolute():
            output = state.repository.locator.resolve_output(state.config) / output
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(summary.store.serialize(OUTPUT_FORMATS[output_format]), encoding="utf-8")
        console.print(f"Wrote {summary.fact_count} facts to {output}", style="green")
    if not summary.sources:
        console.print("Seed URI was not admitted (no resolvable domain).", style="red")
        raise typer.Exit(code=1)


@app.command("rewrite", help="Show the URI actually fetched for URI.")
def rewrite_command(ctx: typer.Context, uri: str = typer.Argument(..., help="Resource URI.")) -> None:
    state = _get_state(ctx)
    chain = RewriteChain.from_config(state.config.rewrite_rules)
    console.print(chain(uri), markup=False, highlight=False)


@config_app.command("show", help="Print the effective configuration.")
def config_show(ctx: typer.Context) -> None:
    state = _get_state(ctx)
    console.print(f"# {state.repository.locator.config_path()}", style="dim", markup=False)
    console.print(
        yaml.safe_dump(state.config.model_dump(mode="json"), sort_keys=False, allow_unicode=True),
        markup=False,
        highlight=False,
    )


@config_app.command("init", help="Write a default configuration file.")
def config_init(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file."),
) -> None:
    state = _get_state(ctx)
    path = state.repository.locator.config_path()
    if path.exists() and not force:
        # load() writes defaults on first use, so only refuse when the file differs.
        if state.repository.load() != CrawlerConfig():
            console.print(f"Configuration already exists: {path} (use --force)", style="yellow")
            raise typer.Exit(code=1)
    state.repository.reset()
    console.print(f"Default configuration written to {path}", style="green")


@log_app.command("show", help="Show the most recent crawler log lines.")
def log_show(lines: int = typer.Option(100, "--lines", "-n", help="Number of lines.")) -> None:
    content = tail_log(crawler_log_path(), lines)
    if not content:
        console.print("No log entries yet.", style="dim")
        return
    console.print(f"crawler.log · last {len(content)} lines", style="cyan")
    console.print("".join(content), markup=False, highlight=False)


__all__ = ["AppState", "app", "build_state"]
