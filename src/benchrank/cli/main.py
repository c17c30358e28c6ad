"""Main CLI entrypoint using Typer."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd
import typer

from benchrank import __version__
from benchrank.api import analyze
from benchrank.config import CompareConfig, SummaryConfig
from benchrank.errors import BenchrankError
from benchrank.io.records import load_records
from benchrank.stats.reports import (
    build_groups_table,
    build_memory_table,
    build_pairs_table,
    build_run_manifest,
    build_summary_table,
)
from benchrank.stats.summary import describe as describe_samples

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="benchrank",
    help="Summarize and rank benchmark sample sets.",
    add_completion=False,
)

# Logging setup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def version_callback(value: bool):
    """Print version and exit."""
    if value:
        typer.echo(f"benchrank {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging."),
):
    """benchrank: statistics and ranking for benchmark measurements."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _echo_table(df: pd.DataFrame) -> None:
    if df.empty:
        typer.echo("(none)")
    else:
        typer.echo(df.to_string(index=False))


@app.command()
def describe(
    records: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of exported sample sets"),
    outlier_method: str = typer.Option("tukey", "--outlier-method", help="Outlier rule: tukey or mad"),
    memory: bool = typer.Option(False, "--memory", help="Also print memory statistics"),
):
    """
    Print descriptive statistics for each sample set.

    Examples:
        benchrank describe results.json --outlier-method mad
    """
    try:
        config = SummaryConfig(outlier_method=outlier_method)
        summaries = [describe_samples(s, config) for s in load_records(records)]
    except (BenchrankError, OSError) as e:
        _fail(str(e))

    _echo_table(build_summary_table(summaries))
    if memory:
        typer.echo("")
        _echo_table(build_memory_table(summaries))


@app.command()
def compare(
    records: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file of exported sample sets"),
    alpha: float = typer.Option(0.05, "--alpha", help="Significance threshold"),
    effect_threshold: float = typer.Option(0.2, "--effect-threshold", help="Minimum Cohen's d for a cluster split"),
    max_pairwise: int = typer.Option(5, "--max-pairwise", help="Largest set count compared pairwise"),
    as_json: bool = typer.Option(False, "--json", help="Print the comparison as JSON"),
    outdir: Optional[Path] = typer.Option(None, "--outdir", help="Also write CSV tables to this directory"),
):
    """
    Compare sample sets and rank them into statistically distinct groups.

    Up to --max-pairwise sets are compared with Welch's t-test and Holm
    correction; larger sets are clustered with Scott-Knott ESD.

    Examples:
        benchrank compare results.json
        benchrank compare results.json --alpha 0.01 --outdir derived/compare
    """
    try:
        config = CompareConfig(alpha=alpha, effect_threshold=effect_threshold, max_pairwise_groups=max_pairwise)
        samples = load_records(records)
        analysis = analyze(samples, config)
    except (BenchrankError, OSError) as e:
        _fail(str(e))

    result = analysis.comparison
    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
    else:
        typer.secho(result.method.name, bold=True)
        typer.echo(result.method.clustering)
        typer.echo("")
        _echo_table(build_groups_table(result))
        typer.echo("")
        _echo_table(build_pairs_table(result))

    if outdir is not None:
        outdir.mkdir(parents=True, exist_ok=True)
        build_run_manifest(result, config, len(samples)).to_csv(outdir / "run_manifest.csv", index=False)
        build_summary_table(analysis.summaries).to_csv(outdir / "summaries.csv", index=False)
        build_groups_table(result).to_csv(outdir / "groups.csv", index=False)
        build_pairs_table(result).to_csv(outdir / "pairs.csv", index=False)
        logger.info(f"Wrote comparison tables to {outdir}")


if __name__ == "__main__":
    app()
