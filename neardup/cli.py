"""
Command-line interface for the near-duplicate detector.
"""

import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import DEFAULT_CONFIG_FILE, create_default_config_file, display_config, load_config
from .errors import NearDupError
from .io.output import sort_pairs, write_pairs
from .io.shingler import Shingler
from .io.sources import TSVDocumentReader
from .lsh.pipeline import LSHPipeline
from .utils.logging_setup import log_operation, setup_logging

console = Console(stderr=True)


def _fail(error: NearDupError) -> NoReturn:
    console.print(f"[red]✗ {error.message}[/red]")
    raise SystemExit(1)


@click.group(name="neardup")
@click.version_option(__version__, prog_name="neardup")
def cli():
    """Find near-duplicate documents with MinHash and LSH."""
    pass


@cli.command(name="run")
@click.argument("input_path", type=click.Path(dir_okay=False))
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False),
              help="File to write id1,id2,similarity lines to (default: stdout)")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration file")
@click.option("--n-shingles", type=int, help="Token universe size")
@click.option("--shingle-length", type=int, help="Characters per shingle")
@click.option("--max-documents", type=int, help="Maximum number of documents to read")
@click.option("--bands", "-b", type=int, help="Number of bands")
@click.option("--rows", "-r", type=int, help="Rows per band")
@click.option("--bucket-count", type=int, help="Buckets per band")
@click.option("--threshold", type=float, help="Similarity threshold in [0, 1]")
@click.option("--seed", type=int, help="Random seed for the hash family")
@click.option("--two-pass/--one-pass", default=None,
              help="Re-check approximate pairs against exact Jaccard similarity")
@click.option("--batch-size", type=int, help="Pairs per exact-pass batch")
@click.option("--text-column", type=int, help="Tab-separated column holding the text")
@click.option("--top", type=int, default=10, show_default=True,
              help="Number of pairs shown in the summary table")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.option("--log-dir", type=click.Path(file_okay=False),
              help="Also write JSON-lines logs to this directory")
def run(input_path, output_path, config_path, n_shingles, shingle_length, max_documents,
        bands, rows, bucket_count, threshold, seed, two_pass, batch_size, text_column,
        top, verbose, log_dir):
    """Search INPUT_PATH (tab-separated, one document per line) for similar pairs."""
    logger = setup_logging(level="DEBUG" if verbose else "INFO",
                           log_dir=Path(log_dir) if log_dir else None, file=bool(log_dir))
    log_operation(logger, "run", input=input_path)

    try:
        config = load_config(config_path, overrides={
            "n_shingles": n_shingles,
            "shingle_length": shingle_length,
            "max_documents": max_documents,
            "bands": bands,
            "rows": rows,
            "bucket_count": bucket_count,
            "threshold": threshold,
            "seed": seed,
            "two_pass": two_pass,
            "batch_size": batch_size,
            "text_column": text_column,
        })
        pipeline = LSHPipeline(config)
        with TSVDocumentReader(input_path, Shingler(config.shingle_length),
                               config.max_documents, config.text_column) as source:
            with console.status("[cyan]Searching for similar pairs...[/cyan]"):
                pairs, stats = pipeline.run(source)
    except NearDupError as e:
        logger.error("Run failed: %s", e.message)
        _fail(e)

    if output_path:
        written = write_pairs(pairs, Path(output_path))
        console.print(f"[green]✓ Wrote {written} pairs to {output_path}[/green]")
    else:
        write_pairs(pairs, sys.stdout)

    summary = Table(title="Run summary", show_header=False)
    summary.add_column("metric", style="cyan")
    summary.add_column("value", justify="right")
    for key, value in stats.as_dict().items():
        summary.add_row(key, f"{value:.3f}" if key.startswith("time_") else f"{int(value)}")
    console.print(summary)

    if top > 0 and len(pairs):
        table = Table(title=f"Top {min(top, len(pairs))} pairs")
        table.add_column("id1", justify="right")
        table.add_column("id2", justify="right")
        table.add_column("similarity", justify="right")
        for pair in sort_pairs(pairs)[:top]:
            table.add_row(str(pair.id1), str(pair.id2), f"{pair.similarity:.3f}")
        console.print(table)


@cli.group(name="config")
def config_group():
    """Manage run configuration files."""
    pass


@config_group.command(name="init")
@click.option("--path", type=click.Path(dir_okay=False), default=DEFAULT_CONFIG_FILE,
              show_default=True, help="Path for config file")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def config_init(path, force):
    """Write a starter configuration file."""
    config_path = Path(path)
    if config_path.exists() and not force:
        if not click.confirm(f"Config file {path} already exists. Overwrite?"):
            console.print("[yellow]Aborted[/yellow]")
            return
    create_default_config_file(config_path)
    console.print(f"[green]✓ Created config file at {path}[/green]")


@config_group.command(name="show")
@click.option("--path", type=click.Path(exists=True, dir_okay=False), default=DEFAULT_CONFIG_FILE,
              show_default=True, help="Path to config file")
def config_show(path):
    """Display and validate a configuration file."""
    try:
        config = load_config(path)
    except NearDupError as e:
        _fail(e)
    display_config(config, Console())
    console.print("[green]✓ Configuration is valid[/green]")


def main():
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
