"""CLI for merkle-diff."""

import json
import logging
import sys
from pathlib import Path
from typing import NoReturn

import click
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import CONFIG_DIR, __version__
from .compare import compare_trees
from .config import MerkleDiffConfig, get_config_path, load_config, save_config
from .display import print_mismatches, render_tree
from .errors import MerkleError
from .merkle import HASH_ALGORITHMS, MerkleTree

console = Console()
error_console = Console(stderr=True)

DEMO_LINES_A = [
    "This sentence is equal",
    "This sentence is ok but on byte is different --> 1",
    "Again this is correct",
    "Different sentence",
]
DEMO_LINES_B = [
    "This sentence is equal",
    "This sentence is ok but on byte is different --> 2",
    "Again this is correct",
    "Nothing is common",
]


def get_project_root() -> Path:
    """Get the project root directory (current working directory)."""
    return Path.cwd()


def configure_logging(verbose: bool) -> None:
    """Route library log records through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    error_console.print(f"[red]Error:[/red] {escape(message)}")
    sys.exit(1)


def read_blocks(path: Path, config: MerkleDiffConfig) -> list[str]:
    """Read a text file as a list of newline-delimited blocks.

    Only ``\\n`` separates blocks. A trailing newline does not start an
    extra empty block.
    """
    try:
        text = path.read_text(encoding=config.encoding)
    except UnicodeDecodeError as e:
        fail(f"Cannot decode {path} as {config.encoding}: {e.reason}")
    except LookupError:
        fail(f"Unknown encoding: {config.encoding}")

    lines = text.split("\n")
    if config.strip_newlines:
        lines = [line.removesuffix("\r") for line in lines]
    else:
        lines = [line + "\n" for line in lines[:-1]] + lines[-1:]

    if lines and lines[-1] == "":
        lines.pop()
    return lines


def build_from_file(path: Path, config: MerkleDiffConfig) -> MerkleTree:
    """Build a tree whose blocks are the lines of a file."""
    blocks = read_blocks(path, config)
    if not blocks:
        fail(f"{path} is empty; a Merkle tree needs at least one block.")
    return MerkleTree.build(
        [block.encode(config.encoding) for block in blocks],
        algorithm=config.hash_algorithm,
    )


def resolve_config(algorithm: str | None, prune: bool | None = None) -> MerkleDiffConfig:
    """Load the project config and apply command-line overrides."""
    try:
        config = load_config(get_project_root())
    except ValidationError as e:
        fail(f"Invalid configuration: {e.errors()[0]['msg']}")
    except json.JSONDecodeError as e:
        fail(f"Invalid config file: {e}")
    updates = {}
    if algorithm is not None:
        updates["hash_algorithm"] = algorithm
    if prune is not None:
        updates["prune"] = prune
    return config.model_copy(update=updates)


algorithm_option = click.option(
    "--algorithm",
    type=click.Choice(HASH_ALGORITHMS),
    default=None,
    help="Hash algorithm (default: from config, sha256)",
)


@click.group()
@click.version_option(version=__version__, prog_name="merkle-diff")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def main(verbose: bool) -> None:
    """merkle-diff - Find differing blocks between two Merkle trees."""
    configure_logging(verbose)


@main.command()
@click.option("--prune/--no-prune", default=None, help="Skip subtrees with equal hashes")
def demo(prune: bool | None) -> None:
    """Compare two built-in four-line documents."""
    config = resolve_config(None, prune)

    tree_a = MerkleTree.build(DEMO_LINES_A, algorithm=config.hash_algorithm)
    tree_b = MerkleTree.build(DEMO_LINES_B, algorithm=config.hash_algorithm)
    report = compare_trees(tree_a, tree_b, prune=config.prune)

    print_mismatches(console, report, config.encoding)


@main.command()
@click.argument("file_a", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("file_b", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@algorithm_option
@click.option("--prune/--no-prune", default=None, help="Skip subtrees with equal hashes")
@click.option("--json", "as_json", is_flag=True, help="Print mismatches as JSON")
def diff(
    file_a: Path,
    file_b: Path,
    algorithm: str | None,
    prune: bool | None,
    as_json: bool,
) -> None:
    """Compare two files line by line via their Merkle trees.

    Exits with status 1 when the files differ.
    """
    config = resolve_config(algorithm, prune)

    try:
        tree_a = build_from_file(file_a, config)
        tree_b = build_from_file(file_b, config)
        report = compare_trees(tree_a, tree_b, prune=config.prune)
    except MerkleError as e:
        fail(str(e))

    if as_json:
        payload = {
            "root_hash_a": report.root_hash_a,
            "root_hash_b": report.root_hash_b,
            "leaf_count": report.leaf_count,
            "mismatches": [list(pair) for pair in report.decoded(config.encoding)],
        }
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        print_mismatches(console, report, config.encoding)

    if report.has_changes:
        sys.exit(1)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@algorithm_option
@click.option("--data", "show_data", is_flag=True, help="Show leaf data next to hashes")
def show(file: Path, algorithm: str | None, show_data: bool) -> None:
    """Render the Merkle tree of a file."""
    config = resolve_config(algorithm)

    try:
        tree = build_from_file(file, config)
    except MerkleError as e:
        fail(str(e))

    console.print(render_tree(tree, encoding=config.encoding, show_data=show_data))


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@algorithm_option
def root(file: Path, algorithm: str | None) -> None:
    """Show the root hash of a file's Merkle tree.

    The hash is printed alone on the first line, followed by a summary table.
    """
    config = resolve_config(algorithm)

    try:
        tree = build_from_file(file, config)
    except MerkleError as e:
        fail(str(e))

    click.echo(tree.root_hash)

    table = Table(title=str(file))
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Algorithm", tree.algorithm)
    table.add_row("Blocks", str(tree.block_count))
    table.add_row("Leaves", str(tree.leaf_count))
    table.add_row("Depth", str(tree.depth))

    console.print(table)


@main.command()
@algorithm_option
@click.option("--force", is_flag=True, help="Overwrite existing configuration")
def init(algorithm: str | None, force: bool) -> None:
    """Write a default config file in the current directory."""
    project_root = get_project_root()
    config_path = get_config_path(project_root)

    if config_path.exists() and not force:
        error_console.print(
            f"[yellow]Warning:[/yellow] {CONFIG_DIR}/ already exists. Use --force to reinitialize."
        )
        sys.exit(1)

    config = MerkleDiffConfig()
    if algorithm is not None:
        config = config.model_copy(update={"hash_algorithm": algorithm})
    save_config(config, project_root)

    console.print(
        Panel(
            f"[green]Initialized merkle-diff[/green]\n\n"
            f"Hash algorithm: [bold]{config.hash_algorithm}[/bold]\n"
            f"Config file: [dim]{config_path}[/dim]",
            title="merkle-diff init",
        )
    )


if __name__ == "__main__":
    main()
