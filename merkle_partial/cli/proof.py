"""
CLI commands for partial proof files.

Provides commands for:
- Verifying a proof against a known root
- Computing the root a proof commits to
- Filling derivable internal nodes
- Inspecting the chunks of a proof
"""

import json
import sys
import time
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from merkle_partial.cli.context import (
    CLIContext,
    handle_merkle_partial_error,
    pass_context,
    validate_root_hex,
)
from merkle_partial.config.settings import MerklePartialConfig, get_default_config
from merkle_partial.exceptions import SerializationError
from merkle_partial.logging_config import get_logger, log_partial_verification
from merkle_partial.serialized import SerializedPartial
from merkle_partial.tree_arithmetic import depth

logger = get_logger(__name__)


def _config(ctx: CLIContext) -> MerklePartialConfig:
    return ctx.config if ctx.config is not None else get_default_config()


def read_proof_file(path: Path, max_tree_depth: int) -> SerializedPartial:
    """
    Read a proof file written by ``write_proof_file``.

    Raises:
        SerializationError: If the file is not valid JSON, is malformed, or
            holds indices deeper than ``max_tree_depth``
    """
    try:
        data = json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise SerializationError(f"Proof file '{path}' is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SerializationError(f"Proof file '{path}' must contain a JSON object")

    serialized = SerializedPartial.from_dict(data)
    if serialized.max_depth() > max_tree_depth:
        raise SerializationError(
            f"Proof file '{path}' has depth {serialized.max_depth()}, "
            f"maximum is {max_tree_depth}"
        )
    return serialized


def write_proof_file(serialized: SerializedPartial, path: Optional[Path]) -> None:
    """Write ``serialized`` as JSON to ``path``, or to stdout when None."""
    content = json.dumps(serialized.to_dict(), indent=2)
    if path is None:
        click.echo(content)
    else:
        Path(path).write_text(content + "\n")


@click.command("verify")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--root",
    "-r",
    "claimed_root",
    required=True,
    callback=validate_root_hex,
    help="Expected root as 64 hex characters",
)
@click.option("--fill", "fill_first", is_flag=True, help="Fill derivable nodes before verifying")
@pass_context
@handle_merkle_partial_error
def verify(ctx: CLIContext, proof_file: Path, claimed_root: bytes, fill_first: bool):
    """
    Verify that a proof file is consistent with a known root.

    Exits with status 1 when the proof does not match.

    Examples:

        merkle-partial verify proof.json --root 0x5a1f...
    """
    config = _config(ctx)
    serialized = read_proof_file(proof_file, config.proof.max_tree_depth)
    cache = serialized.to_cache()

    start = time.perf_counter()
    if fill_first or config.proof.fill_on_load:
        cache.fill()
    valid = cache.is_valid(claimed_root)

    log_partial_verification(
        logger,
        root=claimed_root.hex(),
        success=valid,
        duration_ms=(time.perf_counter() - start) * 1000,
        failure_reason=None if valid else "root_mismatch",
        chunk_count=len(serialized),
    )

    if valid:
        click.echo("✓ Proof is valid")
    else:
        click.echo("✗ Proof does not match root", err=True)
        sys.exit(1)


@click.command("root")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_context
@handle_merkle_partial_error
def root(ctx: CLIContext, proof_file: Path):
    """
    Recompute and print the root a proof file commits to.

    Every internal node is recomputed from the proof's leaves, so a stored
    root in the file is ignored.
    """
    config = _config(ctx)
    cache = read_proof_file(proof_file, config.proof.max_tree_depth).to_cache()
    cache.refresh()

    computed = cache.root()
    if computed is None:
        raise SerializationError("Proof file contains no chunks")

    click.echo(computed.hex())


@click.command("fill")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the filled proof here instead of stdout",
)
@pass_context
@handle_merkle_partial_error
def fill(ctx: CLIContext, proof_file: Path, output: Optional[Path]):
    """Add every internal node derivable from the proof's chunks."""
    config = _config(ctx)
    cache = read_proof_file(proof_file, config.proof.max_tree_depth).to_cache()
    inserted = cache.fill()

    write_proof_file(SerializedPartial.from_cache(cache), output)
    if output is not None:
        click.echo(f"✓ Filled {inserted} nodes into {output}")


@click.command("inspect")
@click.argument("proof_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@pass_context
@handle_merkle_partial_error
def inspect(ctx: CLIContext, proof_file: Path):
    """Show the index, depth and chunk of every entry in a proof file."""
    config = _config(ctx)
    serialized = read_proof_file(proof_file, config.proof.max_tree_depth)

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Index", justify="right")
    table.add_column("Depth", justify="right")
    table.add_column("Chunk")

    for index, chunk in sorted(serialized.pairs()):
        table.add_row(str(index), str(depth(index)), chunk.hex())

    console = Console(width=120)
    console.print(table)
    console.print(f"{len(serialized)} chunks")
