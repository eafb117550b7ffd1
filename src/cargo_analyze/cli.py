"""Command-line interface for cargo build link analysis."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console

from .analyzer import MetadataAnalyzer
from .binary import ExtractError
from .cargo import CargoBuildError, run_cargo_build
from .constants import SUBCOMMAND_NAME
from .messages import MessageParseError, read_metadata
from .models import LinkGrammarError

# Status and errors go to stderr so stdout carries only the report
console = Console(stderr=True)


def _read_messages(messages, manifest_path, verbose):
    """Return cargo JSON lines, either from a file or from a fresh build."""
    if messages is not None:
        if verbose:
            console.print(f"Reading build messages from {messages.name}")
        return messages.read().splitlines()

    if verbose:
        console.print("[bold]Running cargo build...[/bold]")
    return run_cargo_build(manifest_path=manifest_path, verbose=verbose).splitlines()


@click.command()
@click.version_option()
@click.option("--manifest-path", type=click.Path(path_type=Path), default=None, metavar="PATH",
              help="Path to Cargo.toml, passed through to cargo")
@click.option("--ignore-binary-analysis", is_flag=True, default=False,
              help="Only report libraries declared by build scripts")
@click.option("--messages", type=click.File("r", encoding="utf-8"), default=None,
              help="Read cargo JSON messages from FILE ('-' for stdin) instead of running cargo")
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def analyze(manifest_path, ignore_binary_analysis, messages, as_json, verbose):
    """Report the native libraries a cargo build links against.

    Runs `cargo build --message-format json`, lists the libraries declared
    by build scripts (cargo:rustc-link-lib) and, unless disabled, the
    libraries each produced executable actually links against.

    \b
    Examples:
        cargo analyze
        cargo analyze --manifest-path path/to/Cargo.toml
        cargo build --message-format json > build.jsonl
        cargo analyze --messages build.jsonl --ignore-binary-analysis
    """
    try:
        lines = _read_messages(messages, manifest_path, verbose)
        metadata = read_metadata(lines, verbose=verbose)

        if verbose:
            console.print(
                f"Collected {len(metadata.linked_libs)} library declarations, "
                f"{len(metadata.executables)} executables"
            )

        analyzer = MetadataAnalyzer(
            metadata,
            inspect_binaries=not ignore_binary_analysis,
            verbose=verbose,
        )
        if as_json:
            report = json.dumps(analyzer.to_dict(), indent=2) + "\n"
        else:
            report = analyzer.render()
    except (CargoBuildError, MessageParseError, LinkGrammarError, ExtractError) as e:
        console.print(f"Error: {e}", style="red", markup=False, highlight=False)
        sys.exit(1)

    click.echo(report, nl=False)


def main():
    """Entry point for both `cargo-analyze` and `cargo analyze`.

    Cargo runs external subcommands as `cargo-analyze analyze ...`, so a
    leading `analyze` argument is dropped.
    """
    args = sys.argv[1:]
    if args[:1] == [SUBCOMMAND_NAME]:
        args = args[1:]
    analyze.main(args=args, prog_name="cargo analyze")


if __name__ == "__main__":
    main()
