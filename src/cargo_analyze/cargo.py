"""Running `cargo build` and capturing its JSON messages."""

import os
import subprocess
import sys
from pathlib import Path

from .constants import CARGO_BUILD_ARGS, CARGO_ENV_VAR, DEFAULT_CARGO


class CargoBuildError(Exception):
    """Raised when cargo cannot be started or the build fails."""

    pass


def cargo_command(manifest_path: Path | str | None = None, cargo: str | None = None) -> list[str]:
    """Build the argv for `cargo build --message-format json`."""
    if cargo is None:
        cargo = os.environ.get(CARGO_ENV_VAR, DEFAULT_CARGO)

    cmd = [cargo, *CARGO_BUILD_ARGS]
    if manifest_path is not None:
        cmd.extend(["--manifest-path", str(manifest_path)])
    return cmd


def run_cargo_build(
    manifest_path: Path | str | None = None,
    cargo: str | None = None,
    verbose: bool = False,
) -> str:
    """
    Run the build and return everything cargo wrote to stdout.

    Stderr is not captured, so cargo's progress output reaches the terminal.
    Blocks until cargo exits.

    Raises:
        CargoBuildError: if cargo cannot be launched or exits non-zero
    """
    cmd = cargo_command(manifest_path, cargo)
    if verbose:
        print(f"[cargo] Running: {' '.join(cmd)}", file=sys.stderr)

    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
        )
    except OSError as e:
        raise CargoBuildError(f"failed to spawn `cargo build`: {e}") from e

    if result.returncode != 0:
        raise CargoBuildError(f"`cargo build` failed: exit status {result.returncode}")

    if verbose:
        print(f"[cargo] Build finished, {len(result.stdout.splitlines())} message lines", file=sys.stderr)
    return result.stdout
