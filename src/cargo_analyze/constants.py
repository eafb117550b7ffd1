"""Shared constants for cargo-analyze."""

# Cargo invocation
CARGO_ENV_VAR = "CARGO"
DEFAULT_CARGO = "cargo"
CARGO_BUILD_ARGS = ["build", "--message-format", "json"]

# Subcommand name cargo passes as argv[1] for `cargo analyze`
SUBCOMMAND_NAME = "analyze"

# Message reasons used by link analysis
REASON_BUILD_SCRIPT_EXECUTED = "build-script-executed"
REASON_COMPILER_ARTIFACT = "compiler-artifact"

# Name some object formats use for a binary's reference to itself
SELF_LIBRARY_NAME = "self"

# Report headers
RUSTC_LIBS_HEADER = "Libraries linked by rustc:"
EXECUTABLE_LIBS_HEADER = "Libraries linked to executable `{name}`:"
