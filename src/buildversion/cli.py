"""CLI entry point for buildversion.

Stability: stable
Tier: none
Since: 1.0.0
Dependencies: structlog, pydantic-settings
Doc-Types: API_REFERENCE
Tags: buildversion, cli

The flags come entirely from the parameter schema, so there is no argparse
or typer layer here: ``merge_command_line`` is the parser.

Usage::

    # Write VersionInfo with version 1.2.3 and the current git revision
    buildversion --version 1.2.3

    # Bump the build number and only print the long version
    buildversion -v 1.2.3 -ib --print

    # Patch AssemblyInfo.cs and also write the bare version to a file
    buildversion -v 1.2.3 -a Properties/AssemblyInfo.cs --WriteAppVersion version.txt

    # Parameter listing
    buildversion --help

Exit codes: 0 success (including per-artifact failures), 1 fatal run error,
2 bad parameters.
"""

from __future__ import annotations

import sys

from buildversion.errors import BuildVersionError, ParameterError
from buildversion.logging import configure_logging, get_logger
from buildversion.merger import merge_command_line
from buildversion.params import BuildParams, usage_text
from buildversion.resolver import BuildVersion
from buildversion.settings import get_settings

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_PARAMS = 2


def get_params(argv: list[str], program: str) -> BuildParams | None:
    """
    Build the parameters for this session from the command line.

    Returns:
        Merged parameters, or None when usage was printed instead
        (``--help`` or a parse error).

    Raises:
        ParameterError: Re-raised after printing usage so the caller can
            pick the exit code.
    """
    params = BuildParams()

    # A leading '--help' outputs the invocation parameters
    if argv and argv[0] == "--help":
        print(usage_text(params, program), end="")
        return None

    try:
        merge_command_line(params, argv)
    except ParameterError as e:
        print(f"ERROR: bad parameters: {e.message}")
        print(usage_text(params, program), end="")
        raise

    return params


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:]).

    Returns:
        Exit code (0 = success, 1 = run failed, 2 = bad parameters).
    """
    args = list(sys.argv[1:] if argv is None else argv)
    settings = get_settings()

    # Quiet/Verbose aren't known until the merge is done
    configure_logging(log_format=settings.log_format, force=True)

    try:
        params = get_params(args, settings.program_name)
    except ParameterError:
        return EXIT_BAD_PARAMS
    if params is None:
        return EXIT_OK

    configure_logging(
        quiet=params.quiet,
        verbose=params.verbose,
        log_format=settings.log_format,
        force=True,
    )
    log = get_logger("buildversion")

    try:
        BuildVersion(params, log).run()
    except BuildVersionError as e:
        log.error("run_failed", error=e.message, error_type=type(e).__name__, **e.context.to_dict())
        return EXIT_FAILED

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
