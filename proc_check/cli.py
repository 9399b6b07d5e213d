"""CLI entry point for the process checker."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Literal

from proc_check import __version__
from proc_check.comparator import compare
from proc_check.engine import execute
from proc_check.reporter import describe, exit_status_for, log_verdict, to_json
from proc_check.spec_loader import SpecLoadError, load_test_spec

EXIT_SPEC_ERROR = 2

OutputFormat = Literal["text", "json"]


async def run(test_file: Path, output_format: OutputFormat = "text") -> int:
    """Run the test described by ``test_file`` and return the exit status."""
    log = logging.getLogger("proc_check")

    log.info("Loading test spec: %s", test_file)
    try:
        spec = await load_test_spec(test_file)
    except SpecLoadError as e:
        log.error("%s", e)
        return EXIT_SPEC_ERROR

    result = await execute(spec.command, timeout=spec.timeout)
    verdict = compare(spec, result)
    log_verdict(log, verdict, result)

    if output_format == "json":
        print(json.dumps(to_json(verdict, result), indent=2))
    else:
        print(describe(verdict, result))

    return exit_status_for(verdict)


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run a command and check its stdout and exit code"
    )
    parser.add_argument(
        "file",
        type=Path,
        help="Path to the YAML test document",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Report format written to stdout",
    )
    parser.add_argument(
        "--log-level",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
        default="WARNING",
        help="Verbosity of the diagnostic log written to stderr",
    )
    parser.add_argument("--version", action="version", version=__version__)

    args = parser.parse_args()

    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )

    exit_code = asyncio.run(run(test_file=args.file, output_format=args.format))
    sys.exit(exit_code)


if __name__ == "__main__":  # pragma: no cover
    main()
