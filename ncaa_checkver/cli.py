"""
Command-line interface for ncaa-checkver.

This module is responsible for argument parsing and delegating to the
checker. It is also the single place where errors become exit codes.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .checker import run_check
from .config import DEFAULT_REMOTE, SITE_OPTIONS, VERSION, resolve_config
from .errors import CheckverError, GitError
from .logging_utils import configure_logging


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ncaa-checkver",
        description=(
            "Determine the current version of a module by consulting the "
            "site makefile on a given branch of the site repo."
        ),
        epilog=(
            "Defaults for the site options can be set with the "
            "NCAA_BARCA_SITE_REPO_PATH, NCAA_BARCA_SITE_MAKEFILE and "
            "NCAA_BARCA_SITE_BRANCH environment variables."
        ),
    )

    parser.add_argument(
        "module",
        nargs="*",
        default=[],
        help="Name of the module to look up in the makefile. Only the first is used.",
    )

    # Site options default to None so resolve_config can tell an explicit
    # flag apart from an unset one.
    parser.add_argument(
        "-r",
        "--site-repo",
        default=None,
        help=f"{SITE_OPTIONS['site-repo'].usage} (default: {SITE_OPTIONS['site-repo'].default})",
    )
    parser.add_argument(
        "--site-makefile",
        default=None,
        help=f"{SITE_OPTIONS['site-makefile'].usage} (default: {SITE_OPTIONS['site-makefile'].default})",
    )
    parser.add_argument(
        "-b",
        "--site-branch",
        default=None,
        help=f"{SITE_OPTIONS['site-branch'].usage} (default: {SITE_OPTIONS['site-branch'].default})",
    )
    parser.add_argument(
        "--remote",
        default=DEFAULT_REMOTE,
        help="Remote whose copy of the branch is inspected (default: %(default)s).",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be specified multiple times).",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {VERSION}",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_intermixed_args(argv)

    config = resolve_config(
        site_repo=args.site_repo,
        site_makefile=args.site_makefile,
        site_branch=args.site_branch,
        module=args.module[0] if args.module else "",
        remote=args.remote,
        verbosity=args.verbose,
    )

    configure_logging(verbosity=config.verbosity)

    try:
        run_check(config)
    except KeyboardInterrupt:
        return 130
    except GitError as exc:
        message = str(exc)
        if exc.output:
            print(exc.output.rstrip("\n"))
            message = f"{message}. See output above for clues."
        print(f"ncaa-checkver: error: {message}", file=sys.stderr)
        return 1
    except CheckverError as exc:
        print(f"ncaa-checkver: error: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
