# SPDX-License-Identifier: Apache-2.0
"""cg2exec: run a program in a specific control group."""

import argparse
import logging
import subprocess
import sys

from cg2tools import CGroup
from cg2tools.compat import os_check

from . import CGROUP_HELP, _print_error

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cg2exec",
        description="Runs a program with a specific control group.",
    )
    parser.add_argument("cgroup", help=CGROUP_HELP)
    parser.add_argument("cmd", help="The subcommand to run")
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Arguments to the subcommand",
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse CGROUP and CMD, handing every later argument to CMD untouched.

    argparse drops a ``--`` that directly follows CMD, so the command's own
    arguments are split off before parsing.
    """
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(argv[:2])
    args.args = list(argv[2:])
    return args


def _exit_status(returncode: int) -> int:
    """Map a subprocess return code to a shell-style exit status."""
    if returncode < 0:
        return 128 - returncode
    return returncode


def run(args) -> int:
    os_check()
    cgroup = CGroup.current()
    # Nothing to write when we are already in the requested group.
    if cgroup.append(args.cgroup):
        for notice in cgroup.classify_current().notices:
            logger.info("%s", notice.message)
    try:
        result = subprocess.run([args.cmd, *args.args])
    except FileNotFoundError:
        _print_error(f"command not found: {args.cmd}", args)
        return 127
    except PermissionError:
        _print_error(f"permission denied: {args.cmd}", args)
        return 126
    return _exit_status(result.returncode)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        _print_error(str(e), args)
        sys.exit(1)
