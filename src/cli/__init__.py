# SPDX-License-Identifier: Apache-2.0
"""CLI for cg2tools: create, configure and classify into control groups."""

import argparse
import json
import logging
import re
import sys

from cg2tools import CGroup
from cg2tools.compat import os_check
from cg2tools.result import Outcome

CGROUP_HELP = (
    "Name of the control group. May be relative (appended to the control "
    'group of the current process) or absolute (starting with "/").'
)

_KEY_RE = re.compile(r"[a-z_.]+")


def _resolve_cgroup(name: str) -> CGroup:
    """Return the control group *name*, relative to our own control group."""
    cgroup = CGroup.current()
    cgroup.append(name)
    return cgroup


def _print_result(data: dict, args: argparse.Namespace) -> None:
    """Print result as JSON (if --json) or human-readable text."""
    if getattr(args, "json", False):
        print(json.dumps(data))
    else:
        for key, value in data.items():
            if isinstance(value, (list, tuple)):
                value = " ".join(map(str, value)) or "(none)"
            print(f"{key}: {value}")


def _print_outcome(command: str, cgroup: CGroup, outcome: Outcome, args: argparse.Namespace) -> None:
    """Print the notices of *outcome*, or the whole outcome as JSON."""
    if getattr(args, "json", False):
        data = {"command": command, "cgroup": str(cgroup)}
        data.update(outcome.to_dict())
        print(json.dumps(data))
    else:
        for notice in outcome.notices:
            print(notice)


def _print_error(message: str, args: argparse.Namespace) -> None:
    """Print error as JSON (if --json) or plain text to stderr."""
    if getattr(args, "json", False):
        print(json.dumps({"error": message}), file=sys.stderr)
    else:
        print(f"error: {message}", file=sys.stderr)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_key_value(text: str) -> tuple[str, str]:
    """Parse a ``controller.attribute=value`` restriction."""
    key, sep, value = text.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError("expected key=value")
    if not _KEY_RE.fullmatch(key):
        raise argparse.ArgumentTypeError("key contains invalid characters")
    if "." not in key:
        raise argparse.ArgumentTypeError("key must be of the form CONTROLLER.RESTRICTION")
    return key, value


def parse_controller_flags(text: str) -> list[str]:
    """Parse a comma-separated list of ``+controller`` flags into names."""
    names = []
    for flag in text.split(","):
        if not flag.startswith("+") or len(flag) == 1:
            raise argparse.ArgumentTypeError(
                "controllers may only be enabled for now. Pass them with +, as in: +cpu +memory"
            )
        names.append(flag[1:])
    return names


def parse_pids(text: str) -> list[int]:
    """Parse a comma-separated list of process IDs."""
    try:
        pids = [int(p) for p in text.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid process ID list: {text!r}") from None
    if any(p <= 0 for p in pids):
        raise argparse.ArgumentTypeError(f"process IDs must be positive: {text!r}")
    return pids


def _flatten(groups) -> list:
    return [item for group in groups or [] for item in group]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cg2util",
        description="Manipulates settings for unified control groups (cgroups v2).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log what is being done (repeat for debug output)",
    )
    parser.add_argument("--json", action="store_true", help="JSON output")
    sub = parser.add_subparsers(dest="command")

    # --- create ---
    p_create = sub.add_parser(
        "create",
        help="Create a new control group.",
        description="Create a control group and any missing ancestors.",
    )
    p_create.add_argument("cgroup", help=CGROUP_HELP)
    p_create.add_argument(
        "-u", "--user",
        default=None,
        metavar="OWNER",
        help="Owner (USER[:GROUP]) of the new control group, only if the group is newly created.",
    )

    # --- classify ---
    p_classify = sub.add_parser(
        "classify",
        help="Move running processes to a different control group.",
    )
    p_classify.add_argument("cgroup", help=CGROUP_HELP)
    p_classify.add_argument(
        "pids",
        nargs="+",
        type=parse_pids,
        metavar="PIDS",
        help="Process IDs to reclassify (comma or space separated).",
    )
    p_classify.add_argument(
        "-a", "--auto",
        action="store_true",
        help="Create the control group if it doesn't exist yet.",
    )

    # --- control ---
    p_control = sub.add_parser(
        "control",
        help="Recursively list or enable controllers in a control group.",
        description=(
            "List the controllers of CGROUP, or enable the given controllers "
            "in CGROUP and all of its ancestors."
        ),
    )
    p_control.add_argument("cgroup", help=CGROUP_HELP)
    p_control.add_argument(
        "controllers",
        nargs="*",
        type=parse_controller_flags,
        metavar="+CONTROLLER",
        help="Controllers to enable, e.g. +cpu +memory or +cpu,+memory.",
    )
    p_control.add_argument(
        "--inherit",
        default=None,
        metavar="CGROUP",
        help=(
            "Enable all controllers of the specified control group, relative "
            "to the control group of the current process."
        ),
    )
    p_control.add_argument(
        "-a", "--auto",
        action="store_true",
        help="Create the control group if it doesn't exist yet.",
    )

    # --- restrict ---
    p_restrict = sub.add_parser(
        "restrict",
        help="Set restrictions in a control group.",
    )
    p_restrict.add_argument("cgroup", help=CGROUP_HELP)
    p_restrict.add_argument(
        "restrictions",
        nargs="+",
        type=parse_key_value,
        metavar="KEY=VALUE",
        help=(
            'Restrictions to apply in file=value format, such as "cpu.weight=150". '
            "See <https://docs.kernel.org/admin-guide/cgroup-v2.html>"
        ),
    )
    p_restrict.add_argument(
        "-a", "--auto",
        action="store_true",
        help=(
            "Create the control group if it doesn't exist yet and enable the "
            "required controllers if they aren't enabled yet."
        ),
    )

    # --- status ---
    p_status = sub.add_parser(
        "status",
        help="Show controllers, subtree control and processes of a control group.",
    )
    p_status.add_argument("cgroup", nargs="?", default=".", help=CGROUP_HELP)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "classify":
        args.pids = _flatten(args.pids)
    elif args.command == "control":
        args.controllers = _flatten(args.controllers)
        if args.controllers and args.inherit is not None:
            parser.error("controllers and --inherit are mutually exclusive")

    _setup_logging(args.verbose)

    try:
        os_check()
        if args.command == "create":
            from .create import cmd_create
            sys.exit(cmd_create(args))
        elif args.command == "classify":
            from .classify import cmd_classify
            sys.exit(cmd_classify(args))
        elif args.command == "control":
            from .control import cmd_control
            sys.exit(cmd_control(args))
        elif args.command == "restrict":
            from .restrict import cmd_restrict
            sys.exit(cmd_restrict(args))
        elif args.command == "status":
            from .status import cmd_status
            sys.exit(cmd_status(args))
        else:
            parser.print_help()
            sys.exit(1)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        _print_error(str(e), args)
        sys.exit(1)
