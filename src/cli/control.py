# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'cg2util control' command."""

from cg2tools import CGroup
from cg2tools.result import Outcome

from . import _print_outcome, _print_result


def cmd_control(args) -> int:
    current = CGroup.current()

    if args.inherit is not None:
        source = current.copy()
        source.append(args.inherit)
        # Even with --auto, the group we inherit from is never created.
        requested = source.controllers()
    else:
        requested = args.controllers

    cgroup = current
    cgroup.append(args.cgroup)
    outcome = Outcome("notice")
    if args.auto:
        outcome.merge(cgroup.create())

    if args.inherit is None and not requested:
        data = {"cgroup": str(cgroup), "controllers": cgroup.controllers()}
        if getattr(args, "json", False):
            data["notices"] = outcome.to_dict()["notices"]
        else:
            for notice in outcome.notices:
                print(notice)
        _print_result(data, args)
        return 0

    outcome.merge(cgroup.enable_controllers(requested))
    _print_outcome("control", cgroup, outcome, args)
    return 0
