# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'cg2util restrict' command."""

from cg2tools.result import Outcome

from . import _print_outcome, _resolve_cgroup


def cmd_restrict(args) -> int:
    cgroup = _resolve_cgroup(args.cgroup)
    outcome = Outcome("notice")
    if args.auto:
        outcome.merge(cgroup.create())
    for key, value in args.restrictions:
        if args.auto:
            outcome.merge(cgroup.enable_controller_for_restriction(key))
        outcome.merge(cgroup.set_restriction(key, value))
    _print_outcome("restrict", cgroup, outcome, args)
    return 0
