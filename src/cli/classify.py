# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'cg2util classify' command."""

from cg2tools.result import Outcome

from . import _print_outcome, _resolve_cgroup


def cmd_classify(args) -> int:
    cgroup = _resolve_cgroup(args.cgroup)
    outcome = Outcome("notice")
    if args.auto:
        outcome.merge(cgroup.create())
    for pid in args.pids:
        outcome.merge(cgroup.classify(pid))
    _print_outcome("classify", cgroup, outcome, args)
    return 0
