# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'cg2util create' command."""

from . import _print_outcome, _resolve_cgroup


def cmd_create(args) -> int:
    cgroup = _resolve_cgroup(args.cgroup)
    outcome = cgroup.create_and_chown(args.user)
    _print_outcome("create", cgroup, outcome, args)
    return 0
