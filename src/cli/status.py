# SPDX-License-Identifier: Apache-2.0
"""Implementation of 'cg2util status' command."""

from . import _print_result, _resolve_cgroup


def cmd_status(args) -> int:
    cgroup = _resolve_cgroup(args.cgroup)

    data = {
        "cgroup": str(cgroup),
        "location": str(cgroup.cgroupfs_path()),
        "exists": cgroup.exists(),
    }
    if data["exists"]:
        data["controllers"] = cgroup.controllers()
        data["subtree_control"] = cgroup.subtree_control()
        data["processes"] = cgroup.processes()

    _print_result(data, args)
    return 0 if data["exists"] else 1
