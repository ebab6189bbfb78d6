#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
"""
Example: split a delegated service into a supervisor group and a
CPU-capped worker group.

A cgroup with processes cannot hand controllers to its children without
risk, so the supervisor (this process) first moves itself into a leaf
group, then the workers get their own limited group.

Usage (inside a unit with Delegate=yes):
    python delegated_workers.py sleep 60
"""

import subprocess
import sys

from cg2tools import CGroup, CGroupError


def main():
    if len(sys.argv) < 2:
        print(f"usage: {sys.argv[0]} CMD [ARGS...]", file=sys.stderr)
        return 2

    service = CGroup.current()

    supervisor = service.copy()
    supervisor.append("supervisor")
    workers = service.copy()
    workers.append("workers")

    try:
        for outcome in (
            supervisor.create(),
            supervisor.classify_current(),
            workers.create(),
            workers.enable_controllers(["cpu", "memory"]),
            workers.set_restriction("cpu.max", "50000 100000"),
            workers.set_restriction("memory.high", "512M"),
        ):
            for notice in outcome.notices:
                print(notice)
    except CGroupError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    proc = subprocess.Popen(sys.argv[1:])
    try:
        for notice in workers.classify(proc.pid).notices:
            print(notice)
    except CGroupError as e:
        print(f"error: {e}", file=sys.stderr)
        proc.kill()
        proc.wait()
        return 1
    return proc.wait()


if __name__ == "__main__":
    sys.exit(main())
