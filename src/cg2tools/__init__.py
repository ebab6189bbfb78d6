# SPDX-License-Identifier: Apache-2.0
"""
cg2tools - lightweight control of Unified Control Groups (cgroups v2).

Designed for services that have been delegated a subtree of the cgroup
hierarchy (e.g. ``Delegate=yes`` in a systemd unit) and want to partition
and restrict their own descendants.

Example:
    from cg2tools import CGroup

    cg = CGroup.current()
    cg.append("workers")
    cg.create()
    cg.enable_controllers(["cpu"])
    cg.set_restriction("cpu.weight", "50")

Two command-line tools are built on top of this package:

- ``cg2util`` for creating, configuring and classifying into cgroups.
- ``cg2exec`` for running a command in a specific cgroup.
"""

# Exceptions are lightweight and always available.
from .exceptions import (
    CGroupError,
    UnsupportedHierarchyError,
    CGroupNotFoundError,
    CGroupPermissionError,
    RestrictionUnavailableError,
    ControllersUnavailableError,
    CGroupIOError,
)

__all__ = [
    # Core
    "CGroup",
    "CGroupFS",
    "SysfsCGroupFS",
    # Results
    "Outcome",
    "Notice",
    # Exceptions
    "CGroupError",
    "UnsupportedHierarchyError",
    "CGroupNotFoundError",
    "CGroupPermissionError",
    "RestrictionUnavailableError",
    "ControllersUnavailableError",
    "CGroupIOError",
]

__version__ = "0.1.0"

_LAZY_IMPORTS = {
    "CGroup": ".cgroup",
    "CGroupFS": ".core.base",
    "SysfsCGroupFS": ".fs.cgroupfs",
    "Outcome": ".result",
    "Notice": ".result",
}


def __getattr__(name: str):
    if name in _LAZY_IMPORTS:
        import importlib
        module = importlib.import_module(_LAZY_IMPORTS[name], __name__)
        value = getattr(module, name)
        # Cache on the module so __getattr__ isn't called again.
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
