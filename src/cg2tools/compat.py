# SPDX-License-Identifier: Apache-2.0
"""Startup check that the host exposes a unified cgroup hierarchy."""

import logging
import platform
from pathlib import Path

from .exceptions import UnsupportedHierarchyError
from .fs._mount import PROC_MOUNTS, find_mount
from .fs.cgroupfs import CGROUP_BASE

logger = logging.getLogger(__name__)


def os_check(mount_root: Path = CGROUP_BASE, mounts_file: str = PROC_MOUNTS) -> None:
    """
    Verify that this is Linux with cgroup2 mounted at *mount_root*.

    Raises:
        UnsupportedHierarchyError: If the platform or the mount is unsuitable
    """
    system = platform.system()
    if system != "Linux":
        raise UnsupportedHierarchyError(
            f"Control groups are only available on Linux, not {system}"
        )
    try:
        mount = find_mount(mount_root, mounts_file=mounts_file)
    except OSError as e:
        raise UnsupportedHierarchyError(f"Cannot read {mounts_file}: {e}") from e
    if mount is None or mount.fstype != "cgroup2":
        found = mount.fstype if mount is not None else "nothing"
        raise UnsupportedHierarchyError(
            f"Expected a cgroup2 filesystem at {mount_root}, found {found}. "
            "Only the unified hierarchy (cgroups v2) is supported"
        )
    logger.debug("cgroup2 mounted at %s (%s)", mount.mountpoint, mount.options)
