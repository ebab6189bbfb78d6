# SPDX-License-Identifier: Apache-2.0
"""Mount information parsing from /proc/mounts."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, List

PROC_MOUNTS = "/proc/mounts"


@dataclass
class MountInfo:
    """Information about a mounted filesystem."""

    mountpoint: Path
    source: str
    fstype: str
    options: str


def parse_mounts(path: str = PROC_MOUNTS) -> List[MountInfo]:
    """
    Parse /proc/mounts and return list of MountInfo.

    Args:
        path: Path to mounts file (default /proc/mounts)

    Returns:
        List of MountInfo for all mounts
    """
    mounts = []
    with open(path) as f:
        for line in f:
            parts = line.strip().split()
            if len(parts) >= 4:
                mounts.append(
                    MountInfo(
                        source=parts[0],
                        mountpoint=Path(parts[1]),
                        fstype=parts[2],
                        options=parts[3],
                    )
                )
    return mounts


def find_mount(
    mountpoint: Path, fstype: Optional[str] = None, mounts_file: str = PROC_MOUNTS
) -> Optional[MountInfo]:
    """
    Find mount info for a specific mountpoint.

    The last matching entry wins, since later mounts shadow earlier ones.

    Args:
        mountpoint: Path to the mountpoint
        fstype: Optional filesystem type filter
        mounts_file: Path to mounts file

    Returns:
        MountInfo if found, None otherwise
    """
    found = None
    for mount in parse_mounts(mounts_file):
        if mount.mountpoint == Path(mountpoint):
            if fstype is None or mount.fstype == fstype:
                found = mount
    return found
