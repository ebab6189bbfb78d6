# SPDX-License-Identifier: Apache-2.0
"""Access to the cgroup v2 hierarchy through the mounted cgroupfs."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath

from ..core.base import CGroupFS

logger = logging.getLogger(__name__)

CGROUP_BASE = Path("/sys/fs/cgroup")
PROC_BASE = Path("/proc")


class SysfsCGroupFS(CGroupFS):
    """
    The real cgroup filesystem mounted at ``/sys/fs/cgroup``.

    Control files are opened without ``O_CREAT``: cgroupfs never lets
    userspace create files, so a missing file must surface as
    ``FileNotFoundError`` rather than as a permission error.

    Args:
        mount_root: Where the unified hierarchy is mounted
        proc_root: Where procfs is mounted
    """

    def __init__(self, mount_root: Path = CGROUP_BASE, proc_root: Path = PROC_BASE):
        self._mount_root = Path(mount_root)
        self._proc_root = Path(proc_root)

    @property
    def mount_root(self) -> Path:
        return self._mount_root

    def location(self, path: PurePosixPath) -> Path:
        return self._mount_root / PurePosixPath(path).relative_to("/")

    def read_proc_cgroup(self, pid: int) -> str:
        return (self._proc_root / str(pid) / "cgroup").read_text()

    def exists(self, path: PurePosixPath) -> bool:
        return self.location(path).is_dir()

    def make_dirs(self, path: PurePosixPath) -> None:
        logger.debug("mkdir -p %s", self.location(path))
        self.location(path).mkdir(parents=True, exist_ok=True)

    def chown(self, path: PurePosixPath, uid: int, gid: int) -> None:
        top = self.location(path)
        logger.debug("chown -R %d:%d %s", uid, gid, top)
        os.chown(top, uid, gid)
        for dirpath, dirnames, filenames in os.walk(top):
            for name in dirnames + filenames:
                os.chown(os.path.join(dirpath, name), uid, gid)

    def read_controllers(self, path: PurePosixPath) -> list[str]:
        return self._read(path, "cgroup.controllers").split()

    def read_subtree_control(self, path: PurePosixPath) -> list[str]:
        return self._read(path, "cgroup.subtree_control").split()

    def read_procs(self, path: PurePosixPath) -> list[int]:
        return [int(line) for line in self._read(path, "cgroup.procs").split()]

    def append_procs(self, path: PurePosixPath, pid: int) -> None:
        self._write(path, "cgroup.procs", str(pid), os.O_APPEND)

    def append_subtree_control(self, path: PurePosixPath, controller: str) -> None:
        # The kernel parses each write separately; one token per write.
        self._write(path, "cgroup.subtree_control", f"+{controller}", os.O_APPEND)

    def write_attribute(self, path: PurePosixPath, key: str, value: str) -> None:
        self._write(path, key, value, os.O_TRUNC)

    def _read(self, path: PurePosixPath, name: str) -> str:
        return (self.location(path) / name).read_text()

    def _write(self, path: PurePosixPath, name: str, data: str, flags: int) -> None:
        target = self.location(path) / name
        logger.debug("write %r to %s", data, target)
        fd = os.open(target, os.O_WRONLY | flags)
        try:
            os.write(fd, data.encode())
        finally:
            os.close(fd)

    def __repr__(self) -> str:
        return f"SysfsCGroupFS(mount_root={self._mount_root!r})"
