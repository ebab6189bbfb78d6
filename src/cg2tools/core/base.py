# SPDX-License-Identifier: Apache-2.0
"""Abstract capability interface over the cgroup hierarchy."""

from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath


class CGroupFS(ABC):
    """
    Narrow view of the cgroup pseudo-filesystem.

    Every method takes the cgroup's path inside the hierarchy (e.g.
    ``/system.slice/app.service``), never a real filesystem path.
    Implementations raise plain ``OSError`` subclasses
    (``PermissionError``, ``FileNotFoundError``, ...); translating them
    into :mod:`cg2tools.exceptions` is the caller's job.

    Nothing is cached: the hierarchy is shared state that other processes
    change at any time.
    """

    @abstractmethod
    def location(self, path: PurePosixPath) -> Path:
        """
        Map a hierarchy path to its on-disk location.

        Pure: never touches the filesystem and never fails.
        """
        pass

    @abstractmethod
    def read_proc_cgroup(self, pid: int) -> str:
        """
        Return the raw contents of ``/proc/<pid>/cgroup``.

        Raises:
            OSError: If the file cannot be read
        """
        pass

    @abstractmethod
    def exists(self, path: PurePosixPath) -> bool:
        """Whether the cgroup directory exists right now."""
        pass

    @abstractmethod
    def make_dirs(self, path: PurePosixPath) -> None:
        """
        Create the cgroup directory along with any missing ancestors.

        Raises:
            OSError: If a directory cannot be created
        """
        pass

    @abstractmethod
    def chown(self, path: PurePosixPath, uid: int, gid: int) -> None:
        """
        Recursively change ownership of the cgroup directory and its files.

        ``-1`` leaves the corresponding id unchanged.
        """
        pass

    @abstractmethod
    def read_controllers(self, path: PurePosixPath) -> list[str]:
        """Return the names listed in ``cgroup.controllers``, in file order."""
        pass

    @abstractmethod
    def read_subtree_control(self, path: PurePosixPath) -> list[str]:
        """Return the names listed in ``cgroup.subtree_control``, in file order."""
        pass

    @abstractmethod
    def read_procs(self, path: PurePosixPath) -> list[int]:
        """Return the process IDs listed in ``cgroup.procs``."""
        pass

    @abstractmethod
    def append_procs(self, path: PurePosixPath, pid: int) -> None:
        """
        Move a process into the cgroup by appending its ID to ``cgroup.procs``.

        Raises:
            PermissionError: If the caller may not move the process
            OSError: If the kernel rejects the move
        """
        pass

    @abstractmethod
    def append_subtree_control(self, path: PurePosixPath, controller: str) -> None:
        """
        Grant a controller to the children of the cgroup.

        Writes ``+<controller>`` to ``cgroup.subtree_control`` as a single
        write.
        """
        pass

    @abstractmethod
    def write_attribute(self, path: PurePosixPath, key: str, value: str) -> None:
        """
        Write *value* verbatim to the control file named *key*.

        Raises:
            FileNotFoundError: If the control file does not exist
            PermissionError: If the file is not writable
        """
        pass
