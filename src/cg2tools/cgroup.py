# SPDX-License-Identifier: Apache-2.0
"""CGroup: a handle on one node of the unified control group hierarchy."""

from __future__ import annotations

import logging
import os
from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from .core.base import CGroupFS
from .exceptions import (
    CGroupIOError,
    CGroupNotFoundError,
    CGroupPermissionError,
    ControllersUnavailableError,
    RestrictionUnavailableError,
    UnsupportedHierarchyError,
)
from .owner import parse_owner
from .result import Outcome

logger = logging.getLogger(__name__)

ROOT = PurePosixPath("/")

_DELEGATION_HINT = (
    "Moving a process requires write access to cgroup.procs of the common "
    "ancestor of the source and destination groups; run with elevated "
    "privileges or delegate that subtree to this user"
)

_THREADED_WARNING = (
    "Control group {} owns one or more processes. Enabling controllers in "
    "children of nonempty control groups can cause unexpected behavior. For "
    "example, a domain cgroup might turn into a threaded domain. See "
    "<https://www.kernel.org/doc/html/latest/admin-guide/cgroup-v2.html>"
)


def _default_fs() -> CGroupFS:
    from .fs.cgroupfs import SysfsCGroupFS

    return SysfsCGroupFS()


def _normalize(path: PurePosixPath) -> PurePosixPath:
    """Resolve ``..`` lexically, never climbing above the root."""
    parts: list[str] = []
    for part in path.parts[1:]:
        if part == "..":
            if parts:
                parts.pop()
        else:
            parts.append(part)
    return ROOT.joinpath(*parts)


class CGroup:
    """
    A control group that may or may not exist on disk.

    The handle is a plain value: an absolute path inside the cgroup
    hierarchy plus the filesystem backend used to reach it.  Every query
    goes to disk, since other processes may change the hierarchy at any
    time.

    Example:
        cg = CGroup.current()
        cg.append("workers")
        cg.create()
        cg.enable_controllers(["cpu", "memory"])
        cg.set_restriction("cpu.max", "50000 100000")

    Attributes:
        path: Absolute path inside the hierarchy (e.g. ``/app.service/workers``)
    """

    def __init__(self, path: str | PurePosixPath, fs: Optional[CGroupFS] = None):
        """
        Args:
            path: Absolute path inside the hierarchy
            fs: Filesystem backend, defaults to the cgroupfs at ``/sys/fs/cgroup``

        Raises:
            ValueError: If *path* is relative
        """
        path = PurePosixPath(path)
        if not path.is_absolute():
            raise ValueError(f"control group path must be absolute: {str(path)!r}")
        self._path = _normalize(path)
        self._fs = fs if fs is not None else _default_fs()

    @classmethod
    def current(cls, fs: Optional[CGroupFS] = None) -> "CGroup":
        """Return the control group of the calling process."""
        return cls.from_pid(os.getpid(), fs)

    @classmethod
    def from_pid(cls, pid: int, fs: Optional[CGroupFS] = None) -> "CGroup":
        """
        Return the control group of process *pid*.

        Raises:
            UnsupportedHierarchyError: If ``/proc/<pid>/cgroup`` is not in
                the unified ``0::<path>`` format (e.g. cgroups v1)
            CGroupIOError: If the file cannot be read
        """
        fs = fs if fs is not None else _default_fs()
        try:
            contents = fs.read_proc_cgroup(pid)
        except OSError as e:
            raise CGroupIOError(f"reading the control group of process {pid}", e) from e
        line = contents.strip()
        if not line.startswith("0::") or "\n" in line:
            raise UnsupportedHierarchyError(
                f"Unexpected format in /proc/{pid}/cgroup. "
                f"Are you using cgroups v1?\n\n{contents}"
            )
        return cls(line[len("0::"):] or "/", fs)

    @property
    def path(self) -> PurePosixPath:
        return self._path

    @property
    def fs(self) -> CGroupFS:
        return self._fs

    def copy(self) -> "CGroup":
        return CGroup(self._path, self._fs)

    def append(self, fragment: str | PurePosixPath) -> bool:
        """
        Move this handle to *fragment*, relative to the current path.

        An absolute fragment replaces the path; a relative one is joined
        onto it.

        Returns:
            True if the path changed.

        Example:
            cg = CGroup("/a/b/c")
            cg.append("d")   # True, now /a/b/c/d
            cg.append("/e")  # True, now /e
            cg.append("/e")  # False
            cg.append(".")   # False
        """
        new_path = _normalize(self._path / fragment)
        if new_path == self._path:
            return False
        self._path = new_path
        return True

    def parent(self) -> Optional["CGroup"]:
        """Return the parent group, or None for the root of the hierarchy."""
        if self._path == ROOT:
            return None
        return CGroup(self._path.parent, self._fs)

    def cgroupfs_path(self) -> Path:
        """Location of this group on the real filesystem."""
        return self._fs.location(self._path)

    def exists(self) -> bool:
        return self._fs.exists(self._path)

    def _require_exists(self) -> None:
        if not self.exists():
            raise CGroupNotFoundError(self)

    # ------------------------------------------------------------------
    # Single-group operations
    # ------------------------------------------------------------------

    def create(self) -> Outcome:
        """Create the group, and any missing ancestors, if it doesn't exist yet."""
        return self.create_and_chown(None)

    def create_and_chown(self, owner: Optional[str]) -> Outcome:
        """
        Create the group and, only if newly created, hand it to *owner*.

        Args:
            owner: ``chown``-style owner (``user``, ``user:group``,
                ``:group``) or None to keep the creator as owner

        Returns:
            A "notice" outcome if the group already existed, otherwise a
            "success" outcome.

        Raises:
            ValueError: If *owner* names an unknown user or group
            CGroupPermissionError: If creation or ownership change is refused
            CGroupIOError: On any other filesystem failure
        """
        ids = parse_owner(owner) if owner is not None else None
        if self.exists():
            outcome = Outcome("notice")
            outcome.add("notice", f"Control group {self} already exists")
            return outcome
        try:
            self._fs.make_dirs(self._path)
        except PermissionError as e:
            raise CGroupPermissionError(self, "create directory") from e
        except OSError as e:
            raise CGroupIOError(f"creating control group {self}", e, self) from e
        outcome = Outcome("success")
        outcome.add("notice", f"Created control group {self}")
        if ids is not None:
            try:
                self._fs.chown(self._path, *ids)
            except PermissionError as e:
                raise CGroupPermissionError(self, "change ownership") from e
            except OSError as e:
                raise CGroupIOError(f"changing owner of control group {self}", e, self) from e
            outcome.add("notice", f"Changed owner of control group {self} to {owner}")
        return outcome

    def classify(self, pid: int) -> Outcome:
        """
        Move process *pid* into this group.

        Raises:
            CGroupNotFoundError: If the group does not exist; nothing is written
            CGroupPermissionError: If the move is not permitted
            CGroupIOError: If the kernel rejects the move
        """
        self._require_exists()
        logger.debug("classifying %d into %s", pid, self)
        try:
            self._fs.append_procs(self._path, pid)
        except PermissionError as e:
            raise CGroupPermissionError(self, f"assign process {pid}", _DELEGATION_HINT) from e
        except OSError as e:
            raise CGroupIOError(f"assigning {pid} to control group {self}", e, self) from e
        outcome = Outcome("success")
        outcome.add("notice", f"Moved process {pid} to control group {self}")
        return outcome

    def classify_current(self) -> Outcome:
        """Move the calling process into this group."""
        return self.classify(os.getpid())

    def controllers(self) -> list[str]:
        """Controllers available in this group (``cgroup.controllers``)."""
        self._require_exists()
        try:
            return self._fs.read_controllers(self._path)
        except OSError as e:
            raise CGroupIOError(f"loading the controllers of {self}", e, self) from e

    def subtree_control(self) -> list[str]:
        """Controllers granted to children of this group (``cgroup.subtree_control``)."""
        self._require_exists()
        try:
            return self._fs.read_subtree_control(self._path)
        except OSError as e:
            raise CGroupIOError(f"loading the subtree control of {self}", e, self) from e

    def processes(self) -> list[int]:
        """Process IDs directly in this group."""
        self._require_exists()
        try:
            return self._fs.read_procs(self._path)
        except OSError as e:
            raise CGroupIOError(f"loading the processes of {self}", e, self) from e

    def has_processes(self) -> bool:
        return bool(self.processes())

    # ------------------------------------------------------------------
    # Hierarchy-aware controller enabling
    # ------------------------------------------------------------------

    def enable_controllers(self, requested: Iterable[str]) -> Outcome:
        """
        Make *requested* controllers available in this group.

        Controllers already available are skipped without looking at the
        ancestors.  The rest are granted by the parent, which first makes
        them available in itself, and so on up to the root.

        Raises:
            ControllersUnavailableError: If the root lacks some controllers
            CGroupPermissionError: If an ancestor's subtree_control is not writable
        """
        requested = list(requested)
        current = self.controllers()
        needed = [c for c in requested if c not in current]
        if not needed:
            outcome = Outcome("notice")
            if requested:
                outcome.add(
                    "notice",
                    f"Controllers already enabled in {self}: {', '.join(requested)}",
                )
            return outcome
        parent = self.parent()
        if parent is None:
            raise ControllersUnavailableError(needed)
        logger.debug("%s needs %s from %s", self, needed, parent)
        return parent.enable_subtree_control(needed)

    def enable_subtree_control(self, new_controllers: list[str]) -> Outcome:
        """
        Allow children of this group to use *new_controllers*.

        Writes one ``+name`` token per controller, stopping at the first
        permission failure.
        """
        outcome = Outcome("success")
        if self.has_processes():
            outcome.add("warning", _THREADED_WARNING.format(self))
        ancestors = self.enable_controllers(new_controllers)
        if ancestors.changed:
            outcome.merge(ancestors)
        for controller in new_controllers:
            try:
                self._fs.append_subtree_control(self._path, controller)
            except PermissionError as e:
                raise CGroupPermissionError(self, f'enable controller "{controller}"') from e
            except OSError as e:
                raise CGroupIOError(
                    f'enabling controller "{controller}" for subgroups of {self}', e, self
                ) from e
            outcome.add("notice", f'Enabled controller "{controller}" for subgroups of {self}')
        return outcome

    # ------------------------------------------------------------------
    # Restrictions
    # ------------------------------------------------------------------

    def enable_controller_for_restriction(self, key: str) -> Outcome:
        """Enable the controller a restriction key such as ``cpu.max`` belongs to."""
        controller = key.split(".", 1)[0]
        return self.enable_controllers([controller])

    def set_restriction(self, key: str, value: str) -> Outcome:
        """
        Write *value* verbatim to the control file *key* (e.g. ``cpu.max``).

        See <https://docs.kernel.org/admin-guide/cgroup-v2.html>

        Raises:
            CGroupNotFoundError: If the group does not exist
            CGroupPermissionError: If the file is not writable
            RestrictionUnavailableError: If the file does not exist,
                usually because its controller is not enabled
            CGroupIOError: If the kernel rejects the value
        """
        self._require_exists()
        try:
            self._fs.write_attribute(self._path, key, value)
        except PermissionError as e:
            raise CGroupPermissionError(self, f"set restriction {key}") from e
        except FileNotFoundError as e:
            raise RestrictionUnavailableError(self, key) from e
        except OSError as e:
            raise CGroupIOError(f"setting restriction {key} in control group {self}", e, self) from e
        outcome = Outcome("success")
        outcome.add("notice", f'Restriction {key}="{value}" set in control group {self}')
        return outcome

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CGroup):
            return NotImplemented
        return self._path == other._path

    def __hash__(self) -> int:
        return hash(self._path)

    def __str__(self) -> str:
        return str(self._path)

    def __repr__(self) -> str:
        return f"CGroup({str(self._path)!r})"
