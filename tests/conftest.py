# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures: an in-memory cgroup hierarchy."""

import errno
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

import pytest

from cg2tools.core.base import CGroupFS

ROOT = PurePosixPath("/")


@dataclass
class FakeGroup:
    subtree_control: list = field(default_factory=list)
    procs: list = field(default_factory=list)
    attributes: dict = field(default_factory=dict)


class FakeCGroupFS(CGroupFS):
    """In-memory hierarchy following the kernel's subtree_control rules.

    A group's available controllers are its parent's ``subtree_control``;
    the root's are fixed.  Writing ``+name`` to ``subtree_control`` fails
    with ENOENT unless ``name`` is available in the group itself.
    """

    def __init__(self, root_controllers=("cpu", "memory", "io", "pids")):
        self.root_controllers = list(root_controllers)
        self.groups = {ROOT: FakeGroup()}
        self.proc_cgroup = {}
        self.writes = []
        self.chowned = []
        self.denied = set()

    def add_group(self, path, subtree_control=(), procs=()):
        path = PurePosixPath(path)
        self.make_dirs(path)
        self.groups[path].subtree_control = list(subtree_control)
        self.groups[path].procs = list(procs)
        return path

    def deny(self, path, name):
        self.denied.add((PurePosixPath(path), name))

    def _check(self, path, name):
        if path not in self.groups:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", name)
        if (path, name) in self.denied:
            raise PermissionError(errno.EACCES, "Permission denied", name)

    def location(self, path):
        return Path("/sys/fs/cgroup") / PurePosixPath(path).relative_to("/")

    def read_proc_cgroup(self, pid):
        if pid in self.proc_cgroup:
            return self.proc_cgroup[pid]
        for path, group in self.groups.items():
            if pid in group.procs:
                return f"0::{path}\n"
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", f"/proc/{pid}/cgroup")

    def exists(self, path):
        return PurePosixPath(path) in self.groups

    def make_dirs(self, path):
        path = PurePosixPath(path)
        for ancestor in reversed([path, *path.parents]):
            if (ancestor, "mkdir") in self.denied:
                raise PermissionError(errno.EACCES, "Permission denied", str(ancestor))
            self.groups.setdefault(ancestor, FakeGroup())

    def chown(self, path, uid, gid):
        self.chowned.append((PurePosixPath(path), uid, gid))

    def read_controllers(self, path):
        path = PurePosixPath(path)
        self._check(path, "cgroup.controllers")
        if path == ROOT:
            return list(self.root_controllers)
        return list(self.groups[path.parent].subtree_control)

    def read_subtree_control(self, path):
        path = PurePosixPath(path)
        self._check(path, "cgroup.subtree_control")
        return list(self.groups[path].subtree_control)

    def read_procs(self, path):
        path = PurePosixPath(path)
        self._check(path, "cgroup.procs")
        return list(self.groups[path].procs)

    def append_procs(self, path, pid):
        path = PurePosixPath(path)
        self._check(path, "cgroup.procs")
        self.writes.append((path, "cgroup.procs", str(pid)))
        for group in self.groups.values():
            if pid in group.procs:
                group.procs.remove(pid)
        self.groups[path].procs.append(pid)

    def append_subtree_control(self, path, controller):
        path = PurePosixPath(path)
        self._check(path, "cgroup.subtree_control")
        if controller not in self.read_controllers(path):
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", "cgroup.subtree_control")
        self.writes.append((path, "cgroup.subtree_control", f"+{controller}"))
        if controller not in self.groups[path].subtree_control:
            self.groups[path].subtree_control.append(controller)

    def write_attribute(self, path, key, value):
        path = PurePosixPath(path)
        self._check(path, key)
        if key.split(".", 1)[0] not in self.read_controllers(path):
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", key)
        self.writes.append((path, key, value))
        self.groups[path].attributes[key] = value


@pytest.fixture
def fake_fs():
    return FakeCGroupFS()
