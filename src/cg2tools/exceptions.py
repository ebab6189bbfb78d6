# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for control group operations."""


class CGroupError(Exception):
    """Base exception for all cg2tools errors."""

    pass


class UnsupportedHierarchyError(CGroupError):
    """The system does not expose a unified (cgroups v2) hierarchy."""

    pass


class CGroupNotFoundError(CGroupError):
    """The control group does not exist on disk."""

    def __init__(self, cgroup) -> None:
        self.cgroup = cgroup
        super().__init__(f"Control group {cgroup} does not exist")


class CGroupPermissionError(CGroupError):
    """Writing a control file was refused by the kernel."""

    def __init__(self, cgroup, action: str, hint: str = "") -> None:
        self.cgroup = cgroup
        self.action = action
        message = f"Permission denied: cannot {action} in control group {cgroup}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)


class RestrictionUnavailableError(CGroupError):
    """The restriction file is missing, usually because its controller is not enabled."""

    def __init__(self, cgroup, key: str) -> None:
        self.cgroup = cgroup
        self.key = key
        super().__init__(f"Restriction {key} is unavailable for control group {cgroup}")


class ControllersUnavailableError(CGroupError):
    """Controllers are not granted anywhere up to the root of the hierarchy."""

    def __init__(self, controllers) -> None:
        self.controllers = list(controllers)
        super().__init__(
            "Some controllers are not available on this system: "
            + ", ".join(self.controllers)
        )


class CGroupIOError(CGroupError):
    """Any other I/O failure while operating on a control group."""

    def __init__(self, operation: str, cause: OSError, cgroup=None) -> None:
        self.cgroup = cgroup
        self.operation = operation
        super().__init__(f"While {operation}: {cause}")
