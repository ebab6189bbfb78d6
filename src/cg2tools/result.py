# SPDX-License-Identifier: Apache-2.0
"""Result dataclasses for control group operations."""

from dataclasses import dataclass, field
from typing import Literal

OutcomeStatus = Literal["success", "notice"]
NoticeLevel = Literal["notice", "warning"]


@dataclass
class Notice:
    """A human-readable message produced by an operation."""

    level: NoticeLevel
    message: str

    def __str__(self) -> str:
        return f"{self.level.capitalize()}: {self.message}"


@dataclass
class Outcome:
    """Outcome of a mutating operation that did not fail.

    ``status`` is ``"success"`` when the operation changed the hierarchy
    and ``"notice"`` when there was nothing to do.  Failures are raised as
    :class:`~cg2tools.exceptions.CGroupError` instead.
    """

    status: OutcomeStatus
    notices: list[Notice] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.status == "success"

    def add(self, level: NoticeLevel, message: str) -> None:
        self.notices.append(Notice(level, message))

    def merge(self, other: "Outcome") -> "Outcome":
        """Fold *other* into this outcome; any change makes the result a change."""
        if other.changed:
            self.status = "success"
        self.notices.extend(other.notices)
        return self

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "notices": [{"level": n.level, "message": n.message} for n in self.notices],
        }
