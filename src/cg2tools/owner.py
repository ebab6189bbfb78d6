# SPDX-License-Identifier: Apache-2.0
"""Parsing of chown-style owner specifications."""

from __future__ import annotations

import grp
import pwd


def _lookup_uid(name: str) -> tuple[int, int]:
    """Return ``(uid, primary gid)`` for a user name or numeric id."""
    try:
        entry = pwd.getpwuid(int(name)) if name.isdigit() else pwd.getpwnam(name)
    except KeyError:
        if name.isdigit():
            return int(name), -1
        raise ValueError(f"unknown user: {name!r}") from None
    return entry.pw_uid, entry.pw_gid


def _lookup_gid(name: str) -> int:
    if name.isdigit():
        return int(name)
    try:
        return grp.getgrnam(name).gr_gid
    except KeyError:
        raise ValueError(f"unknown group: {name!r}") from None


def parse_owner(spec: str) -> tuple[int, int]:
    """Parse an owner specification the way ``chown`` does.

    Accepted forms: ``USER``, ``USER:GROUP``, ``USER:`` (the user's login
    group) and ``:GROUP``.  Names and numeric ids are both accepted.

    Returns:
        ``(uid, gid)`` where ``-1`` means "leave unchanged".

    Raises:
        ValueError: If the spec is empty or names an unknown user or group.
    """
    user, sep, group = spec.partition(":")
    if not user and not group:
        raise ValueError(f"invalid owner: {spec!r}")
    uid, login_gid = _lookup_uid(user) if user else (-1, -1)
    if group:
        gid = _lookup_gid(group)
    elif sep:
        gid = login_gid
    else:
        gid = -1
    return uid, gid
