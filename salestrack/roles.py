"""Role vocabulary.

Role: the three roles a user can hold; assigned at registration.
PRIVILEGED_ROLES: roles allowed to manage organization goals and team data.
"""

from __future__ import annotations

from typing import Literal, cast

Role = Literal["sales_rep", "manager", "admin"]

ROLES: tuple[Role, ...] = ("sales_rep", "manager", "admin")
PRIVILEGED_ROLES: tuple[Role, ...] = ("manager", "admin")
DEFAULT_ROLE: Role = "sales_rep"


def is_role(value: object) -> bool:
    return isinstance(value, str) and value in ROLES


def is_privileged(role: str) -> bool:
    return cast(Role, role) in PRIVILEGED_ROLES


__all__ = [
    "Role",
    "ROLES",
    "PRIVILEGED_ROLES",
    "DEFAULT_ROLE",
    "is_role",
    "is_privileged",
]
