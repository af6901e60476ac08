"""Capability checks deciding which create/update/delete affordances to offer.

Presentational only: nothing in the services consults these.
"""
from typing import Iterable, Optional

from fastapi import Header

SUPER_ADMIN = "*"


class Capabilities:
    def __init__(self, permissions: Iterable[tuple[str, str]] = (), is_super_admin: bool = False):
        self._permissions = {(action.lower(), subject.lower()) for action, subject in permissions}
        self.is_super_admin = is_super_admin

    @classmethod
    def from_header(cls, value: Optional[str]) -> "Capabilities":
        """Parse ``"create:Event,update:Event"``; ``"*"`` grants everything."""
        if not value:
            return cls()
        permissions = []
        for item in value.split(","):
            item = item.strip()
            if item == SUPER_ADMIN:
                return cls(is_super_admin=True)
            action, sep, subject = item.partition(":")
            if sep and action and subject:
                permissions.append((action, subject))
        return cls(permissions)

    def can(self, action: str, subject: str) -> bool:
        if self.is_super_admin:
            return True
        return (action.lower(), subject.lower()) in self._permissions


def get_capabilities(x_permissions: Optional[str] = Header(None)) -> Capabilities:
    return Capabilities.from_header(x_permissions)
