"""Role tiers.

A role is one of two disjoint tiers, each carrying its own sub-role:

    ClientTier(ClientRole.MANAGER)  <->  "client-manager"
    AdminTier(AdminRole.SUPER)      <->  "admin-super"

Consumers dispatch with ``match tier: case ClientTier(): ... case AdminTier(): ...``
rather than inspecting role strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from stratify.models.enums import UserRole

# Organization code carried by every admin-tier principal.
ADMIN_ORG_CODE = "ADMIN"


class ClientRole(str, Enum):
    MANAGER = "manager"
    ARCHITECT = "architect"
    CXO = "cxo"


class AdminRole(str, Enum):
    CONSULTANT = "consultant"
    ARCHITECT = "architect"
    SUPER = "super"


@dataclass(frozen=True)
class ClientTier:
    """Organization-bound account."""

    sub_role: ClientRole

    @property
    def wire(self) -> str:
        return f"client-{self.sub_role.value}"


@dataclass(frozen=True)
class AdminTier:
    """Global (cross-tenant) account."""

    sub_role: AdminRole

    @property
    def wire(self) -> str:
        return f"admin-{self.sub_role.value}"


RoleTier = Union[ClientTier, AdminTier]

_TIERS: dict[UserRole, RoleTier] = {
    UserRole.CLIENT_MANAGER: ClientTier(ClientRole.MANAGER),
    UserRole.CLIENT_ARCHITECT: ClientTier(ClientRole.ARCHITECT),
    UserRole.CLIENT_CXO: ClientTier(ClientRole.CXO),
    UserRole.ADMIN_CONSULTANT: AdminTier(AdminRole.CONSULTANT),
    UserRole.ADMIN_ARCHITECT: AdminTier(AdminRole.ARCHITECT),
    UserRole.ADMIN_SUPER: AdminTier(AdminRole.SUPER),
}


def parse_role(value: str | UserRole) -> RoleTier:
    """Map a wire role string to its tier.

    Args:
        value: One of the six role strings (or a UserRole)

    Returns:
        The ClientTier or AdminTier for the role

    Raises:
        ValueError: If the value is not one of the six roles
    """
    try:
        role = UserRole(value)
    except ValueError:
        raise ValueError(f"Unknown role: {value!r}") from None
    return _TIERS[role]


def is_admin_role(value: str | UserRole) -> bool:
    return isinstance(parse_role(value), AdminTier)


def is_client_role(value: str | UserRole) -> bool:
    return isinstance(parse_role(value), ClientTier)
