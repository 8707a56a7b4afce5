"""Unit tests for role tiers and principals."""

import pytest

from stratify.models.enums import UserRole
from stratify.models.principal import Principal
from stratify.models.roles import (
    AdminRole,
    AdminTier,
    ClientRole,
    ClientTier,
    is_admin_role,
    is_client_role,
    parse_role,
)


class TestParseRole:
    @pytest.mark.parametrize("role", list(UserRole))
    def test_wire_string_survives_parsing(self, role: UserRole):
        assert parse_role(role.value).wire == role.value

    def test_client_roles_map_to_client_tier(self):
        assert parse_role("client-manager") == ClientTier(ClientRole.MANAGER)
        assert parse_role("client-cxo") == ClientTier(ClientRole.CXO)

    def test_admin_roles_map_to_admin_tier(self):
        assert parse_role("admin-super") == AdminTier(AdminRole.SUPER)
        assert parse_role(UserRole.ADMIN_CONSULTANT) == AdminTier(AdminRole.CONSULTANT)

    def test_architect_exists_in_both_tiers(self):
        assert isinstance(parse_role("client-architect"), ClientTier)
        assert isinstance(parse_role("admin-architect"), AdminTier)

    @pytest.mark.parametrize("value", ["", "admin", "client-admin", "ADMIN-SUPER"])
    def test_unknown_role_is_rejected(self, value: str):
        with pytest.raises(ValueError, match="Unknown role"):
            parse_role(value)

    def test_tier_predicates(self):
        assert is_admin_role("admin-consultant")
        assert not is_admin_role("client-manager")
        assert is_client_role("client-manager")
        assert not is_client_role("admin-super")


class TestPrincipal:
    def _principal(self, role: UserRole, org_code: str, org_id: int | None = None) -> Principal:
        return Principal(
            id="u1",
            name="Test User",
            email="user@example.com",
            role=role,
            organization="Org",
            org_code=org_code,
            org_id=org_id,
        )

    def test_admin_under_admin_code_is_sentinel(self):
        principal = self._principal(UserRole.ADMIN_SUPER, "ADMIN")
        assert principal.is_admin
        assert principal.is_admin_sentinel

    def test_client_is_never_sentinel(self):
        principal = self._principal(UserRole.CLIENT_MANAGER, "ADMIN", 1)
        assert principal.is_client
        assert not principal.is_admin_sentinel

    def test_principal_is_immutable(self):
        principal = self._principal(UserRole.CLIENT_MANAGER, "TECH1", 1)
        with pytest.raises(Exception):
            principal.org_id = 2
