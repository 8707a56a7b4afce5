"""Organization scope resolution.

Decides which ``org_id`` every asset list/search/create/update call must be
filtered by. Callers resolve it on every call; the selection can change
between two calls of the same session.
"""

from __future__ import annotations

from stratify.models.organization import Organization
from stratify.models.principal import Principal
from stratify.models.roles import ADMIN_ORG_CODE, AdminTier, ClientTier


def resolve_org_scope(
    principal: Principal | None,
    selected: Organization | None,
) -> int | None:
    """Return the org_id to scope queries to.

    An admin signed in under the ADMIN code who has selected an organization
    is impersonating it, so the selection wins. Everyone else is scoped to
    their own ``org_id``, which for an unscoped admin is None.

    None means "do not filter", never "match nothing".
    """
    if principal is None:
        return None
    match principal.tier:
        case AdminTier() if principal.org_code == ADMIN_ORG_CODE and selected is not None:
            return selected.org_id
        case AdminTier() | ClientTier():
            return principal.org_id
