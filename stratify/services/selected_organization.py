"""Organization an admin is currently operating against."""

from __future__ import annotations

from stratify.models.organization import Organization


class SelectedOrganization:
    """Explicit holder, one per dashboard session."""

    def __init__(self) -> None:
        self._organization: Organization | None = None

    @property
    def organization(self) -> Organization | None:
        return self._organization

    @property
    def org_id(self) -> int | None:
        return self._organization.org_id if self._organization else None

    def select(self, organization: Organization) -> None:
        self._organization = organization

    def clear(self) -> None:
        self._organization = None

    def __bool__(self) -> bool:
        return self._organization is not None
