"""Client onboarding: a new organization together with its first CXO."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from pydantic import BaseModel

from stratify.core.errors import OnboardingError, ServiceError
from stratify.core.structured_logging import log_json
from stratify.models.enums import UserRole
from stratify.models.organization import Organization
from stratify.models.principal import UserProfile
from stratify.services.organization_service import (
    OrganizationCreate,
    OrganizationService,
    validate_org_code,
)
from stratify.services.user_service import UserCreate, UserService

logger = logging.getLogger(__name__)

OnboardedCallback = Callable[[Organization, UserProfile], Awaitable[None] | None]


class OnboardingRequest(BaseModel):
    org_code: str
    org_name: str
    description: str | None = None
    sector: str | None = None
    remarks: str | None = None
    cxo_name: str
    cxo_email: str
    cxo_password: str


class OnboardingResult(BaseModel):
    organization: Organization
    cxo: UserProfile


class OnboardingService:
    """Creates the organization, then its CXO account.

    The two writes are not transactional. If the CXO cannot be created the
    organization stays behind without one; this is surfaced as
    :class:`OnboardingError` (carrying the organization) and logged as
    ``onboarding_orphaned_org`` so it can be cleaned up or retried.
    """

    def __init__(self, organizations: OrganizationService, users: UserService):
        self.organizations = organizations
        self.users = users

    async def onboard(self, request: OnboardingRequest) -> OnboardingResult:
        """Validate the code, create the organization, then the CXO.

        Raises:
            ValidationError: If the code is not 5 characters (nothing is written)
            ConflictError: If the code is taken (nothing is written)
            OnboardingError: If the organization was created but the CXO was not
        """
        validate_org_code(request.org_code)
        organization = await self.organizations.create(
            OrganizationCreate(
                org_code=request.org_code,
                org_name=request.org_name,
                description=request.description,
                sector=request.sector,
                remarks=request.remarks,
            )
        )

        try:
            cxo = await self.users.create(
                UserCreate(
                    email=request.cxo_email,
                    password=request.cxo_password,
                    name=request.cxo_name,
                    role=UserRole.CLIENT_CXO,
                    org_id=organization.org_id,
                )
            )
        except ServiceError as exc:
            log_json(
                logger,
                logging.ERROR,
                "onboarding_orphaned_org",
                org_id=organization.org_id,
                org_code=organization.org_code,
                error=exc.message,
            )
            raise OnboardingError(
                f"Organization {organization.org_code} was created but its CXO account "
                f"could not be: {exc.message}",
                organization,
            ) from exc

        log_json(
            logger,
            logging.INFO,
            "organization_onboarded",
            org_id=organization.org_id,
            cxo_user_id=cxo.id,
        )
        return OnboardingResult(organization=organization, cxo=cxo)
