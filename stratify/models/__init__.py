"""Domain models."""

from stratify.models.asset import Asset, AssetDraft, AssetPatch
from stratify.models.enums import (
    AssessmentStatus,
    AssetStatus,
    AssetType,
    Complexity,
    Criticality,
    SessionState,
    UploadStatus,
    UserRole,
)
from stratify.models.organization import Organization
from stratify.models.portfolio import PAAssessment, PACategory, PACategoryWithAssessments
from stratify.models.principal import Principal, UserProfile
from stratify.models.roles import AdminRole, AdminTier, ClientRole, ClientTier, parse_role
from stratify.models.upload import (
    AssetUploadJob,
    ImportValidationResult,
    RowIssue,
    UploadResults,
)

__all__ = [
    "AdminRole",
    "AdminTier",
    "AssessmentStatus",
    "Asset",
    "AssetDraft",
    "AssetPatch",
    "AssetStatus",
    "AssetType",
    "AssetUploadJob",
    "ClientRole",
    "ClientTier",
    "Complexity",
    "Criticality",
    "ImportValidationResult",
    "Organization",
    "PAAssessment",
    "PACategory",
    "PACategoryWithAssessments",
    "Principal",
    "RowIssue",
    "SessionState",
    "UploadResults",
    "UploadStatus",
    "UserProfile",
    "UserRole",
    "parse_role",
]
