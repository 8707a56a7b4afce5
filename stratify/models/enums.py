"""Enumerations for assets, uploads, roles and assessments."""

from enum import Enum


class AssetType(str, Enum):
    """Closed set of asset kinds; each owns a fixed category list."""

    APPLICATION = "application"
    DATABASE = "database"
    INFRASTRUCTURE = "infrastructure"
    MIDDLEWARE = "middleware"
    CLOUD_SERVICE = "cloud-service"
    THIRD_PARTY_SERVICE = "third-party-service"


class AssetStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DEPRECATED = "deprecated"
    PLANNED = "planned"


class Criticality(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UploadStatus(str, Enum):
    """Bulk-import job lifecycle: pending -> processing -> completed | failed."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (UploadStatus.COMPLETED, UploadStatus.FAILED)


class UserRole(str, Enum):
    """Wire values of the six principal roles."""

    CLIENT_MANAGER = "client-manager"
    CLIENT_ARCHITECT = "client-architect"
    CLIENT_CXO = "client-cxo"
    ADMIN_CONSULTANT = "admin-consultant"
    ADMIN_ARCHITECT = "admin-architect"
    ADMIN_SUPER = "admin-super"


class Complexity(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AssessmentStatus(str, Enum):
    AVAILABLE = "available"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    DISABLED = "disabled"


class SessionState(str, Enum):
    """Identity manager lifecycle states."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"
