"""Portfolio-analysis assessment catalog service."""

from __future__ import annotations

import logging

from pydantic import BaseModel

from stratify.core.errors import BackendError, ConflictError, NotFoundError
from stratify.core.structured_logging import log_json
from stratify.models.enums import AssessmentStatus, Complexity
from stratify.models.portfolio import PAAssessment, PACategory, PACategoryWithAssessments
from stratify.storage.base import PA_ASSESSMENTS, PA_CATEGORIES, RecordQuery, RecordStore

logger = logging.getLogger(__name__)


class CategoryCreate(BaseModel):
    category_id: str
    title: str
    description: str = ""
    icon: str = ""
    color: str = ""
    sort_order: int = 0
    is_active: bool = True


class AssessmentCreate(BaseModel):
    assessment_id: str
    category_id: str
    name: str
    description: str = ""
    duration: str = ""
    complexity: Complexity = Complexity.MEDIUM
    status: AssessmentStatus = AssessmentStatus.AVAILABLE
    sort_order: int = 0
    is_active: bool = True


class PortfolioAnalysisService:
    """Serves the active assessment catalog, ordered by ``sort_order``."""

    def __init__(self, store: RecordStore):
        self.store = store

    async def get_categories(self) -> list[PACategory]:
        try:
            rows = await self.store.select(
                PA_CATEGORIES,
                RecordQuery(equals={"is_active": True}, order_by=("sort_order",)),
            )
        except BackendError as exc:
            raise exc.wrap("fetch categories") from exc
        return [PACategory.from_row(row) for row in rows]

    async def get_assessments_by_category(self, category_id: str) -> list[PAAssessment]:
        try:
            rows = await self.store.select(
                PA_ASSESSMENTS,
                RecordQuery(
                    equals={"category_id": category_id, "is_active": True},
                    order_by=("sort_order",),
                ),
            )
        except BackendError as exc:
            raise exc.wrap("fetch assessments") from exc
        return [PAAssessment.from_row(row) for row in rows]

    async def get_all_assessments(self) -> list[PAAssessment]:
        try:
            rows = await self.store.select(
                PA_ASSESSMENTS,
                RecordQuery(equals={"is_active": True}, order_by=("category_id", "sort_order")),
            )
        except BackendError as exc:
            raise exc.wrap("fetch assessments") from exc
        return [PAAssessment.from_row(row) for row in rows]

    async def get_categories_with_assessments(self) -> list[PACategoryWithAssessments]:
        """Categories in display order, each carrying its assessments."""
        categories = await self.get_categories()
        assessments = await self.get_all_assessments()
        grouped: dict[str, list[PAAssessment]] = {}
        for assessment in assessments:
            grouped.setdefault(assessment.category_id, []).append(assessment)
        return [
            PACategoryWithAssessments(
                **category.model_dump(),
                assessments=grouped.get(category.category_id, []),
            )
            for category in categories
        ]

    async def get_assessment(self, assessment_id: str) -> PAAssessment | None:
        try:
            row = await self.store.select_one(
                PA_ASSESSMENTS, assessment_id=assessment_id, is_active=True
            )
        except BackendError as exc:
            raise exc.wrap("fetch assessment") from exc
        return PAAssessment.from_row(row) if row else None

    async def search(
        self, query: str = "", complexity: Complexity | None = None
    ) -> list[PAAssessment]:
        """Active assessments whose name or description contains ``query``."""
        text = (query or "").strip()
        equals: dict[str, object] = {"is_active": True}
        if complexity is not None:
            equals["complexity"] = complexity.value
        try:
            rows = await self.store.select(
                PA_ASSESSMENTS,
                RecordQuery(
                    equals=equals,
                    search_text=text or None,
                    search_columns=("name", "description"),
                    order_by=("category_id", "sort_order"),
                ),
            )
        except BackendError as exc:
            raise exc.wrap("fetch assessments") from exc
        return [PAAssessment.from_row(row) for row in rows]

    async def create_category(self, data: CategoryCreate) -> PACategory:
        if await self.store.select_one(PA_CATEGORIES, category_id=data.category_id):
            raise ConflictError(f"Category '{data.category_id}' already exists")
        try:
            row = await self.store.insert(PA_CATEGORIES, data.model_dump(mode="json"))
        except BackendError as exc:
            log_json(logger, logging.ERROR, "category_create_failed", error=exc.message)
            raise exc.wrap("create category") from exc
        log_json(logger, logging.INFO, "category_created", category_id=data.category_id)
        return PACategory.from_row(row)

    async def create_assessment(self, data: AssessmentCreate) -> PAAssessment:
        if not await self.store.select_one(PA_CATEGORIES, category_id=data.category_id):
            raise NotFoundError(f"Category '{data.category_id}' not found")
        if await self.store.select_one(PA_ASSESSMENTS, assessment_id=data.assessment_id):
            raise ConflictError(f"Assessment '{data.assessment_id}' already exists")
        try:
            row = await self.store.insert(PA_ASSESSMENTS, data.model_dump(mode="json"))
        except BackendError as exc:
            log_json(logger, logging.ERROR, "assessment_create_failed", error=exc.message)
            raise exc.wrap("create assessment") from exc
        log_json(logger, logging.INFO, "assessment_created", assessment_id=data.assessment_id)
        return PAAssessment.from_row(row)
