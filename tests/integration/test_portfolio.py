"""Integration tests for the assessment catalog service."""

import pytest

from stratify.core.errors import ConflictError, NotFoundError
from stratify.models.enums import Complexity
from stratify.services.dashboard import DashboardSession
from stratify.services.portfolio_service import AssessmentCreate, CategoryCreate


@pytest.mark.asyncio
class TestPortfolioAnalysisService:
    async def test_categories_in_display_order(self, dashboard: DashboardSession):
        categories = await dashboard.portfolio.get_categories()

        assert len(categories) == 6
        assert categories[0].category_id == "strategy-enterprise-arch"

    async def test_categories_carry_their_assessments(self, dashboard: DashboardSession):
        categories = await dashboard.portfolio.get_categories_with_assessments()

        assert sum(len(category.assessments) for category in categories) == 27
        it_optimization = next(c for c in categories if c.category_id == "it-optimization")
        assert [a.assessment_id for a in it_optimization.assessments] == [
            "application-portfolio-rationalization",
            "solution-architecture",
            "enterprise-integration-soa",
        ]

    async def test_assessment_lookup(self, dashboard: DashboardSession):
        assessment = await dashboard.portfolio.get_assessment("cloud-readiness")

        assert assessment.category_id == "digital-ecosystem"
        assert await dashboard.portfolio.get_assessment("does-not-exist") is None

    async def test_search_by_text_and_complexity(self, dashboard: DashboardSession):
        results = await dashboard.portfolio.search("portfolio")
        high = await dashboard.portfolio.search("", Complexity.HIGH)

        assert "application-portfolio-rationalization" in {a.assessment_id for a in results}
        assert high
        assert all(a.complexity is Complexity.HIGH for a in high)

    async def test_inactive_assessments_are_hidden(self, dashboard: DashboardSession):
        await dashboard.store.update("pa_assessments", {"assessment_id": "devsecops"}, {"is_active": False})

        assert await dashboard.portfolio.get_assessment("devsecops") is None
        assert len(await dashboard.portfolio.get_all_assessments()) == 26

    async def test_create_assessment(self, dashboard: DashboardSession):
        created = await dashboard.portfolio.create_assessment(
            AssessmentCreate(
                assessment_id="finops-maturity",
                category_id="it-optimization",
                name="FinOps Maturity",
                complexity=Complexity.LOW,
                sort_order=4,
            )
        )

        assert created.assessment_id == "finops-maturity"
        assessments = await dashboard.portfolio.get_assessments_by_category("it-optimization")
        assert assessments[-1].assessment_id == "finops-maturity"

    async def test_create_assessment_in_unknown_category(self, dashboard: DashboardSession):
        with pytest.raises(NotFoundError):
            await dashboard.portfolio.create_assessment(
                AssessmentCreate(assessment_id="x", category_id="nope", name="X")
            )

    async def test_duplicate_ids(self, dashboard: DashboardSession):
        with pytest.raises(ConflictError):
            await dashboard.portfolio.create_category(
                CategoryCreate(category_id="digital-ecosystem", title="Again")
            )
        with pytest.raises(ConflictError):
            await dashboard.portfolio.create_assessment(
                AssessmentCreate(assessment_id="devsecops", category_id="specialized-assessments", name="Again")
            )
