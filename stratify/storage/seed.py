"""Demo data for running without a backend."""

from __future__ import annotations

from typing import Any

from stratify.core import portfolio_catalog
from stratify.models.enums import UserRole
from stratify.models.roles import ADMIN_ORG_CODE

ORGANIZATIONS: list[dict[str, Any]] = [
    {
        "org_id": 1,
        "org_code": "TECH1",
        "org_name": "TechCorp Inc.",
        "description": "Enterprise software and services provider",
        "sector": "Technology",
        "remarks": "Pilot client",
        "created_at": "2024-01-01T09:00:00+00:00",
        "updated_at": "2024-01-01T09:00:00+00:00",
    },
    {
        "org_id": 2,
        "org_code": "FFITS",
        "org_name": "Future Focus IT Solutions",
        "description": "Managed IT services for mid-market companies",
        "sector": "IT Services",
        "remarks": "Onboarded after discovery workshop",
        "created_at": "2024-01-05T09:00:00+00:00",
        "updated_at": "2024-01-05T09:00:00+00:00",
    },
    {
        "org_id": 3,
        "org_code": "FIN01",
        "org_name": "FinanceCorp",
        "description": "Regional retail bank",
        "sector": "Financial Services",
        "remarks": "Regulated environment",
        "created_at": "2024-01-08T09:00:00+00:00",
        "updated_at": "2024-01-08T09:00:00+00:00",
    },
]

ADMIN_USERS: list[dict[str, Any]] = [
    {
        "id": "3",
        "name": "Mike Chen",
        "email": "mike@stratifyit.ai",
        "role": UserRole.ADMIN_CONSULTANT.value,
        "created_at": "2024-01-10T09:15:00+00:00",
        "updated_at": "2024-01-10T09:15:00+00:00",
    },
    {
        "id": "4",
        "name": "Lisa Rodriguez",
        "email": "lisa@stratifyit.ai",
        "role": UserRole.ADMIN_ARCHITECT.value,
        "created_at": "2024-01-12T11:45:00+00:00",
        "updated_at": "2024-01-12T11:45:00+00:00",
    },
    {
        "id": "5",
        "name": "Dana Whitfield",
        "email": "dana@stratifyit.ai",
        "role": UserRole.ADMIN_SUPER.value,
        "created_at": "2024-01-02T08:00:00+00:00",
        "updated_at": "2024-01-02T08:00:00+00:00",
    },
]

CLIENT_USERS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "John Smith",
        "email": "john@company.com",
        "role": UserRole.CLIENT_MANAGER.value,
        "org_id": 1,
        "created_at": "2024-01-15T10:00:00+00:00",
        "updated_at": "2024-01-15T10:00:00+00:00",
    },
    {
        "id": "2",
        "name": "Sarah Johnson",
        "email": "sarah@company.com",
        "role": UserRole.CLIENT_ARCHITECT.value,
        "org_id": 1,
        "created_at": "2024-01-16T14:30:00+00:00",
        "updated_at": "2024-01-16T14:30:00+00:00",
    },
    {
        "id": "6",
        "name": "Manasvee Dixit",
        "email": "manasvee@futurefocus.io",
        "role": UserRole.CLIENT_CXO.value,
        "org_id": 2,
        "created_at": "2024-01-18T16:20:00+00:00",
        "updated_at": "2024-01-18T16:20:00+00:00",
    },
]

ASSETS: list[dict[str, Any]] = [
    {
        "id": "1",
        "name": "Customer Portal",
        "type": "application",
        "category": "Web Application",
        "description": "Main customer-facing portal for account management",
        "owner": "IT Department",
        "status": "active",
        "criticality": "high",
        "tags": ["web", "customer", "portal"],
        "metadata": {"version": "2.1.0", "framework": "React"},
        "created_by": "john@company.com",
        "org_id": 1,
        "created_at": "2024-01-15T10:00:00+00:00",
        "updated_at": "2024-01-15T10:00:00+00:00",
    },
    {
        "id": "2",
        "name": "Production Database",
        "type": "database",
        "category": "RDBMS (MySQL/PostgreSQL)",
        "description": "Primary production database for customer data",
        "owner": "Database Team",
        "status": "active",
        "criticality": "high",
        "tags": ["database", "production", "postgresql"],
        "metadata": {"version": "14.2", "size": "2.5TB"},
        "created_by": "sarah@company.com",
        "org_id": 1,
        "created_at": "2024-01-12T10:00:00+00:00",
        "updated_at": "2024-01-12T10:00:00+00:00",
    },
    {
        "id": "3",
        "name": "AWS EC2 Instances",
        "type": "infrastructure",
        "category": "Virtual Machine",
        "description": "Production web servers on AWS",
        "owner": "DevOps Team",
        "status": "active",
        "criticality": "high",
        "tags": ["aws", "ec2", "compute"],
        "metadata": {"instanceCount": "5", "region": "us-west-2"},
        "created_by": "john@company.com",
        "org_id": 1,
        "created_at": "2024-01-10T10:00:00+00:00",
        "updated_at": "2024-01-10T10:00:00+00:00",
    },
    {
        "id": "4",
        "name": "Partner API Gateway",
        "type": "middleware",
        "category": "API Gateway",
        "description": "Routes partner traffic to internal services",
        "owner": "Integration Team",
        "status": "active",
        "criticality": "medium",
        "tags": ["api", "partners"],
        "metadata": {"vendor": "Kong", "version": "3.4"},
        "created_by": "manasvee@futurefocus.io",
        "org_id": 2,
        "created_at": "2024-01-20T10:00:00+00:00",
        "updated_at": "2024-01-20T10:00:00+00:00",
    },
    {
        "id": "5",
        "name": "Salesforce CRM",
        "type": "cloud-service",
        "category": "SaaS",
        "description": "Customer relationship management for the sales team",
        "owner": "Sales Operations",
        "status": "active",
        "criticality": "medium",
        "tags": ["crm", "sales"],
        "metadata": {"edition": "Enterprise"},
        "created_by": "manasvee@futurefocus.io",
        "org_id": 2,
        "created_at": "2024-01-21T10:00:00+00:00",
        "updated_at": "2024-01-21T10:00:00+00:00",
    },
    {
        "id": "6",
        "name": "Core Banking Ledger",
        "type": "database",
        "category": "RDBMS (Oracle/SQL Server)",
        "description": "General ledger for retail accounts",
        "owner": "Core Systems",
        "status": "deprecated",
        "criticality": "high",
        "tags": ["ledger", "oracle"],
        "metadata": {"version": "19c"},
        "created_by": "mike@stratifyit.ai",
        "org_id": 3,
        "created_at": "2024-01-22T10:00:00+00:00",
        "updated_at": "2024-01-22T10:00:00+00:00",
    },
    {
        "id": "7",
        "name": "Card Payments Provider",
        "type": "third-party-service",
        "category": "Payment Gateway",
        "description": "Card acquiring and payment processing",
        "owner": "Payments Team",
        "status": "planned",
        "criticality": "low",
        "tags": [],
        "metadata": {},
        "created_by": "lisa@stratifyit.ai",
        "org_id": 3,
        "created_at": "2024-01-23T10:00:00+00:00",
        "updated_at": "2024-01-23T10:00:00+00:00",
    },
]

# Accounts accepted in demo mode: (email, org code) -> profile row id and tier table.
DEMO_ROSTER: dict[tuple[str, str], tuple[str, str]] = {
    ("john@company.com", "TECH1"): ("client_users", "1"),
    ("sarah@company.com", "TECH1"): ("client_users", "2"),
    ("manasvee@futurefocus.io", "FFITS"): ("client_users", "6"),
    ("mike@stratifyit.ai", ADMIN_ORG_CODE): ("admin_users", "3"),
    ("lisa@stratifyit.ai", ADMIN_ORG_CODE): ("admin_users", "4"),
    ("dana@stratifyit.ai", ADMIN_ORG_CODE): ("admin_users", "5"),
}


def seed_tables() -> dict[str, list[dict[str, Any]]]:
    return {
        "client_orgs": ORGANIZATIONS,
        "admin_users": ADMIN_USERS,
        "client_users": CLIENT_USERS,
        "it_assets": ASSETS,
        "pa_categories": portfolio_catalog.category_rows(),
        "pa_assessments": portfolio_catalog.assessment_rows(),
    }
