"""Tests for health check endpoints."""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from infrastructure.database.session import get_async_session


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        data = (await client.get("/health")).json()

        assert data["status"] == "healthy"
        assert data["version"] == settings.app_version
        assert data["environment"] == settings.app_env
        assert "timestamp" in data
        assert data["database"] is None

    @pytest.mark.asyncio
    async def test_health_needs_no_token(self, client: AsyncClient) -> None:
        response = await client.get("/health")

        assert "set-cookie" not in response.headers


class TestDetailedHealthEndpoint:
    """Tests for the readiness endpoint."""

    @pytest.mark.asyncio
    async def test_reports_database_healthy(
        self, app: FastAPI, client: AsyncClient, db_session: AsyncSession
    ) -> None:
        app.dependency_overrides[get_async_session] = lambda: db_session

        data = (await client.get("/health/detailed")).json()

        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
