"""HR API client: team hierarchy, job catalog and JCP mappings (read-only)."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import aiohttp
from pydantic import ValidationError

from app.core.config import Settings
from app.models.competency import Job, JobCompetencyMapping
from app.models.employee import Employee

logger = logging.getLogger(__name__)


class DirectoryServiceError(Exception):
    pass


class DirectoryNotConfiguredError(DirectoryServiceError):
    pass


def _unwrap(data: Any, key: str) -> list[dict[str, Any]]:
    # list endpoints answer either with a bare array or {"<key>": [...]}
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        items = data.get(key)
        if isinstance(items, list):
            return items
    raise DirectoryServiceError(f"Unexpected payload, expected a list under '{key}'")


def _parse_records(raw: list[dict[str, Any]], model: type, label: str) -> list:
    records = []
    for item in raw:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping invalid %s record: %s", label, e.errors()[0].get("msg"))
    return records


class DirectoryService:
    def __init__(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.token = ""
        self.timeout = 30.0

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        if not settings.HR_API_BASE_URL:
            logger.warning("HR API base URL missing — DirectoryService not initialized")
            return

        self.base_url = settings.HR_API_BASE_URL.rstrip("/")
        self.token = settings.HR_API_TOKEN
        self.timeout = settings.HR_API_TIMEOUT_SECONDS
        self.initialized = True
        logger.info("DirectoryService initialized (base_url=%s)", self.base_url)

    async def close(self) -> None:
        self.initialized = False
        self.base_url = ""
        self.token = ""

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _get(self, path: str, params: dict[str, str] | None = None) -> Any:
        if not self.initialized:
            raise DirectoryNotConfiguredError("DirectoryService not initialized")

        url = f"{self.base_url}{path}"
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(url, headers=self._headers(), params=params) as response:
                    if response.status == 200:
                        return await response.json()

                    error_text = await response.text()
                    raise DirectoryServiceError(f"GET {path} failed: {response.status} - {error_text}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DirectoryServiceError(f"GET {path} failed: {e}") from e

    async def get_hierarchy_members(self, manager_sid: str) -> list[Employee]:
        """Direct and indirect reports of ``manager_sid`` as a flat list."""
        data = await self._get(f"/employees/hierarchy/{manager_sid}")
        members = _parse_records(_unwrap(data, "hierarchyMembers"), Employee, "employee")
        logger.debug("Fetched %d hierarchy members for %s", len(members), manager_sid)
        return members

    async def get_jobs(self) -> list[Job]:
        data = await self._get("/jobs", params={"limit": "2000"})
        return _parse_records(_unwrap(data, "jobs"), Job, "job")

    async def get_job_competencies(self) -> list[JobCompetencyMapping]:
        data = await self._get("/job-competencies")
        return _parse_records(_unwrap(data, "mappings"), JobCompetencyMapping, "job-competency")

    async def check_connection(self) -> bool:
        if not self.initialized:
            return False

        try:
            timeout = aiohttp.ClientTimeout(total=10)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(f"{self.base_url}/health", headers=self._headers()) as response:
                    return response.status == 200
        except Exception:
            logger.exception("DirectoryService connection check failed")
            return False


directory_service = DirectoryService()
