"""
Report sources: where the analytics engine gets its input from.

The engine never fetches anything itself. Routes ask a ReportSource for a
filtered, already-paginated list of reports and hand it over.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from api.analytics_models import Report, ReportFilter
from config import ReportSourceConfig
from core.exceptions import ReportSourceError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class ReportSource(ABC):
    """Interface for anything that can list reports."""

    @abstractmethod
    async def get_reports(self, report_filter: Optional[ReportFilter] = None) -> List[Report]:
        """
        Return reports matching ``report_filter``, newest first.

        Raises:
            ReportSourceError: if the reports cannot be fetched.
        """
        ...


# ============================================================================
# IN-MEMORY SOURCE
# ============================================================================
class InMemoryReportSource(ReportSource):
    """Serves a fixed list of reports. Used for tests and local runs."""

    def __init__(self, reports: Optional[List[Report]] = None):
        self._reports = list(reports or [])

    async def get_reports(self, report_filter: Optional[ReportFilter] = None) -> List[Report]:
        f = report_filter or ReportFilter()
        reports = sorted(self._reports, key=lambda r: r.created_at, reverse=True)

        if f.emergency is not None:
            reports = [r for r in reports if r.emergency == f.emergency]
        if f.user_id:
            reports = [r for r in reports if r.user_id == f.user_id]
        if f.bounds:
            (ne_lat, ne_lng), (sw_lat, sw_lng) = f.bounds.north_east, f.bounds.south_west
            reports = [
                r for r in reports
                if r.latitude is not None and r.longitude is not None
                and sw_lat <= r.latitude <= ne_lat
                and sw_lng <= r.longitude <= ne_lng
            ]

        start = f.offset or 0
        if f.offset:
            end = start + (f.limit or DEFAULT_PAGE_SIZE)
        elif f.limit:
            end = f.limit
        else:
            end = None
        return reports[start:end]


# ============================================================================
# POSTGREST (SUPABASE) SOURCE
# ============================================================================
class RestReportSource(ReportSource):
    """
    Reads reports from a PostgREST endpoint such as Supabase's
    ``/rest/v1/<table>``.
    """

    def __init__(
        self,
        base_url: str = ReportSourceConfig.SUPABASE_URL,
        api_key: str = ReportSourceConfig.SUPABASE_ANON_KEY,
        table: str = ReportSourceConfig.REPORTS_TABLE,
        timeout: float = ReportSourceConfig.REQUEST_TIMEOUT,
        default_limit: Optional[int] = ReportSourceConfig.DEFAULT_LIMIT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.table = table
        self.timeout = timeout
        self.default_limit = default_limit
        self._transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/rest/v1/{self.table}"

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def build_params(self, report_filter: Optional[ReportFilter] = None) -> List[tuple]:
        """Translate a ReportFilter into PostgREST query parameters."""
        f = report_filter or ReportFilter()
        params: List[tuple] = [("select", "*"), ("order", "created_at.desc")]

        if f.emergency is not None:
            params.append(("emergency", f"eq.{str(f.emergency).lower()}"))
        if f.user_id:
            params.append(("user_id", f"eq.{f.user_id}"))
        if f.bounds:
            (ne_lat, ne_lng), (sw_lat, sw_lng) = f.bounds.north_east, f.bounds.south_west
            params.extend([
                ("latitude", f"gte.{sw_lat}"),
                ("latitude", f"lte.{ne_lat}"),
                ("longitude", f"gte.{sw_lng}"),
                ("longitude", f"lte.{ne_lng}"),
            ])

        limit = f.limit or self.default_limit
        if f.offset:
            limit = f.limit or DEFAULT_PAGE_SIZE
            params.append(("offset", str(f.offset)))
        if limit:
            params.append(("limit", str(limit)))

        return params

    async def get_reports(self, report_filter: Optional[ReportFilter] = None) -> List[Report]:
        if not self.base_url:
            raise ReportSourceError("Reports endpoint is not configured (SUPABASE_URL)")

        params = self.build_params(report_filter)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(self.endpoint, params=params, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Error fetching reports from {self.endpoint}: {e}")
            raise ReportSourceError(f"Could not reach reports endpoint: {e}") from e

        if response.status_code != 200:
            logger.error(
                f"Reports endpoint returned {response.status_code}: {response.text[:200]}"
            )
            raise ReportSourceError(
                f"Reports endpoint returned {response.status_code}",
                status_code=response.status_code,
            )

        try:
            rows: List[Dict[str, Any]] = response.json()
            reports = [Report.model_validate(row) for row in rows]
        except (ValueError, TypeError, ValidationError) as e:
            raise ReportSourceError(f"Invalid reports payload: {e}") from e

        logger.debug(f"Fetched {len(reports)} reports from {self.endpoint}")
        return reports
