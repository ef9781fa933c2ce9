"""
FastAPI routers: URL scans, message scans, dashboard scan stats.

POST /urls/scan, GET /urls/history, GET /urls/{id}
POST /messages/scan, GET /messages/history
GET /dashboard/scan-stats

Every route requires a bearer token (auth.current_user_id). Handlers only
translate HTTP to ScanService calls; domain errors are mapped to JSON by the
exception handlers in server.py.
"""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from backend_safespace.api_server.auth import current_user_id, get_app_settings
from backend_safespace.config import Settings
from backend_safespace.database import ScanStore, get_scan_store
from backend_safespace.scanner import HistoryPage, ScanService

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10


# -----------------------------------------------------------------------------
# Request / response models (camelCase on the wire)
# -----------------------------------------------------------------------------


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UrlScanRequest(BaseModel):
    """POST /urls/scan body."""

    url: str = Field(..., min_length=1, description="URL to scan (http/https or bare host)")


class MessageScanRequest(BaseModel):
    """POST /messages/scan body."""

    message: str = Field(..., min_length=1, description="Message text to scan")


class UrlAnalysisOut(CamelModel):
    length: int = Field(..., ge=0)
    has_secure_scheme: bool
    scanned_at: datetime


class VerdictOut(CamelModel):
    is_safe: bool
    risk_score: int = Field(..., ge=0, le=100, description="0 (safe) to 100 (risky)")
    categories: list[str] = Field(default_factory=list)
    reason: str | None = Field(None, description="Only present when isSafe is false")
    analysis: UrlAnalysisOut | None = Field(None, description="URL scans only")
    flagged_words: list[str] | None = Field(None, description="Message scans only")


class HistoryItemOut(VerdictOut):
    id: int
    kind: str
    input: str
    created_at: datetime


class ScanRecordOut(CamelModel):
    id: int
    user_id: str
    kind: str
    input: str
    result: VerdictOut
    created_at: datetime


class ScanStatsOut(CamelModel):
    total_scans: int
    url_scans: int
    message_scans: int
    safe_scans: int
    unsafe_scans: int
    avg_risk_score: float


class ActivityItemOut(CamelModel):
    type: str
    content: str
    risk_score: int
    timestamp: datetime


class DashboardOut(ScanStatsOut):
    recent_activity: list[ActivityItemOut] = Field(default_factory=list, description="Newest scans, both kinds")


class ScanResponse(BaseModel):
    success: bool = True
    data: VerdictOut


class HistoryResponse(BaseModel):
    success: bool = True
    count: int
    total: int
    page: int
    pages: int
    data: list[HistoryItemOut]


class ScanRecordResponse(BaseModel):
    success: bool = True
    data: ScanRecordOut


class ScanStatsResponse(BaseModel):
    success: bool = True
    data: DashboardOut


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_store(request: Request, settings: Settings = Depends(get_app_settings)) -> ScanStore:
    """Dependency: app-scoped ScanStore, created on first use from settings.database_url."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = get_scan_store(settings.database_url)
        request.app.state.store = store
    return store


def get_scan_service(store: ScanStore = Depends(get_store)) -> ScanService:
    return ScanService(store)


def _history_response(history: HistoryPage) -> HistoryResponse:
    return HistoryResponse(
        count=len(history.records),
        total=history.total,
        page=history.page,
        pages=history.pages,
        data=[HistoryItemOut.model_validate(r.to_history_item()) for r in history.records],
    )


PageParam = Query(1, ge=1, description="1-based page number")
LimitParam = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Records per page")


# -----------------------------------------------------------------------------
# URL scans
# -----------------------------------------------------------------------------

url_router = APIRouter(prefix="/urls", tags=["URL Scans"])


@url_router.post("/scan", response_model=ScanResponse, response_model_exclude_none=True)
def scan_url(
    body: UrlScanRequest,
    user_id: str = Depends(current_user_id),
    service: ScanService = Depends(get_scan_service),
) -> ScanResponse:
    """Score a URL, store the verdict in the caller's history, and return it."""
    verdict = service.scan_url(user_id, body.url)
    return ScanResponse(data=VerdictOut.model_validate(verdict.to_dict()))


@url_router.get("/history", response_model=HistoryResponse, response_model_exclude_none=True)
def url_history(
    page: int = PageParam,
    limit: int = LimitParam,
    user_id: str = Depends(current_user_id),
    service: ScanService = Depends(get_scan_service),
) -> HistoryResponse:
    """Caller's URL scans, newest first."""
    return _history_response(service.url_history(user_id, page, limit))


@url_router.get("/{scan_id}", response_model=ScanRecordResponse, response_model_exclude_none=True)
def get_url_scan(
    scan_id: int,
    user_id: str = Depends(current_user_id),
    service: ScanService = Depends(get_scan_service),
) -> ScanRecordResponse:
    """One of the caller's URL scans; 404 when unknown or owned by someone else."""
    record = service.get_url_scan(user_id, scan_id)
    return ScanRecordResponse(data=ScanRecordOut.model_validate(record.to_dict()))


# -----------------------------------------------------------------------------
# Message scans
# -----------------------------------------------------------------------------

message_router = APIRouter(prefix="/messages", tags=["Message Scans"])


@message_router.post("/scan", response_model=ScanResponse, response_model_exclude_none=True)
def scan_message(
    body: MessageScanRequest,
    user_id: str = Depends(current_user_id),
    service: ScanService = Depends(get_scan_service),
) -> ScanResponse:
    """
    Placeholder message scan: always safe, random score in [0, 100).
    The verdict is still recorded in the caller's history.
    """
    verdict = service.scan_message(user_id, body.message)
    return ScanResponse(data=VerdictOut.model_validate(verdict.to_dict()))


@message_router.get("/history", response_model=HistoryResponse, response_model_exclude_none=True)
def message_history(
    page: int = PageParam,
    limit: int = LimitParam,
    user_id: str = Depends(current_user_id),
    service: ScanService = Depends(get_scan_service),
) -> HistoryResponse:
    """Caller's message scans, newest first."""
    return _history_response(service.message_history(user_id, page, limit))


# -----------------------------------------------------------------------------
# Dashboard
# -----------------------------------------------------------------------------

dashboard_router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@dashboard_router.get("/scan-stats", response_model=ScanStatsResponse)
def scan_stats(
    user_id: str = Depends(current_user_id),
    service: ScanService = Depends(get_scan_service),
) -> ScanStatsResponse:
    """Totals over the caller's scans plus their most recent URL and message scans."""
    data = service.scan_stats(user_id).to_dict()
    data["recentActivity"] = [r.to_activity_item() for r in service.recent_activity(user_id)]
    return ScanStatsResponse(data=DashboardOut.model_validate(data))
