# file: backend/main.py
"""
FastAPI Backend — Org Chart API v1.

Stateless: every request rebuilds the chart from the employee list.
No computed tree is stored between requests.

Endpoints:
  GET  /health                  — liveness
  POST /org-chart               — inline employees → chart + initial fit
  GET  /org-chart               — configured directory → chart + initial fit
  POST /org-chart/search        — filter employees by name / title / dept / number
  POST /org-chart/export-frame  — full-chart canvas for print / PDF
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

env_path = os.path.join(os.path.dirname(__file__), ".env")
if os.path.exists(env_path):
    load_dotenv(env_path)

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Add project root to path for kernel imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from org_chart.classification import referenced_manager_predicate
from org_chart.domain_types import EmployeeRecord, ViewportSize
from org_chart.engine import OrgChart, OrgChartEngine
from org_chart.records import clean_name, clean_position, search_records
from org_chart.roots import RootStrategy, email_root, name_match_root
from org_chart.viewport import compute_export_frame, compute_initial_transform

from backend.employee_directory import (
    DirectoryError,
    JsonFileEmployeeDirectory,
    PostgresEmployeeDirectory,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DATABASE_URL = os.environ.get("DATABASE_URL", "")
EMPLOYEE_TABLE = os.environ.get("EMPLOYEE_TABLE", "employees")
EMPLOYEE_DIRECTORY_FILE = os.environ.get("EMPLOYEE_DIRECTORY_FILE", "")
FRONTEND_URL = os.environ.get("FRONTEND_URL", "http://localhost:3000")
ORG_ROOT_EMAIL = os.environ.get("ORG_ROOT_EMAIL", "")
ORG_ROOT_NAME = os.environ.get("ORG_ROOT_NAME", "")

# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = FastAPI(
    title="OrgChart API",
    version="1.0.0",
    description="Deterministic org-chart resolution and tidy-tree layout",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://localhost:3000",
        "http://localhost:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# Request / Response models
# ---------------------------------------------------------------------------


class Viewport(BaseModel):
    width: float
    height: float


class ChartOptions(BaseModel):
    root_email: Optional[str] = None
    root_name: Optional[str] = None
    include_inactive: bool = False
    managers_from_references: bool = False
    viewport: Optional[Viewport] = None


class OrgChartRequest(ChartOptions):
    employees: List[Dict[str, Any]]


class SearchRequest(BaseModel):
    employees: List[Dict[str, Any]]
    query: str = ""
    include_inactive: bool = False


class ExportFrameRequest(ChartOptions):
    employees: List[Dict[str, Any]]
    padding: Optional[float] = None


# ---------------------------------------------------------------------------
# Core helpers
# ---------------------------------------------------------------------------


def _root_strategy(root_email: Optional[str], root_name: Optional[str]) -> Optional[RootStrategy]:
    """Request override first, then environment, then the kernel default."""
    for email, name in ((root_email, root_name), (ORG_ROOT_EMAIL, ORG_ROOT_NAME)):
        if email and email.strip():
            return email_root(email)
        if name and name.strip():
            first, _, last = name.strip().partition(" ")
            return name_match_root(first, last.strip())
    return None


def _build_chart(employees: List[Any], options: ChartOptions) -> OrgChart:
    engine = OrgChartEngine(
        root_strategy=_root_strategy(options.root_email, options.root_name),
        active_only=not options.include_inactive,
    )
    records = engine.ingest(employees)
    if options.managers_from_references:
        engine.is_manager_like = referenced_manager_predicate(records)
    return engine.build(records)


def _chart_response(chart: OrgChart, viewport: Optional[Viewport]) -> dict:
    body = chart.to_dict()
    if viewport is not None:
        try:
            transform = compute_initial_transform(
                chart.layout.bounds, ViewportSize(viewport.width, viewport.height),
            )
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        body["transform"] = transform.to_dict()
    return body


def _get_directory():
    if EMPLOYEE_DIRECTORY_FILE:
        return JsonFileEmployeeDirectory(EMPLOYEE_DIRECTORY_FILE)
    if DATABASE_URL:
        return PostgresEmployeeDirectory(DATABASE_URL, table=EMPLOYEE_TABLE)
    raise HTTPException(
        status_code=500,
        detail="No employee directory configured (EMPLOYEE_DIRECTORY_FILE or DATABASE_URL)",
    )


def _record_summary(rec: EmployeeRecord) -> dict:
    return {
        **rec.to_dict(),
        "display_name": clean_name(rec.first_name, rec.last_name),
        "display_title": clean_position(rec.job_title),
    }


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health")
def health():
    return {"status": "ok", "version": "1.0.0"}


@app.post("/org-chart")
def build_org_chart(req: OrgChartRequest):
    """Resolve + lay out the posted employee list."""
    chart = _build_chart(req.employees, req)
    return _chart_response(chart, req.viewport)


@app.get("/org-chart")
def get_org_chart(
    width: Optional[float] = Query(None, description="Viewport width for the initial fit"),
    height: Optional[float] = Query(None, description="Viewport height for the initial fit"),
    root_email: Optional[str] = Query(None),
    include_inactive: bool = Query(False),
):
    """Read the configured directory → resolve → lay out."""
    directory = _get_directory()
    try:
        employees = directory.load_employees()
    except DirectoryError as exc:
        logger.error("Directory read failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc))

    options = ChartOptions(root_email=root_email, include_inactive=include_inactive)
    if width is not None and height is not None:
        options.viewport = Viewport(width=width, height=height)
    chart = _build_chart(employees, options)
    return _chart_response(chart, options.viewport)


@app.post("/org-chart/search")
def search_employees(req: SearchRequest):
    engine = OrgChartEngine(active_only=not req.include_inactive)
    records = engine.ingest(req.employees)
    matches = search_records(records, req.query)
    return {
        "query": req.query,
        "total": len(records),
        "count": len(matches),
        "employees": [_record_summary(r) for r in matches],
    }


@app.post("/org-chart/export-frame")
def export_frame(req: ExportFrameRequest):
    chart = _build_chart(req.employees, req)
    try:
        if req.padding is None:
            frame = compute_export_frame(chart.layout.bounds)
        else:
            frame = compute_export_frame(chart.layout.bounds, req.padding)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"tree_hash": chart.tree_hash, **frame.to_dict()}
