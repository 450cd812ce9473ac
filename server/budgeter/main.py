"""
Server entry point — FastAPI app setup and route configuration.
Sets up the FastAPI server with CORS and the budget API routes.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncGenerator
from typing import Literal

import dotenv
import fastapi
import uvicorn
from fastapi.middleware import cors
from starlette import responses

from budgeter import config
from budgeter.analysis import report
from budgeter.models.summary import BudgetSummary
from budgeter.pipeline import budget_pipeline
from budgeter.routes import budget_params
from budgeter.utils import errors, logger

dotenv.load_dotenv()

log = logger.create_logger("Server")


@contextlib.asynccontextmanager
async def lifespan(_app: fastapi.FastAPI) -> AsyncGenerator[None]:
    """Log server start on startup."""
    settings = config.get_settings()
    log.section("Third-Party Budgeter Server Started")
    log.info("Environment", {
        "env": settings.environment,
        "pageTimeoutSeconds": settings.page_fetch_timeout_seconds,
        "headTimeoutSeconds": settings.head_timeout_seconds,
    })
    yield


app = fastapi.FastAPI(title="Third-Party Script Budgeter", lifespan=lifespan)

# ============================================================================
# Middleware
# ============================================================================

app.add_middleware(
    cors.CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ============================================================================
# Error Handling
# ============================================================================


@app.exception_handler(errors.InputValidationError)
async def _validation_error_handler(
    _request: fastapi.Request, exc: errors.InputValidationError
) -> responses.JSONResponse:
    return responses.JSONResponse(exc.to_dict(), status_code=400)


@app.exception_handler(errors.PageFetchError)
async def _fetch_error_handler(
    _request: fastapi.Request, exc: errors.PageFetchError
) -> responses.JSONResponse:
    return responses.JSONResponse(exc.to_dict(), status_code=500)


# ============================================================================
# API Routes
# ============================================================================


async def _run(
    url: str,
    budget_req: str | None,
    budget_bytes: str | None,
    allow: str | None,
    deny: str | None,
    subs_first: str | None,
) -> BudgetSummary:
    options = budget_params.build_options(budget_req, budget_bytes, allow, deny, subs_first)
    log.info("Incoming budget request", {"url": url})
    return await budget_pipeline.run_budget_analysis(url, options)


@app.get("/api/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/budget")
async def budget_endpoint(
    url: str = fastapi.Query("", description="The https URL to analyse"),
    budget_req: str | None = fastapi.Query(None, alias="budgetReq", description="Third-party request ceiling"),
    budget_bytes: str | None = fastapi.Query(None, alias="budgetBytes", description="Third-party byte ceiling in kB"),
    allow: str | None = fastapi.Query(None, description="Comma-separated allowed host substrings"),
    deny: str | None = fastapi.Query(None, description="Comma-separated denied host substrings"),
    subs_first: str | None = fastapi.Query(None, alias="subsFirst", description="1 to treat subdomains as first-party"),
) -> responses.JSONResponse:
    """
    Analyse a page's third-party scripts and styles against a budget.
    """
    summary = await _run(url, budget_req, budget_bytes, allow, deny, subs_first)
    return responses.JSONResponse(budget_params.serialize_summary(summary))


@app.get("/api/budget/plan")
async def plan_endpoint(
    url: str = fastapi.Query(""),
    budget_req: str | None = fastapi.Query(None, alias="budgetReq"),
    budget_bytes: str | None = fastapi.Query(None, alias="budgetBytes"),
    allow: str | None = fastapi.Query(None),
    deny: str | None = fastapi.Query(None),
    subs_first: str | None = fastapi.Query(None, alias="subsFirst"),
) -> responses.PlainTextResponse:
    """Return the remediation plan as plain text."""
    summary = await _run(url, budget_req, budget_bytes, allow, deny, subs_first)
    return responses.PlainTextResponse(report.build_remediation_plan(summary))


@app.get("/api/budget/export/{kind}.csv")
async def export_endpoint(
    kind: Literal["domains", "resources"],
    url: str = fastapi.Query(""),
    budget_req: str | None = fastapi.Query(None, alias="budgetReq"),
    budget_bytes: str | None = fastapi.Query(None, alias="budgetBytes"),
    allow: str | None = fastapi.Query(None),
    deny: str | None = fastapi.Query(None),
    subs_first: str | None = fastapi.Query(None, alias="subsFirst"),
) -> responses.Response:
    """Download the domain or resource table as CSV."""
    summary = await _run(url, budget_req, budget_bytes, allow, deny, subs_first)
    body = report.domains_csv(summary) if kind == "domains" else report.resources_csv(summary)
    return responses.Response(
        body,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{kind}.csv"'},
    )


# ============================================================================
# Start Server
# ============================================================================


def main() -> None:
    """Entry point for running the server."""
    settings = config.get_settings()
    log.success(f"Server listening on {settings.host}:{settings.port}")
    uvicorn.run(
        "budgeter.main:app",
        host=settings.host,
        port=settings.port,
        reload=not settings.is_production,
    )


if __name__ == "__main__":
    main()
