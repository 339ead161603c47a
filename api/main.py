"""FastAPI server for Supacheck compliance status."""

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.schemas import (
    ErrorResponse,
    HealthResponse,
    ProjectsResponse,
    TablesResponse,
    UsersResponse,
)
from config.settings import settings
from supacheck.exceptions import ConfigurationError, PipelineError
from supacheck.models import ComplianceResultSet
from supacheck.service import ComplianceService
from supacheck.tracing import setup_logging

logger = logging.getLogger("supacheck.api")


@asynccontextmanager
async def lifespan(app: FastAPI):
    evidence_logger = setup_logging(settings)
    app.state.service = await ComplianceService.from_settings(
        settings, evidence_logger.logger
    )
    evidence_logger.logger.info("Supacheck API started")
    try:
        yield
    finally:
        evidence_logger.close()


app = FastAPI(
    title="Supacheck API",
    description="MFA, RLS and PITR compliance status for a Supabase tenant",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)


def get_service(request: Request) -> ComplianceService:
    """Service built during startup."""
    return request.app.state.service


@app.exception_handler(PipelineError)
async def pipeline_error_handler(request: Request, exc: PipelineError):
    logger.error("Unexpected error in %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


@app.exception_handler(ConfigurationError)
async def configuration_error_handler(request: Request, exc: ConfigurationError):
    logger.error("Configuration error in %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": str(exc)})


def _payload(key: str, result: ComplianceResultSet) -> dict:
    data = result.to_dict()
    return {key: data["items"], "summary": data["summary"]}


@app.get("/health", response_model=HealthResponse)
async def health(service: ComplianceService = Depends(get_service)):
    """Report which upstream providers are configured."""
    checks = {
        "mfa": service.identity is not None,
        "rls": service.database is not None,
        "pitr": service.management is not None,
    }
    return {"status": "ok", "checks": checks}


@app.get(
    "/api/users",
    response_model=UsersResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_users(service: ComplianceService = Depends(get_service)):
    """Users with their verified MFA factors."""
    return _payload("users", await service.get_identity_mfa_status())


@app.get(
    "/api/rls-status",
    response_model=TablesResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_rls_status(service: ComplianceService = Depends(get_service)):
    return _payload("tables", await service.get_table_rls_status())


@app.get(
    "/api/pitr-status-all",
    response_model=ProjectsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def get_pitr_status_all(service: ComplianceService = Depends(get_service)):
    return _payload("projects", await service.get_project_pitr_status())
