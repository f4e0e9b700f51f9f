"""Liveness and version probes for load balancers and deploy checks."""

from fastapi import APIRouter

from bookclub.server.core import constant

router = APIRouter()


@router.get(
    "/health",
    summary="Liveness probe",
    description="Answers as long as the process can serve requests. The database is not touched.",
)
async def health_check() -> dict:
    return {"status": "ok"}


@router.get(
    "/version",
    summary="API version",
    description="Release of the BookClub API and the version of its JSON schema.",
)
async def version() -> dict:
    return {"version": constant.API_VERSION, "schema_version": constant.SCHEMA_VERSION}
