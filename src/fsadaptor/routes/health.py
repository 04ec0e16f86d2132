"""Health check endpoints for liveness and readiness checks."""
import os
from pathlib import Path
from typing import Literal

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fsadaptor.adaptor import FsAdaptor

router = APIRouter(prefix="/health", tags=["health"])


class LivenessResponse(BaseModel):
    """Response model for the liveness check.

    Attributes:
        status: Always 'alive' when process is running.
    """

    status: Literal["alive"]


class ReadinessCheck(BaseModel):
    """Individual dependency check result.

    Attributes:
        name: Identifier for the dependency being checked.
        status: Result of the check ('ok' or 'failed').
        message: Error details when status is 'failed'.
    """

    name: str
    status: Literal["ok", "failed"]
    message: str | None = None


class ReadinessResponse(BaseModel):
    """Response model for the readiness check.

    Attributes:
        status: Overall readiness ('ready' or 'not_ready').
        checks: List of individual dependency check results.
    """

    status: Literal["ready", "not_ready"]
    checks: list[ReadinessCheck]


def _check_root(root: Path) -> ReadinessCheck:
    """Verify the adaptor root is still present and readable.

    The root was validated at startup, but it can disappear or lose its
    permissions while the process runs.

    Args:
        root: Configured root path.

    Returns:
        Check result with status and optional error message.
    """
    name = f"root:{root}"
    try:
        if root.is_dir():
            with os.scandir(root) as entries:
                next(entries, None)
            return ReadinessCheck(name=name, status="ok")
        if root.is_file():
            if os.access(root, os.R_OK):
                return ReadinessCheck(name=name, status="ok")
            return ReadinessCheck(name=name, status="failed", message="File not readable")
        return ReadinessCheck(
            name=name,
            status="failed",
            message="Root is not a file or directory",
        )
    except PermissionError as e:
        return ReadinessCheck(
            name=name,
            status="failed",
            message=f"Permission denied: {e}",
        )
    except OSError as e:
        return ReadinessCheck(name=name, status="failed", message=str(e))


@router.get("/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """Liveness check endpoint.

    Returns:
        Liveness status response.
    """
    return LivenessResponse(status="alive")


@router.get("/ready", response_model=ReadinessResponse)
def readiness(request: Request) -> JSONResponse:
    """Readiness check endpoint.

    Returns 200 if the root can be read, 503 otherwise.

    Args:
        request: FastAPI request object.

    Returns:
        Readiness status with individual check results.
    """
    adaptor: FsAdaptor = request.app.state.adaptor
    checks = [_check_root(adaptor.root_path)]
    all_ok = all(c.status == "ok" for c in checks)
    response = ReadinessResponse(
        status="ready" if all_ok else "not_ready",
        checks=checks,
    )
    code = status.HTTP_200_OK if all_ok else status.HTTP_503_SERVICE_UNAVAILABLE
    return JSONResponse(content=response.model_dump(), status_code=code)
