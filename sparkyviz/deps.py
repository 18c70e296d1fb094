# -*- coding: utf-8 -*-
"""FastAPI dependencies and error translation shared by the routers."""

from __future__ import annotations

import logging
from typing import AsyncIterator

from fastapi import Depends, HTTPException, Request

from .credentials.directory import CredentialDirectory
from .errors import CredentialError, InvalidInput, SparkyVizError, UpstreamError
from .upstream.client import SparkyFitnessClient

logger = logging.getLogger(__name__)


def get_directory(request: Request) -> CredentialDirectory:
    return request.app.state.directory


def require_identity(identity: str, directory: CredentialDirectory = Depends(get_directory)) -> str:
    if identity not in directory:
        raise HTTPException(status_code=404, detail=f"Unknown user: {identity}")
    return identity


async def get_upstream(
    request: Request,
    directory: CredentialDirectory = Depends(get_directory),
) -> AsyncIterator[SparkyFitnessClient]:
    transport = getattr(request.app.state, "upstream_transport", None)
    async with SparkyFitnessClient(directory, transport=transport) as client:
        yield client


def to_http_error(exc: SparkyVizError, *, what: str) -> HTTPException:
    if isinstance(exc, CredentialError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidInput):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, UpstreamError):
        logger.warning("Failed to fetch %s: %s", what, exc)
        return HTTPException(status_code=502, detail=f"Failed to fetch {what}: {exc}")
    logger.error("Unexpected error fetching %s: %s", what, exc)
    return HTTPException(status_code=500, detail=f"Failed to fetch {what}")
