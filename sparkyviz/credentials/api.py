# -*- coding: utf-8 -*-
"""Credentials - dashboard access gate endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..deps import get_directory, require_identity
from .directory import CredentialDirectory
from .models import AccessResponse, ValidateResponse

router = APIRouter(prefix="/api", tags=["Access"])


@router.get("/{identity}/access", response_model=AccessResponse, summary="Whether the dashboard is password protected")
def access(
    identity: str = Depends(require_identity),
    directory: CredentialDirectory = Depends(get_directory),
):
    return AccessResponse(identity=identity, protected=directory.requires_secret(identity))


@router.get("/{identity}/validate", response_model=ValidateResponse, summary="Check a dashboard access secret")
def validate(
    identity: str,
    password: str | None = Query(default=None),
    directory: CredentialDirectory = Depends(get_directory),
):
    if not password:
        return JSONResponse(status_code=400, content={"valid": False})
    return ValidateResponse(valid=directory.validate_secret(identity, password))
