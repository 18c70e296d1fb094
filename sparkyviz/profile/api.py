# -*- coding: utf-8 -*-
"""Profile - API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ..deps import get_upstream, require_identity, to_http_error
from ..errors import SparkyVizError
from ..upstream.client import SparkyFitnessClient
from .aggregator import build_profile
from .models import Profile

router = APIRouter(prefix="/api", tags=["Profile"])


@router.get("/{identity}/profile", response_model=Profile, summary="Dashboard profile with streak metrics")
async def profile(
    identity: str = Depends(require_identity),
    client: SparkyFitnessClient = Depends(get_upstream),
):
    try:
        return await build_profile(client, identity)
    except SparkyVizError as exc:
        raise to_http_error(exc, what="profile") from exc
