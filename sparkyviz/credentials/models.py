# -*- coding: utf-8 -*-
"""Credentials - models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel


@dataclass(frozen=True)
class CredentialRecord:
    identity: str
    api_key: str
    access_secret: Optional[str] = None

    def __repr__(self) -> str:
        # Keys must never end up in logs.
        return f"CredentialRecord(identity={self.identity!r}, protected={self.access_secret is not None})"


class ValidateResponse(BaseModel):
    valid: bool


class AccessResponse(BaseModel):
    identity: str
    protected: bool
