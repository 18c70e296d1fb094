# -*- coding: utf-8 -*-
"""Error taxonomy shared by the aggregation layers."""

from __future__ import annotations

from typing import Optional


class SparkyVizError(Exception):
    """Base class for all dashboard errors."""


class CredentialError(SparkyVizError):
    """Identity is not present in the credential directory."""

    def __init__(self, identity: str) -> None:
        super().__init__(f"Unknown user: {identity}")
        self.identity = identity


class InvalidInput(SparkyVizError):
    """Caller supplied a value the aggregators cannot work with."""


class UpstreamError(SparkyVizError):
    """Base class for failures talking to the upstream fitness API."""


class UpstreamUnavailable(UpstreamError):
    """Network failure, timeout or non-success HTTP status from upstream."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.path = path


class UpstreamMalformed(UpstreamUnavailable):
    """Upstream answered successfully but a required field is missing."""
