# -*- coding: utf-8 -*-
"""Credentials - parsing and lookup."""

from __future__ import annotations

import hmac
import logging
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

from ..errors import CredentialError
from .models import CredentialRecord

logger = logging.getLogger(__name__)


class CredentialDirectory:
    """Read-only identity -> credential map, built once at startup."""

    def __init__(self, records: Mapping[str, CredentialRecord]) -> None:
        self._records: Mapping[str, CredentialRecord] = MappingProxyType(dict(records))

    def __contains__(self, identity: object) -> bool:
        return identity in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def lookup(self, identity: str) -> CredentialRecord:
        record = self._records.get(identity)
        if record is None:
            raise CredentialError(identity)
        return record

    def requires_secret(self, identity: str) -> bool:
        return self.lookup(identity).access_secret is not None

    def validate_secret(self, identity: str, candidate: str) -> bool:
        """Check a dashboard access secret.

        Unknown identities never validate. Identities configured without a
        secret are open and accept any candidate.
        """
        record = self._records.get(identity)
        if record is None:
            return False
        if record.access_secret is None:
            return True
        return hmac.compare_digest(record.access_secret.encode("utf-8"), candidate.encode("utf-8"))


def _parse_entry(entry: str) -> Optional[CredentialRecord]:
    parts = [p.strip() for p in entry.split(":")]
    if len(parts) == 2:
        identity, api_key = parts
        secret: Optional[str] = None
    elif len(parts) == 3:
        identity, secret, api_key = parts
        secret = secret or None
    else:
        return None
    if not identity or not api_key:
        return None
    return CredentialRecord(identity=identity, api_key=api_key, access_secret=secret)


def parse_credentials(raw: str) -> CredentialDirectory:
    """Parse ``identity:apiKey`` / ``identity:secret:apiKey`` entries.

    Malformed entries are skipped. The first occurrence of an identity wins.
    """
    records: Dict[str, CredentialRecord] = {}
    for position, entry in enumerate((raw or "").split(",")):
        entry = entry.strip()
        if not entry:
            continue
        record = _parse_entry(entry)
        if record is None:
            logger.debug("Skipping malformed credential entry #%s", position)
            continue
        if record.identity in records:
            logger.debug("Ignoring duplicate credential entry for %s", record.identity)
            continue
        records[record.identity] = record
    logger.info("Loaded %s credential entr%s", len(records), "y" if len(records) == 1 else "ies")
    return CredentialDirectory(records)
