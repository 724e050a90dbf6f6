"""Verification of local content against the authoritative remote catalog.

Flow for one request:
1) list the remote catalog (``RemoteCatalogFetcher``) and prime the cache
2) pull a window of local candidates for the requested page
3) verify each candidate (``VerificationCache``, remote lookup on a miss)
4) widen the window until enough candidates verified or a bound is hit
5) group the verified records (``ResponseAssembler``)
"""

from __future__ import annotations

from .assemble import ResponseAssembler
from .cache import VerificationCache
from .engine import ReconcileRequest, ReconcileStats, ReconciliationEngine
from .fetcher import RemoteCatalogFetcher

__all__ = [
    "ReconcileRequest",
    "ReconcileStats",
    "ReconciliationEngine",
    "RemoteCatalogFetcher",
    "ResponseAssembler",
    "VerificationCache",
]
