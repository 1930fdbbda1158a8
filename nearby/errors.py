"""Batch-level errors raised around the pipeline."""
from __future__ import annotations


class NearbyError(Exception):
    pass


class InvalidSearchRequest(NearbyError, ValueError):
    pass


class ProviderError(NearbyError, RuntimeError):
    pass
