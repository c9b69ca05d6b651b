"""
Domain: error taxonomy.

Every failure the engine surfaces derives from CouponEngineError so callers can
separate engine failures from programming errors.
"""

from __future__ import annotations


class CouponEngineError(Exception):
    """Base class for coupon engine failures."""


class ConfigurationError(CouponEngineError):
    """Missing or invalid secret or setting (e.g. empty SALT, non-numeric discount)."""


class NotFoundError(CouponEngineError):
    """An entity a dependent step relied on is absent (e.g. rule pruned mid-attach)."""


class DuplicateError(CouponEngineError):
    """The store rejected a create because of a uniqueness constraint."""


class RepositoryIOError(CouponEngineError, RuntimeError):
    """Transient failure talking to the persistence layer."""
