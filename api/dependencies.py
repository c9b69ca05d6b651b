"""
FastAPI dependencies.

The service graph is built once per process on first use. Tests replace
`get_services` through `app.dependency_overrides`.
"""

from __future__ import annotations

from functools import lru_cache

from services.wiring import Services, build_supabase_services


@lru_cache(maxsize=1)
def get_services() -> Services:
    return build_supabase_services()
