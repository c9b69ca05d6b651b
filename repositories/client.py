"""
Supabase client initialization.

This module contains *only* the database connection setup. Repositories receive
the client explicitly so tests and alternative stores can stand in for it.

Environment variables required:
- SUPABASE_URL: Your Supabase project URL
- SUPABASE_KEY: Your Supabase API key (use a server-side key only on the backend)
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Callable, TypeVar

import httpx
from dotenv import load_dotenv
from postgrest.exceptions import APIError
from supabase import Client, create_client  # type: ignore[import-not-found]

from domain.errors import ConfigurationError, DuplicateError, NotFoundError, RepositoryIOError

env_path = Path(__file__).parent.parent / ".env"

# PostgreSQL error codes surfaced through PostgREST.
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

T = TypeVar("T")


def create_supabase_client() -> Client:
    """
    Create a Supabase client from SUPABASE_URL / SUPABASE_KEY.

    Raises:
        ConfigurationError: If either variable is missing
    """

    load_dotenv(dotenv_path=env_path)
    url = os.getenv("SUPABASE_URL")
    key = os.getenv("SUPABASE_KEY")

    if not url:
        raise ConfigurationError(
            "Missing environment variable: SUPABASE_URL. "
            "Set SUPABASE_URL to your Supabase project URL."
        )
    if not key:
        raise ConfigurationError(
            "Missing environment variable: SUPABASE_KEY. "
            "Set SUPABASE_KEY to your Supabase API key."
        )

    return create_client(url, key)


def run_query(action: str, query: Callable[[], T]) -> T:
    """
    Execute a PostgREST call and translate its failures into domain errors.

    Unique violations become DuplicateError, foreign-key violations become
    NotFoundError, everything else (API or transport) becomes RepositoryIOError.
    """

    try:
        response = query()
    except APIError as e:
        code = getattr(e, "code", None)
        if code == UNIQUE_VIOLATION:
            raise DuplicateError(f"Failed to {action}: {e.message}") from e
        if code == FOREIGN_KEY_VIOLATION:
            raise NotFoundError(f"Failed to {action}: {e.message}") from e
        raise RepositoryIOError(f"Failed to {action}: {e.message}") from e
    except httpx.HTTPError as e:
        raise RepositoryIOError(f"Failed to {action}: {e}") from e

    error = getattr(response, "error", None)
    if error:
        raise RepositoryIOError(f"Failed to {action}: {error}")
    return response


def rows_of(response: Any) -> list[dict[str, Any]]:
    return getattr(response, "data", None) or []


__all__ = ["create_supabase_client", "rows_of", "run_query"]
