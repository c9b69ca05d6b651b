"""
Domain: the customer a code is issued to.

Only an opaque, stable identifier is carried; contact details such as the email
address never reach code generation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class Customer:
    customer_id: str
    group_id: int
    website_id: Optional[int] = None

    def __post_init__(self) -> None:
        if not str(self.customer_id).strip():
            raise ValueError("customer_id must not be empty")
