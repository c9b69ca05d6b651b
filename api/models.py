"""
API Request and Response Models.

Pydantic models for validating API requests and serializing responses.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ============================================================================
# Customer Event Models
# ============================================================================

class CustomerEventRequest(BaseModel):
    """Customer event delivered by the host platform."""
    customer_id: str = Field(
        ...,
        min_length=1,
        description="Stable internal customer id (never an email address)"
    )
    group_id: int = Field(..., description="Customer group id")
    website_id: Optional[int] = Field(None, description="Website scope of the customer")

    class Config:
        json_schema_extra = {
            "example": {
                "customer_id": "100234",
                "group_id": 4,
                "website_id": 1
            }
        }


class CustomerEventResponse(BaseModel):
    """Outcome of processing a customer event."""
    status: str  # "issued", "skipped_disabled", "skipped_ineligible"
    code: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "status": "issued",
                "code": "ABX7K2PQ"
            }
        }


# ============================================================================
# Maintenance Models
# ============================================================================

class PruneResponse(BaseModel):
    """Result of a prune run."""
    enabled: bool
    deleted_count: int

