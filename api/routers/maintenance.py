"""
Maintenance API Endpoints.

Lets an external scheduler trigger pruning of expired discount rules.
"""

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_services
from api.models import PruneResponse
from domain.errors import CouponEngineError
from services.wiring import Services

router = APIRouter()


@router.post(
    "/maintenance/prune",
    response_model=PruneResponse,
    summary="Prune Expired Rules",
    description="Delete owned discount rules whose validity window has elapsed."
)
def prune_expired_rules(services: Services = Depends(get_services)):
    """
    Run the prune job once.

    Returns `enabled=false` and `deleted_count=0` when the module is disabled.
    Rules that fail to delete are skipped and left for the next run.
    """
    try:
        enabled = services.config.is_enabled()
        deleted = services.prune_job.run()
    except CouponEngineError as e:
        raise HTTPException(
            status_code=503,
            detail=f"Failed to prune rules: {str(e)}"
        )

    return PruneResponse(enabled=enabled, deleted_count=deleted)
