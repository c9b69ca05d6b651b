"""
Customer Events API Endpoint.

Receives customer events from the host platform and issues the customer's
monthly code when the customer is eligible.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_services
from api.models import CustomerEventRequest, CustomerEventResponse
from domain.customer import Customer
from domain.errors import ConfigurationError, CouponEngineError, NotFoundError
from services.wiring import Services

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/customer-events",
    response_model=CustomerEventResponse,
    summary="Handle Customer Event",
    description="Issue this month's discount code for an eligible customer."
)
def handle_customer_event(request: CustomerEventRequest, services: Services = Depends(get_services)):
    """
    Process a customer event.

    **Process:**
    1. Skips if the module is disabled for the customer's website
    2. Skips if the customer's group is not eligible
    3. Derives the customer's code for the current month
    4. Ensures the month's discount rule exists
    5. Attaches the code to the rule (no-op if already issued)

    Repeating the same event within a month returns the same code.
    """
    try:
        customer = Customer(
            customer_id=request.customer_id,
            group_id=request.group_id,
            website_id=request.website_id,
        )
        result = services.events.handle(customer)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ConfigurationError as e:
        logger.error("Coupon engine misconfigured: %s", e)
        raise HTTPException(status_code=500, detail="Coupon engine is misconfigured")
    except NotFoundError as e:
        raise HTTPException(status_code=409, detail=f"Failed to issue coupon: {str(e)}")
    except CouponEngineError as e:
        raise HTTPException(status_code=503, detail=f"Failed to issue coupon: {str(e)}")

    return CustomerEventResponse(status=result.status.value, code=result.code)
