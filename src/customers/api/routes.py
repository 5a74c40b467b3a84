"""FastAPI endpoints for customer profiles and preferences."""

from fastapi import APIRouter, BackgroundTasks, Depends, Response

from customers.api.errors import BODY_TOO_LARGE, INVALID_CUSTOMER, INVALID_PREFERENCES
from customers.api.schemas import (
    CreateCustomerRequest,
    CustomerResponse,
    ErrorResponse,
    PreferencesPayload,
    PreferencesResponse,
)
from customers.customer.events import AnalyticsNotificationEvent
from customers.customer.service import CustomerNotFound, CustomerService

router = APIRouter(prefix="/customers", tags=["customers"])

_PAYLOAD_RESPONSES = {
    400: {"model": ErrorResponse, "description": f"{INVALID_CUSTOMER} / {INVALID_PREFERENCES}"},
    413: {"model": ErrorResponse, "description": BODY_TOO_LARGE},
}


def get_customer_service() -> CustomerService:
    return CustomerService()


@router.get("/{customer_id}", response_model=CustomerResponse, responses={404: {"description": "Not found"}})
async def get_customer(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    try:
        customer = service.get_customer(customer_id)
    except CustomerNotFound:
        return Response(status_code=404)
    return CustomerResponse.from_customer(customer)


@router.post("", status_code=201, response_model=CustomerResponse, responses=_PAYLOAD_RESPONSES)
async def create_customer(
    body: CreateCustomerRequest,
    background_tasks: BackgroundTasks,
    service: CustomerService = Depends(get_customer_service),
) -> CustomerResponse:
    customer = service.register_customer(
        email=body.email,
        tier=body.tier,
        preferences=body.preferences.to_preferences(),
    )
    background_tasks.add_task(
        service.publisher.notify_analytics,
        AnalyticsNotificationEvent.customer_created(customer),
    )
    return CustomerResponse.from_customer(customer)


@router.get(
    "/{customer_id}/preferences",
    response_model=PreferencesResponse,
    responses={404: {"description": "Not found"}},
)
async def get_preferences(customer_id: str, service: CustomerService = Depends(get_customer_service)):
    try:
        preferences = service.get_preferences(customer_id)
    except CustomerNotFound:
        return Response(status_code=404)
    return PreferencesResponse.from_preferences(preferences)


@router.patch("/{customer_id}/preferences", response_model=PreferencesResponse, responses=_PAYLOAD_RESPONSES)
async def update_preferences(
    customer_id: str,
    body: PreferencesPayload,
    background_tasks: BackgroundTasks,
    service: CustomerService = Depends(get_customer_service),
) -> PreferencesResponse:
    updated = await service.update_preferences(customer_id, body.to_preferences())
    background_tasks.add_task(
        service.publisher.notify_analytics,
        AnalyticsNotificationEvent.preferences_updated(customer_id),
    )
    return PreferencesResponse.from_preferences(updated.preferences)
