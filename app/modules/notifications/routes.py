from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from app.config import settings
from app.modules.notifications.email_service import EmailService
from app.modules.notifications.schemas import (
    EmailRequest, EmailResponse, WhatsAppRequest, WhatsAppResponse,
    PaymentConfirmationRequest, OrderStatusRequest
)
from app.modules.notifications.whatsapp_client import WhatsAppClient
from app.modules.notifications.whatsapp_service import WhatsAppService
from typing import Type, TypeVar
import logging

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])

BodyModel = TypeVar("BodyModel", bound=BaseModel)


def get_email_service() -> EmailService:
    return EmailService(settings)


def get_whatsapp_service() -> WhatsAppService:
    """Refuses the request before the body is read when WhatsApp credentials are missing"""
    if not settings.whatsapp_token or not settings.whatsapp_phone_number_id:
        logger.error("WHATSAPP_TOKEN or WHATSAPP_PHONE_NUMBER_ID is not configured")
        raise HTTPException(status_code=500, detail={
            "error": "Incomplete configuration",
            "details": "Missing WHATSAPP_TOKEN or WHATSAPP_PHONE_NUMBER_ID environment variables",
        })
    client = WhatsAppClient(
        token=settings.whatsapp_token,
        messages_url=settings.whatsapp_messages_url,
        timeout=settings.whatsapp_timeout,
    )
    return WhatsAppService(client)


async def read_body(request: Request, model: Type[BodyModel]) -> BodyModel:
    """Parse the JSON body into model; WhatsApp routes read it only after the configuration check"""
    try:
        data = await request.json()
    except ValueError:
        raise RequestValidationError([{
            "type": "json_invalid", "loc": ("body", 0), "msg": "JSON decode error", "input": {}
        }])
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body",) + tuple(err["loc"])} for err in e.errors()]
        )


@router.post("/send-email", response_model=EmailResponse)
async def send_email(
    body: EmailRequest,
    service: EmailService = Depends(get_email_service)
):
    """Send a registration / order created / order updated email"""
    message_id = service.send(body)
    return EmailResponse(messageId=message_id)


# Request is taken instead of a body model so the configuration dependency runs before JSON decoding
@router.post("/whatsapp-notify", response_model=WhatsAppResponse, openapi_extra={
    "requestBody": {"content": {"application/json": {"schema": WhatsAppRequest.model_json_schema()}}}
})
async def whatsapp_notify(
    request: Request,
    service: WhatsAppService = Depends(get_whatsapp_service)
):
    """Send a free-text WhatsApp message to an E.164 phone number"""
    body = await read_body(request, WhatsAppRequest)
    return service.send_message(body)


@router.post("/whatsapp-notify/payment-confirmation", response_model=WhatsAppResponse, openapi_extra={
    "requestBody": {"content": {"application/json": {"schema": PaymentConfirmationRequest.model_json_schema()}}}
})
async def whatsapp_payment_confirmation(
    request: Request,
    service: WhatsAppService = Depends(get_whatsapp_service)
):
    """Send the payment confirmation message for an order"""
    body = await read_body(request, PaymentConfirmationRequest)
    return service.send_payment_confirmation(body)


@router.post("/whatsapp-notify/order-status", response_model=WhatsAppResponse, openapi_extra={
    "requestBody": {"content": {"application/json": {"schema": OrderStatusRequest.model_json_schema()}}}
})
async def whatsapp_order_status(
    request: Request,
    service: WhatsAppService = Depends(get_whatsapp_service)
):
    """Send the fixed message for an order status (PREPARING, SHIPPED, DELIVERED, CANCELED)"""
    body = await read_body(request, OrderStatusRequest)
    return service.send_order_status(body)
