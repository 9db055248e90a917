from app.modules.notifications.schemas import (
    WhatsAppRequest, WhatsAppResponse, PaymentConfirmationRequest, OrderStatusRequest, OrderStatus
)
from app.modules.notifications.whatsapp_client import WhatsAppClient, WhatsAppAPIError
from typing import Optional
from fastapi import HTTPException
import logging
import re

logger = logging.getLogger(__name__)

# E.164: "+", a non-zero country digit, up to 15 digits total
PHONE_PATTERN = re.compile(r"^\+[1-9]\d{1,14}$")

STATUS_MESSAGES = {
    OrderStatus.PREPARING: (
        "📦 Tu pedido está siendo preparado.\n\n"
        "Nuestro equipo está trabajando para tener tu pedido listo lo antes posible.\n\n"
        "Te notificaremos cuando esté listo para enviar."
    ),
    OrderStatus.SHIPPED: (
        "🚚 ¡Tu pedido fue enviado!\n\n"
        "Ya está en camino a tu dirección.\n\n"
        "Podrás recibirlo pronto. Mantente atento a las actualizaciones de entrega."
    ),
    OrderStatus.DELIVERED: (
        "✅ ¡Tu pedido fue entregado!\n\n"
        "Esperamos que disfrutes tu compra.\n\n"
        "Gracias por confiar en nosotros. 😊"
    ),
    OrderStatus.CANCELED: (
        "❌ Tu pedido fue cancelado.\n\n"
        "Si tienes alguna pregunta o necesitas asistencia, no dudes en contactarnos.\n\n"
        "Estamos aquí para ayudarte."
    ),
}


def is_valid_phone_number(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def payment_confirmation_message(order_id: str) -> str:
    return (
        "🎉 ¡Pago confirmado!\n\n"
        f"Tu pedido #{order_id} fue recibido exitosamente.\n\n"
        "Te mantendremos informado sobre el estado de tu pedido.\n\n"
        "¡Gracias por tu compra! 🛍️"
    )


def order_status_message(status: OrderStatus, order_id: Optional[str] = None) -> str:
    message = STATUS_MESSAGES[status]
    if order_id:
        message = f"Pedido #{order_id}\n\n{message}"
    return message


def _reject(status_code: int, error: str, details: str) -> HTTPException:
    return HTTPException(status_code=status_code, detail={"error": error, "details": details})


class WhatsAppService:
    def __init__(self, client: WhatsAppClient):
        self.client = client

    def send_message(self, request: WhatsAppRequest) -> WhatsAppResponse:
        """Validate and send a free-text message. Invalid input never reaches the API."""
        if not request.phone or not request.message:
            raise _reject(400, "Missing parameters", "Fields 'phone' and 'message' are required")
        if not is_valid_phone_number(request.phone):
            raise _reject(400, "Invalid phone format", "Phone must be in international format (e.g. +573001234567)")
        if not request.message.strip():
            raise _reject(400, "Empty message", "Message cannot be empty")

        logger.info(f"Sending WhatsApp message to {request.phone}")
        try:
            result = self.client.send_text(to=request.phone, body=request.message)
        except WhatsAppAPIError as e:
            logger.error(f"WhatsApp API rejected message to {request.phone}: {e}")
            raise _reject(500, "Error sending message", str(e))
        except Exception as e:
            logger.error(f"Error sending WhatsApp message to {request.phone}: {e}")
            raise _reject(500, "Error sending message", str(e))

        return WhatsAppResponse(
            message="Message sent",
            messageId=result.message_id,
            whatsappId=result.whatsapp_id,
        )

    def send_payment_confirmation(self, request: PaymentConfirmationRequest) -> WhatsAppResponse:
        if not request.order_id:
            raise _reject(400, "Missing parameters", "Field 'order_id' is required")
        return self.send_message(WhatsAppRequest(
            phone=request.phone,
            message=payment_confirmation_message(request.order_id),
        ))

    def send_order_status(self, request: OrderStatusRequest) -> WhatsAppResponse:
        try:
            status = OrderStatus(request.status)
        except ValueError:
            valid = ", ".join(s.value for s in OrderStatus)
            raise _reject(400, "Invalid status", f"Invalid status: {request.status}. Must be one of: {valid}")
        return self.send_message(WhatsAppRequest(
            phone=request.phone,
            message=order_status_message(status, request.order_id),
        ))
