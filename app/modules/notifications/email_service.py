import resend
from jinja2 import TemplateError
from app.config.settings import Settings
from app.modules.notifications import email_templates
from app.modules.notifications.schemas import EmailRequest, EmailType
from typing import Any, Dict
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

REQUIRED_DATA = {
    EmailType.REGISTRATION: ["name", "role"],
    EmailType.ORDER_CREATED: ["orderId", "items", "total", "shippingAddress", "paymentMethod"],
    EmailType.ORDER_UPDATED: ["orderId", "status"],
}


class EmailService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def build_email(self, request: EmailRequest) -> Dict[str, Any]:
        """Assemble Resend parameters (sender, subject, HTML) for a request"""
        if not request.to or not request.type:
            raise HTTPException(status_code=400, detail="Missing to or type")
        try:
            email_type = EmailType(request.type)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid email type: {request.type}")

        data = request.data or {}
        missing = [key for key in REQUIRED_DATA[email_type] if data.get(key) in (None, "")]
        if missing:
            raise HTTPException(status_code=400, detail=f"Missing data fields: {', '.join(missing)}")

        try:
            if email_type == EmailType.REGISTRATION:
                sender = self._sender("noreply")
                subject = f"¡Bienvenido a {self.settings.email_sender_name}!"
                html = email_templates.render_registration(
                    data, self.settings.email_sender_name, self.settings.store_url
                )
            elif email_type == EmailType.ORDER_CREATED:
                sender = self._sender("pedidos")
                subject = f"Pedido #{data['orderId']} - Confirmación"
                html = email_templates.render_order_created(data)
            else:
                sender = self._sender("pedidos")
                subject = f"Pedido #{data['orderId']} - {email_templates.get_status_text(data['status'])}"
                html = email_templates.render_order_updated(data)
        except (TemplateError, TypeError, ValueError, KeyError, AttributeError) as e:
            raise HTTPException(status_code=400, detail=f"Invalid data for {email_type.value} email: {e}")

        return {
            "from": sender,
            "to": [request.to],
            "subject": subject,
            "html": html,
        }

    def send(self, request: EmailRequest) -> str:
        """Send one transactional email; returns the Resend message id"""
        params = self.build_email(request)
        if not self.settings.resend_api_key:
            logger.error("RESEND_API_KEY is not configured")
            raise HTTPException(status_code=500, detail="Email delivery is not configured")

        try:
            resend.api_key = self.settings.resend_api_key
            response = resend.Emails.send(params)
        except Exception as e:
            logger.error(f"Error sending {request.type} email to {request.to}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        message_id = response.get("id") if isinstance(response, dict) else getattr(response, "id", None)
        logger.info(f"Sent {request.type} email to {request.to} ({message_id})")
        return message_id

    def _sender(self, mailbox: str) -> str:
        return f"{self.settings.email_sender_name} <{mailbox}@{self.settings.email_sender_domain}>"
