from pydantic import BaseModel, EmailStr
from typing import Any, Dict, Optional
from enum import Enum


class EmailType(str, Enum):
    REGISTRATION = "registration"
    ORDER_CREATED = "order_created"
    ORDER_UPDATED = "order_updated"


class OrderStatus(str, Enum):
    PREPARING = "PREPARING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELED = "CANCELED"


class EmailRequest(BaseModel):
    to: Optional[EmailStr] = None
    type: Optional[str] = None
    data: Dict[str, Any] = {}


class EmailResponse(BaseModel):
    success: bool = True
    messageId: Optional[str] = None


class WhatsAppRequest(BaseModel):
    phone: Optional[str] = None
    message: Optional[str] = None


class PaymentConfirmationRequest(BaseModel):
    phone: Optional[str] = None
    order_id: Optional[str] = None


class OrderStatusRequest(BaseModel):
    phone: Optional[str] = None
    status: Optional[str] = None
    order_id: Optional[str] = None


class WhatsAppResponse(BaseModel):
    success: bool = True
    message: str = "Message sent"
    messageId: Optional[str] = None
    whatsappId: Optional[str] = None
