"""
Fixed HTML templates for transactional emails.

Rendered with Jinja2 (autoescaped, strict undefined) so customer-provided
values such as names and addresses cannot inject markup.
"""

from jinja2 import Environment, StrictUndefined
from typing import Any, Dict

STATUS_TEXTS = {
    "pendiente": "Pendiente de Confirmación",
    "confirmado": "Confirmado y en Preparación",
    "enviado": "Enviado",
    "entregado": "Entregado",
    "cancelado": "Cancelado",
}

STATUS_MESSAGES = {
    "pendiente": "Tu pedido está siendo revisado por nuestro equipo. Te notificaremos una vez sea confirmado.",
    "confirmado": "¡Excelente! Tu pedido ha sido confirmado y estamos preparándolo para su envío.",
    "enviado": "Tu pedido está en camino. Recibirás tu paquete pronto.",
    "entregado": "¡Tu pedido ha sido entregado! Esperamos que disfrutes tus productos.",
    "cancelado": "Tu pedido ha sido cancelado. Si esto fue un error o tienes preguntas, contáctanos.",
}

STATUS_COLORS = {
    "pendiente": "#f59e0b",
    "confirmado": "#3b82f6",
    "enviado": "#8b5cf6",
    "entregado": "#10b981",
    "cancelado": "#ef4444",
}

STATUS_EMOJIS = {
    "pendiente": "⏳",
    "confirmado": "✅",
    "enviado": "🚚",
    "entregado": "📦",
    "cancelado": "❌",
}

# Order of the timeline shown in status update emails
TIMELINE = [
    ("pendiente", "Pedido Creado", "Tu pedido fue recibido exitosamente"),
    ("confirmado", "Pedido Confirmado", "Tu pedido está siendo preparado"),
    ("enviado", "Pedido Enviado", "Tu pedido está en camino"),
    ("entregado", "Pedido Entregado", "Tu pedido ha sido entregado con éxito"),
]

_BASE_STYLE = """
    body { font-family: Arial, sans-serif; line-height: 1.6; color: #333; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .content { background: #f9f9f9; padding: 30px; border-radius: 0 0 10px 10px; }
    .footer { text-align: center; margin-top: 20px; color: #666; font-size: 12px; }
"""

REGISTRATION_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<style>
{{ base_style }}
    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .button { display: inline-block; padding: 12px 30px; background: #667eea; color: white; text-decoration: none; border-radius: 5px; margin: 20px 0; }
</style>
</head>
<body>
<div class="container">
  <div class="header"><h1>¡Bienvenido a {{ sender_name }}! 🎉</h1></div>
  <div class="content">
    <h2>Hola {{ name }},</h2>
    <p>Gracias por registrarte en {{ sender_name }}.</p>
    <p>Tu cuenta ha sido creada exitosamente con el rol de <strong>{{ role }}</strong>.</p>
    <p>Ya puedes empezar a explorar nuestro catálogo y hacer tus pedidos.</p>
    <a href="{{ store_url }}" class="button">Ir a la tienda</a>
  </div>
  <div class="footer">
    <p>Este correo fue enviado automáticamente, por favor no respondas.</p>
  </div>
</div>
</body>
</html>
"""

ORDER_CREATED_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<style>
{{ base_style }}
    .header { background: #10b981; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .order-summary { background: white; padding: 20px; border-radius: 5px; margin: 20px 0; }
    .table { width: 100%; border-collapse: collapse; }
    .total { font-size: 18px; font-weight: bold; color: #10b981; text-align: right; padding-top: 10px; border-top: 2px solid #10b981; }
</style>
</head>
<body>
<div class="container">
  <div class="header">
    <h1>✅ ¡Pedido Confirmado!</h1>
    <p>Pedido #{{ orderId }}</p>
  </div>
  <div class="content">
    <h2>Hola,</h2>
    <p>Hemos recibido tu pedido exitosamente. A continuación los detalles:</p>
    <div class="order-summary">
      <h3>Resumen del Pedido</h3>
      <table class="table">
        <thead>
          <tr style="background: #f3f4f6;">
            <th style="padding: 10px; text-align: left;">Producto</th>
            <th style="padding: 10px; text-align: center;">Cantidad</th>
            <th style="padding: 10px; text-align: right;">Precio</th>
            <th style="padding: 10px; text-align: right;">Subtotal</th>
          </tr>
        </thead>
        <tbody>
        {% for item in items %}
          <tr>
            <td style="padding: 10px; border-bottom: 1px solid #eee;">{{ item.product.name }}</td>
            <td style="padding: 10px; border-bottom: 1px solid #eee; text-align: center;">{{ item.quantity }}</td>
            <td style="padding: 10px; border-bottom: 1px solid #eee; text-align: right;">${{ item.product.price | money }}</td>
            <td style="padding: 10px; border-bottom: 1px solid #eee; text-align: right;">${{ (item.product.price * item.quantity) | money }}</td>
          </tr>
        {% endfor %}
        </tbody>
      </table>
      <p class="total">Total: ${{ total | money }}</p>
    </div>
    <div style="background: white; padding: 20px; border-radius: 5px; margin: 20px 0;">
      <h3>Información de Envío</h3>
      <p><strong>Dirección:</strong> {{ shippingAddress }}</p>
      <p><strong>Método de Pago:</strong> {{ "Tarjeta de Crédito" if paymentMethod == "tarjeta" else "Transferencia Bancaria" }}</p>
      <p><strong>Estado:</strong> <span style="color: #f59e0b;">Pendiente</span></p>
    </div>
    <p>Te notificaremos cuando tu pedido sea confirmado y enviado.</p>
  </div>
  <div class="footer">
    <p>Si no realizaste este pedido, contacta con nosotros inmediatamente.</p>
  </div>
</div>
</body>
</html>
"""

ORDER_UPDATED_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<style>
{{ base_style }}
    .header { background: {{ color }}; color: white; padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .status-badge { display: inline-block; padding: 10px 20px; background: {{ color }}; color: white; border-radius: 20px; font-weight: bold; }
    .timeline-item { padding: 15px; background: white; margin: 10px 0; border-radius: 5px; border-left: 4px solid {{ color }}; }
</style>
</head>
<body>
<div class="container">
  <div class="header">
    <h1>{{ emoji }} Estado del Pedido Actualizado</h1>
    <p>Pedido #{{ orderId }}</p>
  </div>
  <div class="content">
    <h2>Hola,</h2>
    <p>Tu pedido ha sido actualizado:</p>
    <div style="text-align: center; margin: 30px 0;">
      <span class="status-badge">{{ status_text }}</span>
    </div>
    {% if status_message %}<p>{{ status_message }}</p>{% endif %}
    <div class="timeline">
      <h3>Línea de Tiempo</h3>
      {% for title, description in timeline %}
      <div class="timeline-item">
        <strong>{{ title }}</strong>
        <p style="color: #666; font-size: 14px;">{{ description }}</p>
      </div>
      {% endfor %}
    </div>
    <p>Si tienes alguna pregunta sobre tu pedido, no dudes en contactarnos.</p>
  </div>
  <div class="footer">
    <p>Este correo fue enviado automáticamente, por favor no respondas.</p>
  </div>
</div>
</body>
</html>
"""


def _money(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value:,}"


_env = Environment(autoescape=True, undefined=StrictUndefined, trim_blocks=True, lstrip_blocks=True)
_env.filters["money"] = _money


def get_status_text(status: str) -> str:
    return STATUS_TEXTS.get(status, status)


def timeline_for(status: str) -> list:
    """Timeline entries reached by an order in the given status; cancelled orders only show creation and confirmation"""
    if status == "pendiente":
        reached = 1
    elif status == "enviado":
        reached = 3
    elif status == "entregado":
        reached = 4
    else:
        reached = 2
    return [(title, description) for _, title, description in TIMELINE[:reached]]


def render_registration(data: Dict[str, Any], sender_name: str, store_url: str) -> str:
    return _env.from_string(REGISTRATION_TEMPLATE).render(
        {**data, "base_style": _BASE_STYLE, "sender_name": sender_name, "store_url": store_url}
    )


def render_order_created(data: Dict[str, Any]) -> str:
    return _env.from_string(ORDER_CREATED_TEMPLATE).render({**data, "base_style": _BASE_STYLE})


def render_order_updated(data: Dict[str, Any]) -> str:
    status = data["status"]
    return _env.from_string(ORDER_UPDATED_TEMPLATE).render({
        **data,
        "base_style": _BASE_STYLE,
        "color": STATUS_COLORS.get(status, "#6b7280"),
        "emoji": STATUS_EMOJIS.get(status, ""),
        "status_text": get_status_text(status),
        "status_message": STATUS_MESSAGES.get(status, ""),
        "timeline": timeline_for(status),
    })
