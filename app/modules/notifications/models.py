# Outbound notifications: no Supabase tables
# Delivery is delegated to Resend (email) and the WhatsApp Cloud API

"""
External APIs:

Resend:
- resend.Emails.send({"from", "to", "subject", "html"}) -> {"id": "..."}

WhatsApp Cloud API:
- POST https://graph.facebook.com/<version>/<phone_number_id>/messages
  Authorization: Bearer <token>
  {"messaging_product": "whatsapp", "to": "+57...", "type": "text", "text": {"body": "..."}}
  -> {"messaging_product": "whatsapp", "contacts": [{"input", "wa_id"}], "messages": [{"id"}]}

Nothing is persisted: no retry, no queueing, no delivery tracking.
"""
