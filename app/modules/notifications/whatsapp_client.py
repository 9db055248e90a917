"""
WhatsApp Cloud API client.

Sends free-text session messages through
POST /<version>/<phone_number_id>/messages.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional
import requests


class WhatsAppAPIError(RuntimeError):
    def __init__(self, status_code: int, response_json: Dict[str, Any]):
        self.status_code = status_code
        self.response_json = response_json
        super().__init__(f"WhatsApp API error: {status_code} - {response_json}")


@dataclass(frozen=True)
class WhatsAppSendResult:
    message_id: Optional[str]
    whatsapp_id: Optional[str]
    response_json: Dict[str, Any]


class WhatsAppClient:
    def __init__(
        self,
        token: str,
        messages_url: str,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._token = token
        self._messages_url = messages_url
        self._timeout = timeout
        self._session = session or requests.Session()

    def send_text(self, *, to: str, body: str) -> WhatsAppSendResult:
        payload = {
            "messaging_product": "whatsapp",
            "to": to,
            "type": "text",
            "text": {"body": body},
        }

        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }

        resp = self._session.post(
            self._messages_url,
            json=payload,
            headers=headers,
            timeout=self._timeout,
        )

        try:
            data = resp.json()
        except ValueError:
            data = {"raw_text": resp.text}

        if not 200 <= resp.status_code < 300:
            raise WhatsAppAPIError(resp.status_code, data)

        messages = data.get("messages") or [{}]
        contacts = data.get("contacts") or [{}]
        return WhatsAppSendResult(
            message_id=messages[0].get("id"),
            whatsapp_id=contacts[0].get("wa_id"),
            response_json=data,
        )
