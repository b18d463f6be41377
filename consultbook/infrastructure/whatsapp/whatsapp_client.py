from __future__ import annotations

import logging

import httpx


class WhatsAppClient:
    def __init__(
        self,
        access_token: str,
        phone_number_id: str,
        graph_api_version: str = "v20.0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._access_token = access_token
        self._send_endpoint = f"https://graph.facebook.com/{graph_api_version}/{phone_number_id}/messages"
        self._client = client or httpx.AsyncClient(timeout=10.0)
        self._logger = logging.getLogger(__name__)

    async def send_text(self, recipient_number: str, text: str) -> None:
        payload = {
            "messaging_product": "whatsapp",
            "to": recipient_number,
            "type": "text",
            "text": {"preview_url": False, "body": text},
        }
        headers = {"Authorization": f"Bearer {self._access_token}"}
        resp = await self._client.post(self._send_endpoint, json=payload, headers=headers)
        if resp.status_code >= 400:
            try:
                error_json = resp.json()
                error_code = error_json.get("error", {}).get("code")
                error_message = error_json.get("error", {}).get("message")
            except ValueError:
                error_code = None
                error_message = resp.text

            self._logger.error(
                "WhatsApp send failed",
                extra={
                    "status": resp.status_code,
                    "error_code": error_code,
                    "error": error_message,
                    "text_length": len(text),
                },
            )
            resp.raise_for_status()
