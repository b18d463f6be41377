from __future__ import annotations

from consultbook.application.ports.operator_notifier import OperatorNotifierPort
from consultbook.infrastructure.whatsapp.whatsapp_client import WhatsAppClient


class WhatsAppNotifier(OperatorNotifierPort):
    def __init__(self, client: WhatsAppClient, operator_number: str) -> None:
        self._client = client
        self._operator_number = operator_number

    async def notify(self, text: str) -> None:
        await self._client.send_text(recipient_number=self._operator_number, text=text)
