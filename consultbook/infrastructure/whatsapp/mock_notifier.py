from __future__ import annotations

import logging

from consultbook.application.ports.operator_notifier import OperatorNotifierPort


class MockOperatorNotifier(OperatorNotifierPort):
    def __init__(self) -> None:
        self.messages: list[str] = []
        self._logger = logging.getLogger(__name__)

    async def notify(self, text: str) -> None:
        self.messages.append(text)
        self._logger.info("Mock operator notification", extra={"text": text})
