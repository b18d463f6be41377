from abc import ABC, abstractmethod


class OperatorNotifierPort(ABC):
    @abstractmethod
    async def notify(self, text: str) -> None:
        raise NotImplementedError
