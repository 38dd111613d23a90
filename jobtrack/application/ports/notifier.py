from abc import ABC, abstractmethod


class NotifierPort(ABC):
    @abstractmethod
    async def send_payment_reminder(self, request_id: str) -> None:
        raise NotImplementedError
