from typing import Protocol
from src.subtrack.domain.contracts.repositories import SubscriptionRepo

class UoW(Protocol):
    subscriptions: SubscriptionRepo

    def commit(self) -> None: ...
    def rollback(self) -> None: ...
