from abc import ABC, abstractmethod

from bettracker.models.wager import Wager, WagerCreate, WagerUpdate


class WagerRemote(ABC):
    """Authoritative wager store the client collection is synced against.

    Implementations raise bettracker.errors.WagerApiError on failure
    (PlanLimitError when the free plan is exhausted).
    """

    @abstractmethod
    async def get_wagers(self) -> list[Wager]:
        """Fetch the user's full wager collection, newest first."""
        ...

    @abstractmethod
    async def create_wager(self, payload: WagerCreate) -> Wager:
        """Create a wager and return it with its server-assigned id."""
        ...

    @abstractmethod
    async def update_wager(self, wager_id: str, update: WagerUpdate) -> Wager:
        """Settle a wager and return the stored record."""
        ...

    @abstractmethod
    async def delete_wager(self, wager_id: str) -> None:
        ...
