"""Domain exceptions shared by services, the API client and the HTTP layer."""

from typing import Optional


class BettrackerError(Exception):
    """Base class for tracker errors."""


class WagerApiError(BettrackerError):
    """The remote wager API rejected a request or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PlanLimitError(WagerApiError):
    """The free plan wager limit has been reached."""

    def __init__(self, message: str = "Free plan limit reached. Upgrade to Pro for unlimited bets."):
        super().__init__(message, status_code=403)
