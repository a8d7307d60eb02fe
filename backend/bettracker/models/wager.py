import datetime as dt
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from bettracker.config import settings
from bettracker.utils import parse_wager_date, wager_date_to_api


class BetType(str, Enum):
    moneyline = "moneyline"
    spread = "spread"
    over_under = "over_under"
    prop = "prop"


class BetResult(str, Enum):
    win = "win"
    loss = "loss"
    push = "push"


def _check_settlement(result: Optional[BetResult], payout: Optional[float]) -> None:
    if payout is None:
        return
    if result is None:
        raise ValueError("A payout can only be set together with a result.")
    if result == BetResult.loss and payout > 0:
        raise ValueError("A lost wager cannot have a positive payout.")


def _number_or_nan(value: Any) -> Any:
    """Anything but a real int/float (None, strings, bools) becomes NaN."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return float("nan")
    return value


def _parse_date_input(value: Any) -> Any:
    if isinstance(value, (str, dt.datetime)):
        return parse_wager_date(value)
    return value


class Wager(BaseModel):
    """One tracked wager as held in the client collection.

    stake and odds are plain floats: stored records are not re-validated.
    A missing or non-numeric value is stored as NaN and the stats aggregator
    skips the record.
    Input rules live on WagerCreate / WagerUpdate.

    result is None while the wager is pending. payout is the total return
    (stake + profit) for a win, the returned stake for a push, None or 0
    for a loss.
    """
    id: str
    sport: str
    team: str
    opponent: str
    bet_type: BetType = Field(
        BetType.moneyline,
        validation_alias=AliasChoices("bet_type", "betType"),
    )
    odds: float = Field(None, validate_default=True)
    stake: float = Field(None, validate_default=True)
    date: dt.date
    result: Optional[BetResult] = None
    payout: Optional[float] = None
    notes: Optional[str] = None

    normalize_date = field_validator("date", mode="before")(_parse_date_input)
    numbers_or_nan = field_validator("odds", "stake", mode="before")(_number_or_nan)

    @property
    def is_settled(self) -> bool:
        return self.result is not None

    @classmethod
    def from_api(cls, doc: Dict[str, Any]) -> "Wager":
        """Convert a wager API document (upper-case enums, ISO datetime) to a Wager."""
        result = doc.get("result")
        return cls(
            id=str(doc["id"]),
            sport=doc["sport"],
            team=doc["team"],
            opponent=doc["opponent"],
            bet_type=str(doc.get("betType") or BetType.moneyline.value).lower(),
            odds=doc.get("odds"),
            stake=doc.get("stake"),
            date=doc["date"],
            result=str(result).lower() if result else None,
            payout=doc.get("payout") or None,
            notes=doc.get("notes") or None,
        )


# ---------- Request models ----------

class WagerCreate(BaseModel):
    """Request body for logging a new wager.

    result/payout are normally absent; the legacy import sends already
    settled wagers through the same model.
    """
    sport: str = Field(min_length=1, max_length=50)
    team: str = Field(min_length=1, max_length=100)
    opponent: str = Field(min_length=1, max_length=100)
    bet_type: BetType = Field(
        BetType.moneyline,
        validation_alias=AliasChoices("bet_type", "betType"),
    )
    odds: float = Field(allow_inf_nan=False)
    stake: float = Field(gt=0, allow_inf_nan=False)
    date: dt.date
    result: Optional[BetResult] = None
    payout: Optional[float] = Field(None, ge=0, allow_inf_nan=False)
    notes: Optional[str] = None

    normalize_date = field_validator("date", mode="before")(_parse_date_input)

    @field_validator("odds")
    @classmethod
    def odds_non_zero(cls, v: float) -> float:
        if v == 0:
            raise ValueError("Odds must be non-zero American odds.")
        return v

    @field_validator("stake")
    @classmethod
    def stake_within_limit(cls, v: float) -> float:
        if v > settings.MAX_STAKE:
            raise ValueError(f"Stake cannot exceed {settings.MAX_STAKE:g}.")
        return v

    @field_validator("notes")
    @classmethod
    def notes_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > settings.NOTES_MAX_LENGTH:
            raise ValueError(f"Notes cannot exceed {settings.NOTES_MAX_LENGTH} characters.")
        return v

    @model_validator(mode="after")
    def settlement_consistent(self) -> "WagerCreate":
        _check_settlement(self.result, self.payout)
        return self

    def to_wager(self, wager_id: str) -> Wager:
        return Wager(id=wager_id, **self.model_dump())

    def to_api(self) -> Dict[str, Any]:
        return {
            "sport": self.sport,
            "team": self.team,
            "opponent": self.opponent,
            "betType": self.bet_type.value.upper(),
            "odds": self.odds,
            "stake": self.stake,
            "date": wager_date_to_api(self.date),
            "result": self.result.value.upper() if self.result else None,
            "payout": self.payout,
            "notes": self.notes,
        }


class WagerUpdate(BaseModel):
    """Request body for settling a wager."""
    result: Optional[BetResult] = None
    payout: Optional[float] = Field(None, gt=0, allow_inf_nan=False)

    @model_validator(mode="after")
    def settlement_consistent(self) -> "WagerUpdate":
        _check_settlement(self.result, self.payout)
        return self

    def changes(self) -> Dict[str, Any]:
        """Fields to merge into the local record."""
        return {"result": self.result, "payout": self.payout}

    def to_api(self) -> Dict[str, Any]:
        return {
            "result": self.result.value.upper() if self.result else None,
            "payout": self.payout,
        }


class WagerCollection(BaseModel):
    """Request body carrying a user's full wager collection."""
    wagers: List[Wager] = []
