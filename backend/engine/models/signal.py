"""Signal data models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SignalType(str, Enum):
    """Trade direction."""

    LONG = "LONG"
    SHORT = "SHORT"


class SignalStatus(str, Enum):
    """Signal lifecycle status. The engine only emits ACTIVE."""

    ACTIVE = "ACTIVE"
    HIT_TP = "HIT_TP"
    HIT_SL = "HIT_SL"
    PENDING = "PENDING"


def signal_id_for(candle_time: int) -> str:
    """Deterministic ID so replays of the same candles yield the same IDs."""
    return f"sig-{candle_time}"


class Signal(BaseModel):
    """Risk-annotated trading signal emitted for one candle.

    Signals are immutable; outcome resolution produces a copy with a
    new status instead of updating in place.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    candle_time: int
    type: SignalType
    entry_price: float
    stop_loss: float
    take_profit: float
    status: SignalStatus = SignalStatus.ACTIVE
    reason: str = ""
    confidence: int
    is_ai: bool = False

    @property
    def is_long(self) -> bool:
        return self.type == SignalType.LONG

    @property
    def risk_amount(self) -> float:
        """Get the risk amount (distance to stop loss)."""
        if self.is_long:
            return self.entry_price - self.stop_loss
        return self.stop_loss - self.entry_price

    @property
    def reward_amount(self) -> float:
        """Get the reward amount (distance to take profit)."""
        if self.is_long:
            return self.take_profit - self.entry_price
        return self.entry_price - self.take_profit
