# trading/models.py
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trading.enums import Direction, MarketType


class UserInput(BaseModel):
    """Form parameters for one signal request. Values are passed through as typed."""
    model_config = ConfigDict(frozen=True, use_enum_values=False)

    market_type: MarketType = MarketType.CRYPTO
    symbol: str = "BTCUSDT"
    timeframe: str = "1H"
    capital: str = "10000"   # USD, kept as typed in the form
    risk: str = "1"          # percent of capital per trade
    htf_trend: Optional[str] = None

    @field_validator("symbol", mode="before")
    @classmethod
    def _upper_symbol(cls, v):
        return v.upper() if isinstance(v, str) else v


class TradingSignal(BaseModel):
    direction: Direction
    entry_zone: str
    stoploss: str
    targets: List[str] = Field(default_factory=list)
    position_size_hint: str
    rr_ratio: str
    reason: str
    warnings: str
    timestamp: str
    symbol: str

    @property
    def is_no_trade(self) -> bool:
        return self.direction is Direction.NO_TRADE
