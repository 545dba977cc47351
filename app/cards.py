# app/cards.py
import math
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel

from trading.enums import Direction
from trading.models import TradingSignal, UserInput
from trading.sizing import calculate_position_size, parse_price

Theme = Literal["emerald", "rose", "slate"]

THEMES: Dict[Direction, Theme] = {
    Direction.BUY: "emerald",
    Direction.SELL: "rose",
    Direction.NO_TRADE: "slate",
}


class TargetView(BaseModel):
    label: str
    price: str


class SignalCard(BaseModel):
    direction: Direction
    symbol: str
    timestamp: str
    theme: Theme
    reason: str
    warnings: str
    # trade data, absent for no-trade
    entry_zone: Optional[str] = None
    stoploss: Optional[str] = None
    targets: List[TargetView] = []
    rr_ratio: Optional[str] = None
    position_size_hint: Optional[str] = None
    calculated_size: Optional[str] = None


def _to_float(v: str) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return math.nan


def build_card(signal: TradingSignal, user_input: UserInput) -> SignalCard:
    card = SignalCard(
        direction=signal.direction,
        symbol=signal.symbol,
        timestamp=signal.timestamp,
        theme=THEMES.get(signal.direction, "slate"),
        reason=signal.reason,
        warnings=signal.warnings,
    )
    if signal.is_no_trade:
        return card

    # cross-check the model's hint against the desk's own sizing
    capital, risk = _to_float(user_input.capital), _to_float(user_input.risk)
    calculated = "N/A" if math.isnan(capital) or math.isnan(risk) else calculate_position_size(
        capital,
        risk,
        parse_price(signal.entry_zone),
        parse_price(signal.stoploss),
        user_input.market_type,
    )
    return card.model_copy(update={
        "entry_zone": signal.entry_zone,
        "stoploss": signal.stoploss,
        "targets": [TargetView(label=f"TP {i}", price=tp) for i, tp in enumerate(signal.targets, 1)],
        "rr_ratio": signal.rr_ratio,
        "position_size_hint": signal.position_size_hint,
        "calculated_size": calculated,
    })


def build_cards(signals: List[TradingSignal], user_input: UserInput) -> List[SignalCard]:
    return [build_card(s, user_input) for s in signals]
