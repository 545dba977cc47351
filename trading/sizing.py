# trading/sizing.py
import math
import re

from trading.enums import MarketType

FOREX_LOT_UNITS = 100_000
# Commodities quoted above this are treated as metals sized in ounces (gold).
GOLD_PRICE_THRESHOLD = 1000

_PRICE_RE = re.compile(r"(\d+\.?\d*)")


def _is_number(v) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)


def calculate_position_size(
    capital: float,
    risk_percent: float,
    entry: float,
    stop_loss: float,
    market_type: MarketType | str,
) -> str:
    """
    Human readable size for risking ``risk_percent`` of ``capital`` between
    ``entry`` and ``stop_loss``. Returns ``"N/A"`` instead of raising.
    """
    if not _is_number(entry) or not _is_number(stop_loss) or entry == stop_loss:
        return "N/A"

    risk_amount = capital * (risk_percent / 100)
    distance = abs(entry - stop_loss)
    market = market_type.value if isinstance(market_type, MarketType) else str(market_type)

    if market == MarketType.FOREX.value:
        lots = risk_amount / (distance * FOREX_LOT_UNITS)
        return f"{lots:.2f} Lots"
    if market == MarketType.COMMODITY.value and entry > GOLD_PRICE_THRESHOLD:
        contracts = risk_amount / distance
        return f"{contracts:.2f} Oz/Units"
    units = risk_amount / distance
    return f"{units:.4f} Units"


def parse_price(text: str | None) -> float:
    """First decimal number found in ``text``, or ``nan``."""
    if not text:
        return math.nan
    match = _PRICE_RE.search(text)
    return float(match.group(1)) if match else math.nan
