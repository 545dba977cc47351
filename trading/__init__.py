# trading/__init__.py
"""
Trading domain for the signal desk.

Provides:
- Market / direction enums
- Request and signal models
- Error taxonomy for backend negotiation
- Position-sizing helpers
"""
from trading.enums import Direction, MarketType
from trading.models import TradingSignal, UserInput
from trading.sizing import calculate_position_size, parse_price

__all__ = [
    "Direction",
    "MarketType",
    "TradingSignal",
    "UserInput",
    "calculate_position_size",
    "parse_price",
]
