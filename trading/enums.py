# trading/enums.py
from enum import Enum


class MarketType(str, Enum):
    CRYPTO = "Crypto"
    FOREX = "Forex"
    COMMODITY = "Commodity"


class Direction(str, Enum):
    BUY = "buy"
    SELL = "sell"
    NO_TRADE = "no-trade"
