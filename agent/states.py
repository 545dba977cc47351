# agent/states.py
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Dict, List, Optional

from agent.schemas import Clarification, Error, Signal, SignalResult
from agent.signal_agent import generate_signal
from trading.enums import MarketType
from trading.errors import DeskBusyError
from trading.models import TradingSignal, UserInput
from utils.logger import logger

SYMBOL_PRESETS: Dict[MarketType, List[str]] = {
    MarketType.CRYPTO: ["BTCUSDT", "ETHUSDT", "SOLUSDT"],
    MarketType.FOREX: ["EURUSD", "GBPUSD", "USDJPY"],
    MarketType.COMMODITY: ["XAUUSD", "XAGUSD", "WTI"],
}

TIMEFRAMES = ["15M", "1H", "4H", "1D"]
HTF_BIASES = ["Bullish", "Bearish", "Neutral", ""]  # "" = no HTF filter

DEFAULT_INPUT = UserInput(
    market_type=MarketType.CRYPTO,
    symbol="BTCUSDT",
    timeframe="1H",
    capital="10000",
    risk="1",
    htf_trend="Bullish",
)

SignalGenerator = Callable[[UserInput], Awaitable[SignalResult]]


@dataclass
class DeskState:
    user_input: UserInput = field(default_factory=lambda: DEFAULT_INPUT)
    signals: List[TradingSignal] = field(default_factory=list)   # newest first
    clarification: Optional[str] = None
    last_error: Optional[str] = None
    busy: bool = False


class SignalDesk:
    """
    Form state plus received signals. One submission at a time; ``busy`` gates
    new submissions while a backend call is in flight.
    """

    def __init__(self, state: Optional[DeskState] = None, generator: SignalGenerator = generate_signal):
        self.state = state or DeskState()
        self._generate = generator

    @classmethod
    def from_cfg(cls, cfg: Dict, generator: SignalGenerator = generate_signal) -> "SignalDesk":
        defaults = (cfg.get("desk", {}) or {}).get("defaults") or {}
        user_input = UserInput(**{**DEFAULT_INPUT.model_dump(), **defaults})
        return cls(DeskState(user_input=user_input), generator=generator)

    # ---- form edits ----
    def change_market_type(self, market_type: MarketType | str) -> UserInput:
        market = MarketType(market_type)
        self.state.user_input = self.state.user_input.model_copy(
            update={"market_type": market, "symbol": SYMBOL_PRESETS[market][0]}
        )
        return self.state.user_input

    def select_symbol(self, symbol: str) -> UserInput:
        return self.update_input(symbol=symbol)

    def update_input(self, **fields) -> UserInput:
        if "market_type" in fields:
            fields["market_type"] = MarketType(fields["market_type"])
        # model_copy skips validation, so rebuild to keep symbol uppercased
        data = self.state.user_input.model_dump()
        data.update(fields)
        self.state.user_input = UserInput(**data)
        return self.state.user_input

    # ---- actions ----
    async def submit(self) -> SignalResult:
        if self.state.busy:
            raise DeskBusyError("a signal request is already in flight")

        self.state.busy = True
        self.state.clarification = None
        self.state.last_error = None
        user_input = self.state.user_input
        try:
            result = await self._generate(user_input)
        finally:
            self.state.busy = False

        if isinstance(result, Signal):
            self.state.signals.insert(0, result.signal)
        elif isinstance(result, Clarification):
            self.state.clarification = result.message
        elif isinstance(result, Error):
            self.state.clarification = result.message
            self.state.last_error = str(result.cause) if result.cause else result.message
        logger.info(f"Submission for {user_input.symbol} finished: {result.kind}")
        return result

    def clear_signals(self) -> None:
        logger.info(f"Clearing {len(self.state.signals)} signal(s)")
        self.state.signals.clear()
