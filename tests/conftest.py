# tests/conftest.py
import os
import sys
import tempfile
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

os.environ.setdefault("SIGNAL_DESK_LOG_DIR", tempfile.mkdtemp(prefix="signal-desk-logs-"))

import json
import yaml
import pytest

from trading.enums import MarketType
from trading.models import UserInput


class FakeChain:
    """Stands in for the prompt | llm | parser chain."""

    def __init__(self, text=None, exc: Exception | None = None):
        self.text = text
        self.exc = exc
        self.calls = []

    async def ainvoke(self, inputs, config=None):
        self.calls.append(inputs)
        if self.exc is not None:
            raise self.exc
        return self.text


def signal_json(**overrides) -> str:
    payload = {
        "direction": "buy",
        "entry_zone": "91750 - 91850",
        "stoploss": "91200",
        "targets": ["92800", "93500"],
        "position_size_hint": "Risk $100 (1% of $10000); approx 0.18 BTC",
        "rr_ratio": "1:2.0",
        "reason": "Price pulled back into prior resistance turned support on the 1H, in line with the bullish 4H trend.",
        "warnings": "Exit if a 1H candle closes below 91200.",
    }
    payload.update(overrides)
    return json.dumps(payload)


@pytest.fixture
def test_cfg():
    def load_cfg():
        with open(Path(__file__).resolve().parents[1] / "config.yaml", "r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    return load_cfg()


@pytest.fixture
def user_input():
    return UserInput(
        market_type=MarketType.CRYPTO,
        symbol="BTCUSDT",
        timeframe="1H",
        capital="10000",
        risk="1",
        htf_trend="Bullish",
    )
