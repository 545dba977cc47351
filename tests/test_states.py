# tests/test_states.py
import asyncio

import pytest

from agent.schemas import Clarification, Error, Signal
from agent.signal_agent import normalize_response
from agent.states import DEFAULT_INPUT, SYMBOL_PRESETS, DeskState, SignalDesk
from trading.enums import MarketType
from trading.errors import DeskBusyError

from conftest import signal_json


class ScriptedGenerator:
    """Returns queued results in order and records the inputs it saw."""

    def __init__(self, *results):
        self.results = list(results)
        self.seen = []

    async def __call__(self, user_input):
        self.seen.append(user_input)
        return self.results.pop(0)


def _signal(user_input, **overrides):
    return normalize_response(signal_json(**overrides), user_input)


def test_default_state():
    desk = SignalDesk(generator=ScriptedGenerator())
    assert desk.state.user_input == DEFAULT_INPUT
    assert desk.state.signals == []
    assert desk.state.clarification is None
    assert desk.state.busy is False


@pytest.mark.parametrize("market,expected", [
    (MarketType.FOREX, "EURUSD"),
    (MarketType.COMMODITY, "XAUUSD"),
    ("Crypto", "BTCUSDT"),
])
def test_market_change_resets_symbol(market, expected):
    desk = SignalDesk(generator=ScriptedGenerator())
    desk.select_symbol("SOLUSDT")
    ui = desk.change_market_type(market)
    assert ui.symbol == expected
    assert ui.market_type is MarketType(market)
    assert ui.timeframe == DEFAULT_INPUT.timeframe


def test_update_input_uppercases_symbol():
    desk = SignalDesk(generator=ScriptedGenerator())
    ui = desk.update_input(symbol="ethusdt", capital="2500", htf_trend="")
    assert ui.symbol == "ETHUSDT"
    assert ui.capital == "2500"
    assert ui.htf_trend == ""


@pytest.mark.asyncio
async def test_signals_are_prepended_newest_first():
    first = _signal(DEFAULT_INPUT, entry_zone="100")
    second = _signal(DEFAULT_INPUT, entry_zone="200")
    gen = ScriptedGenerator(first, second)
    desk = SignalDesk(generator=gen)

    await desk.submit()
    await desk.submit()

    assert [s.entry_zone for s in desk.state.signals] == ["200", "100"]
    assert desk.state.busy is False
    assert gen.seen == [DEFAULT_INPUT, DEFAULT_INPUT]


@pytest.mark.asyncio
async def test_clarification_replaces_slot_and_keeps_signals():
    gen = ScriptedGenerator(
        _signal(DEFAULT_INPUT),
        Clarification("Which timeframe?"),
        Clarification("Please provide capital."),
    )
    desk = SignalDesk(generator=gen)

    await desk.submit()
    await desk.submit()
    assert desk.state.clarification == "Which timeframe?"
    await desk.submit()
    assert desk.state.clarification == "Please provide capital."
    assert len(desk.state.signals) == 1


@pytest.mark.asyncio
async def test_submit_clears_previous_clarification():
    gen = ScriptedGenerator(Clarification("Which timeframe?"), _signal(DEFAULT_INPUT))
    desk = SignalDesk(generator=gen)

    await desk.submit()
    result = await desk.submit()
    assert isinstance(result, Signal)
    assert desk.state.clarification is None


@pytest.mark.asyncio
async def test_error_result_is_shown_in_clarification_slot():
    desk = SignalDesk(generator=ScriptedGenerator(Error("generic", cause=RuntimeError("boom"))))
    await desk.submit()
    assert desk.state.clarification == "generic"
    assert desk.state.last_error == "boom"
    assert desk.state.signals == []


@pytest.mark.asyncio
async def test_clear_keeps_clarification():
    state = DeskState(signals=[_signal(DEFAULT_INPUT).signal], clarification="Which timeframe?")
    desk = SignalDesk(state=state, generator=ScriptedGenerator())
    desk.clear_signals()
    assert desk.state.signals == []
    assert desk.state.clarification == "Which timeframe?"


@pytest.mark.asyncio
async def test_busy_flag_rejects_overlapping_submit():
    release = asyncio.Event()

    async def slow_generator(user_input):
        await release.wait()
        return Clarification("done")

    desk = SignalDesk(generator=slow_generator)
    task = asyncio.create_task(desk.submit())
    await asyncio.sleep(0)
    assert desk.state.busy is True

    with pytest.raises(DeskBusyError):
        await desk.submit()

    release.set()
    await task
    assert desk.state.busy is False
    assert desk.state.clarification == "done"


@pytest.mark.asyncio
async def test_busy_flag_released_when_generator_raises():
    async def broken(user_input):
        raise RuntimeError("unexpected")

    desk = SignalDesk(generator=broken)
    with pytest.raises(RuntimeError):
        await desk.submit()
    assert desk.state.busy is False


def test_from_cfg_uses_desk_defaults(test_cfg):
    cfg = dict(test_cfg)
    cfg["desk"] = {"defaults": {"market_type": "Forex", "symbol": "gbpusd", "risk": "0.5"}}
    desk = SignalDesk.from_cfg(cfg, generator=ScriptedGenerator())
    assert desk.state.user_input.market_type is MarketType.FOREX
    assert desk.state.user_input.symbol == "GBPUSD"
    assert desk.state.user_input.risk == "0.5"
    assert desk.state.user_input.capital == DEFAULT_INPUT.capital


def test_presets_first_symbols():
    assert SYMBOL_PRESETS[MarketType.CRYPTO][0] == "BTCUSDT"
    assert SYMBOL_PRESETS[MarketType.FOREX][0] == "EURUSD"
    assert SYMBOL_PRESETS[MarketType.COMMODITY][0] == "XAUUSD"
