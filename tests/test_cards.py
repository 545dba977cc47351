# tests/test_cards.py
from agent.signal_agent import normalize_response
from app.cards import build_card
from trading.enums import Direction, MarketType
from trading.models import UserInput

from conftest import signal_json


def _sig(user_input, **overrides):
    return normalize_response(signal_json(**overrides), user_input).signal


def test_buy_card_carries_trade_data_and_local_size(user_input):
    card = build_card(_sig(user_input), user_input)

    assert card.theme == "emerald"
    assert card.entry_zone == "91750 - 91850"
    assert card.stoploss == "91200"
    assert [(t.label, t.price) for t in card.targets] == [("TP 1", "92800"), ("TP 2", "93500")]
    assert card.rr_ratio == "1:2.0"
    # $100 risk over 91750 - 91200
    assert card.calculated_size == "0.1818 Units"


def test_sell_card_theme(user_input):
    card = build_card(_sig(user_input, direction="sell"), user_input)
    assert card.theme == "rose"
    assert card.direction is Direction.SELL


def test_no_trade_card_hides_trade_fields(user_input):
    card = build_card(_sig(user_input, direction="no-trade", reason="Range-bound, no clean structure."), user_input)

    assert card.theme == "slate"
    assert card.entry_zone is None
    assert card.stoploss is None
    assert card.targets == []
    assert card.rr_ratio is None
    assert card.position_size_hint is None
    assert card.calculated_size is None
    assert card.reason == "Range-bound, no clean structure."


def test_gold_card_sized_in_ounces():
    ui = UserInput(market_type=MarketType.COMMODITY, symbol="XAUUSD", capital="5000", risk="2")
    sig = _sig(ui, entry_zone="2350.5", stoploss="2340.5")
    assert build_card(sig, ui).calculated_size == "10.00 Oz/Units"


def test_unparseable_prices_or_capital_give_na(user_input):
    sig = _sig(user_input, stoploss="see chart")
    assert build_card(sig, user_input).calculated_size == "N/A"

    no_capital = user_input.model_copy(update={"capital": ""})
    assert build_card(_sig(no_capital), no_capital).calculated_size == "N/A"
