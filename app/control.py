# app/control.py
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from agent.prompts import SUPPORTED_SYMBOLS
from agent.states import HTF_BIASES, SYMBOL_PRESETS, TIMEFRAMES, SignalDesk
from app.cards import SignalCard, build_cards
from trading.enums import MarketType
from trading.errors import DeskBusyError
from trading.models import UserInput
from utils.logger import logger


class InputPatch(BaseModel):
    symbol: Optional[str] = None
    timeframe: Optional[str] = None
    capital: Optional[str] = None
    risk: Optional[str] = None
    htf_trend: Optional[str] = None


class MarketTypeReq(BaseModel):
    market_type: MarketType


class DeskView(BaseModel):
    user_input: UserInput
    busy: bool
    clarification: Optional[str] = None
    signals: List[SignalCard] = []


class SubmitResp(BaseModel):
    kind: str
    clarification: Optional[str] = None
    signal: Optional[SignalCard] = None


def build_app(desk: SignalDesk) -> FastAPI:
    app = FastAPI(title="Signal Desk")

    def _view() -> DeskView:
        st = desk.state
        return DeskView(
            user_input=st.user_input,
            busy=st.busy,
            clarification=st.clarification,
            signals=build_cards(st.signals, st.user_input),
        )

    @app.get("/healthz")
    async def healthz():
        return {"ok": True}

    @app.get("/presets")
    async def presets() -> Dict[str, Any]:
        return {
            "symbols": {m.value: syms for m, syms in SYMBOL_PRESETS.items()},
            "supported": {m.value: syms for m, syms in SUPPORTED_SYMBOLS.items()},
            "timeframes": TIMEFRAMES,
            "htf_biases": HTF_BIASES,
        }

    @app.get("/state", response_model=DeskView)
    async def get_state():
        return _view()

    @app.patch("/input", response_model=UserInput)
    async def patch_input(req: InputPatch):
        return desk.update_input(**req.model_dump(exclude_none=True))

    @app.put("/input/market-type", response_model=UserInput)
    async def put_market_type(req: MarketTypeReq):
        return desk.change_market_type(req.market_type)

    @app.post("/signals", response_model=SubmitResp)
    async def submit():
        try:
            result = await desk.submit()
        except DeskBusyError as e:
            logger.warning(f"Rejected submission: {e}")
            raise HTTPException(status_code=409, detail=str(e))
        if result.kind == "signal":
            card = build_cards([result.signal], desk.state.user_input)[0]
            return SubmitResp(kind=result.kind, signal=card)
        return SubmitResp(kind=result.kind, clarification=result.message)

    @app.delete("/signals")
    async def clear_signals():
        desk.clear_signals()
        return {"ok": True}

    return app
