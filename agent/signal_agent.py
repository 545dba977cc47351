# agent/signal_agent.py
"""
Request/response negotiation with the signal backend.

``generate_signal`` never raises: every outcome is folded into a
``Signal``, ``Clarification`` or ``Error`` result.
"""
import json
from datetime import datetime
from typing import Any, Dict, Optional

from langchain_core.runnables import Runnable
from pydantic import ValidationError

from agent.chains import create_signal_chain
from agent.prompts import HTF_NOT_PROVIDED, PROMPT_VERSION
from agent.schemas import Clarification, Error, Signal, SignalOutput, SignalResult
from trading.enums import Direction
from trading.errors import EmptyResponse, SchemaViolation, TransportFault
from trading.models import TradingSignal, UserInput
from utils.logger import logger, request_context
from utils.time import receipt_time

GENERIC_ERROR_MESSAGE = (
    "I encountered an error processing the market data. "
    "This could be due to connectivity or symbol recognition issues."
)

CLARIFICATION_MARKERS = ("?", "clarify", "please provide")

# Owned by the desk, never taken from the model.
_LOCAL_FIELDS = ("symbol", "timestamp")


def build_prompt_inputs(user_input: UserInput) -> Dict[str, str]:
    return {
        "market_type": user_input.market_type.value,
        "symbol": user_input.symbol,
        "timeframe": user_input.timeframe,
        "htf_trend": user_input.htf_trend or HTF_NOT_PROVIDED,
        "capital": user_input.capital,
        "risk": user_input.risk,
    }


def is_clarification(output: SignalOutput) -> bool:
    """A no-trade whose reason asks the user for something is a question, not a signal."""
    if output.direction is not Direction.NO_TRADE:
        return False
    reason = output.reason.lower()
    return any(marker in reason for marker in CLARIFICATION_MARKERS)


def parse_signal_output(text: Optional[str]) -> SignalOutput:
    if not text or not text.strip():
        raise EmptyResponse("No response text from model")

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaViolation(f"response is not JSON: {e.msg}", raw_text=text) from e
    except RecursionError as e:
        raise SchemaViolation("response JSON is nested too deeply", raw_text=text) from e

    if not isinstance(data, dict):
        raise SchemaViolation(f"expected a JSON object, got {type(data).__name__}", raw_text=text)

    for key in _LOCAL_FIELDS:
        if key in data:
            logger.debug(f"Dropping model-supplied '{key}'={data[key]!r}")
            data.pop(key)

    try:
        return SignalOutput.model_validate(data)
    except ValidationError as e:
        raise SchemaViolation(f"response does not match schema: {e.error_count()} error(s)", raw_text=text) from e


def normalize_response(
    text: Optional[str],
    user_input: UserInput,
    now: Optional[datetime] = None,
) -> SignalResult:
    """Turn raw backend text into a call result for ``user_input``."""
    with logger.contextualize(symbol=user_input.symbol):
        try:
            output = parse_signal_output(text)
        except EmptyResponse as e:
            logger.error(str(e))
            return Error(GENERIC_ERROR_MESSAGE, cause=e)
        except SchemaViolation as e:
            logger.warning(f"{e}; treating text as clarification")
            return Clarification(e.raw_text.strip())

        if is_clarification(output):
            logger.info("backend asked for clarification")
            return Clarification(output.reason)

        signal = TradingSignal(
            **output.model_dump(),
            timestamp=receipt_time(now),
            symbol=user_input.symbol,
        )
        logger.info(f"{signal.direction.value} entry={signal.entry_zone} sl={signal.stoploss} rr={signal.rr_ratio}")
        return Signal(signal)


async def generate_signal(user_input: UserInput, chain: Optional[Runnable] = None) -> SignalResult:
    inputs = build_prompt_inputs(user_input)

    with request_context(user_input.symbol):
        logger.info(f"Requesting signal (policy {PROMPT_VERSION}): {inputs}")
        try:
            if chain is None:
                chain = create_signal_chain()
            text = await chain.ainvoke(inputs)
        except Exception as e:
            fault = TransportFault("signal backend call failed", cause=e)
            logger.exception(str(fault))
            return Error(GENERIC_ERROR_MESSAGE, cause=fault)

        logger.debug(f"raw response: {text!r}")
        return normalize_response(text, user_input)
