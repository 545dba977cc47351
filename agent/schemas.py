# agent/schemas.py
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from trading.enums import Direction
from trading.models import TradingSignal


class SignalOutput(BaseModel):
    """Exactly the object the backend must return. Unknown keys are rejected."""
    model_config = ConfigDict(extra="forbid")

    direction: Direction
    entry_zone: str
    stoploss: str
    targets: List[str]
    position_size_hint: str
    rr_ratio: str
    reason: str
    warnings: str

    @field_validator("direction", mode="before")
    @classmethod
    def _norm_direction(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("targets", mode="before")
    @classmethod
    def _coerce_list(cls, v):
        if v is None: return []
        if isinstance(v, str): return [v.strip()]
        if isinstance(v, (list, tuple)): return [str(x).strip() for x in v if x is not None]
        return v


SIGNAL_FIELDS: List[str] = list(SignalOutput.model_fields)

# Wire schema handed to the backend; kept explicit so the contract reads the same
# on both sides of the boundary.
RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "direction": {"type": "string", "enum": [d.value for d in Direction]},
        "entry_zone": {"type": "string"},
        "stoploss": {"type": "string"},
        "targets": {"type": "array", "items": {"type": "string"}},
        "position_size_hint": {"type": "string"},
        "rr_ratio": {"type": "string"},
        "reason": {"type": "string"},
        "warnings": {"type": "string"},
    },
    "required": SIGNAL_FIELDS,
    "additionalProperties": False,
}

RESPONSE_FORMAT: Dict[str, Any] = {
    "type": "json_schema",
    "json_schema": {
        "name": "trading_signal",
        "strict": True,
        "schema": RESPONSE_SCHEMA,
    },
}


# ---- call results ----

@dataclass(frozen=True)
class Signal:
    signal: TradingSignal
    kind: Literal["signal"] = "signal"


@dataclass(frozen=True)
class Clarification:
    message: str
    kind: Literal["clarification"] = "clarification"


@dataclass(frozen=True)
class Error:
    message: str
    cause: Optional[BaseException] = None
    kind: Literal["error"] = "error"


SignalResult = Union[Signal, Clarification, Error]
