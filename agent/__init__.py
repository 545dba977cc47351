# agent/__init__.py
from agent.signal_agent import generate_signal, normalize_response
from agent.states import SignalDesk, DeskState

__all__ = ["generate_signal", "normalize_response", "SignalDesk", "DeskState"]
