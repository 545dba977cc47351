# trading/errors.py
class SignalError(Exception):
    """Base signal-desk error."""
    def __init__(self, msg: str = ""):
        super().__init__(msg)
        self.msg = msg

    def __str__(self):
        return self.msg or self.__class__.__name__


class EmptyResponse(SignalError):
    """Backend answered without any text."""


class SchemaViolation(SignalError):
    """Backend text is not a JSON object of the required shape."""

    def __init__(self, msg: str = "", raw_text: str = ""):
        super().__init__(msg)
        self.raw_text = raw_text


class TransportFault(SignalError):
    """Any failure while contacting the backend."""

    def __init__(self, msg: str = "", cause: BaseException | None = None):
        super().__init__(msg)
        self.cause = cause

    def __str__(self):
        base = super().__str__()
        if self.cause is not None:
            return f"{base} [{type(self.cause).__name__}: {self.cause}]"
        return base


class DeskBusyError(SignalError):
    """A submission is already in flight."""
