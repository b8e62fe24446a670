"""Exception hierarchy for the Theta engine.

Every failure surfaces as a subclass of ThetaError carrying the context a
caller needs for a diagnostic (symbol name, formal/argument names, node path).
"""

from __future__ import annotations

from typing import Any, Sequence


class ThetaError(Exception):
    """ Base class for all Theta errors"""
    pass


class ThetaTypeError(ThetaError):
    """ Raised when a value of the wrong kind is used (non-Node, non-Environment, bad Call head)"""

    def __init__(self, message: str, value: Any = None):
        super().__init__(message)
        self.value = value


class ThetaUnboundSymbol(ThetaError):
    """ Raised when a symbol is used before it is bound"""

    def __init__(self, name: str, message: str | None = None):
        super().__init__(message or f"object '{name}' not found")
        self.name = name


class ThetaNotCallable(ThetaError):
    """ Raised when the head of a call does not resolve to a callable"""

    def __init__(self, value: Any, name: str | None = None):
        what = f"'{name}'" if name is not None else repr(value)
        super().__init__(f"attempt to apply non-function {what}")
        self.value = value
        self.name = name


class ThetaArityError(ThetaError):
    """ Raised when the arguments supplied to a callable do not fit its formals"""

    def __init__(self, message: str, arguments: Sequence[str] = ()):
        super().__init__(message)
        self.arguments = tuple(arguments)


class ThetaAmbiguousArgumentMatch(ThetaError):
    """ Raised when an argument name matches more than one formal, or a formal matches more than one argument"""

    def __init__(self, argument: str, candidates: Sequence[str], message: str | None = None):
        if message is None:
            message = f"argument '{argument}' matches multiple formal arguments: {', '.join(candidates)}"
        super().__init__(message)
        self.argument = argument
        self.candidates = tuple(candidates)


class ThetaRecursiveDefaultEvaluation(ThetaError):
    """ Raised when a promise is re-entered while it is being forced"""

    def __init__(self, expr: Any, name: str | None = None):
        target = f"'{name}'" if name is not None else str(expr)
        super().__init__(
            f"promise already under evaluation: recursive default argument reference or earlier problems? ({target})"
        )
        self.expr = expr
        self.name = name


class ThetaMissingValueAccess(ThetaError):
    """ Raised when the missing-argument marker is read or copied into a binding"""

    def __init__(self, name: str | None = None):
        if name is None:
            message = "the missing argument marker cannot be bound to a variable"
        else:
            message = f"argument '{name}' is missing, with no default"
        super().__init__(message)
        self.name = name


class ThetaUnknownNodeKind(ThetaError):
    """ Raised when a value outside the four node kinds reaches a node dispatch"""

    def __init__(self, value: Any, path: Sequence[int] = ()):
        super().__init__(f"unknown node kind {type(value).__name__} at path {list(path)}")
        self.value = value
        self.path = tuple(path)


class ThetaRecursionLimitExceeded(ThetaError):
    """ Raised when evaluation or tree walking nests deeper than the configured limit"""

    def __init__(self, limit: int, path: Sequence[int] = ()):
        message = f"evaluation nested too deeply: limit of {limit} exceeded"
        if path:
            message += f" at path {list(path)}"
        super().__init__(message)
        self.limit = limit
        self.path = tuple(path)


class ThetaBudgetExceeded(ThetaError):
    """ Raised when a driver-imposed node or time budget runs out"""

    def __init__(self, kind: str, limit: float, used: float):
        super().__init__(f"{kind} budget exceeded: used {used} of {limit}")
        self.kind = kind
        self.limit = limit
        self.used = used
