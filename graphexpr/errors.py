from typing import Optional


class GraphExprError(Exception):
    """Base class for errors raised by graphexpr."""


class CompileError(GraphExprError):
    """Expression text does not parse under the supported grammar."""

    def __init__(
        self,
        message: str,
        *,
        text: Optional[str] = None,
        line: Optional[int] = None,
        col: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.text = text
        self.line = line
        self.col = col


class EvalError(GraphExprError):
    """Evaluation hit an undefined identifier or an unsupported operation."""

    def __init__(self, message: str, *, name: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.name = name


class GenerationCancelled(GraphExprError):
    pass
