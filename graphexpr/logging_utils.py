"""DEBUG call tracing for the compiler and generator modules."""

from __future__ import annotations

import inspect
import logging
import reprlib
from functools import wraps
from typing import Any, Callable, Iterable, Mapping, MutableMapping, Optional, TypeVar, cast

import numpy as np

F = TypeVar("F", bound=Callable[..., Any])

_WRAPPED_FLAG = "_debug_logging_wrapped"

_short = reprlib.Repr()
_short.maxstring = 120
_short.maxother = 160
_short.maxlist = _short.maxtuple = _short.maxdict = 8


def summarize_array(value: np.ndarray, *, max_items: int = 6) -> str:
    """Short description of an array: shape, dtype and either values or range."""
    head = f"ndarray(shape={tuple(value.shape)}, dtype={value.dtype})"
    if value.size == 0:
        return head
    if value.size <= max_items:
        return f"{head}, values={_short.repr(value.tolist())}"
    if not np.issubdtype(value.dtype, np.number):
        return head
    finite = value[np.isfinite(value)]
    bounds = f", min={float(finite.min()):.6g}, max={float(finite.max()):.6g}" if finite.size else ""
    return f"{head}{bounds}, size={value.size}"


def safe_repr(value: Any, *, max_items: int = 5, max_length: int = 400) -> str:
    if isinstance(value, np.ndarray):
        return summarize_array(value, max_items=max_items)
    if isinstance(value, Mapping):
        entries = [f"{safe_repr(k)}: {safe_repr(v)}" for k, v in list(value.items())[:max_items]]
        if len(value) > max_items:
            entries.append("...")
        return "{%s}" % ", ".join(entries)
    if isinstance(value, (list, tuple)):
        entries = [safe_repr(item) for item in value[:max_items]]
        if len(value) > max_items:
            entries.append("...")
        template = "(%s)" if isinstance(value, tuple) else "[%s]"
        return template % ", ".join(entries)
    text = _short.repr(value)
    return text if len(text) <= max_length else text[:max_length] + "... (truncated)"


def _describe_call(args: tuple, kwargs: Mapping[str, Any]) -> str:
    described = []
    if args:
        described.append("args=[%s]" % ", ".join(map(safe_repr, args)))
    if kwargs:
        described.append("kwargs={%s}" % ", ".join(f"{k}={safe_repr(v)}" for k, v in kwargs.items()))
    return ", ".join(described) or "no-args"


def debug_log_call(logger: logging.Logger, *, name: Optional[str] = None) -> Callable[[F], F]:
    """Decorator logging entry, result and exceptions of a call at DEBUG."""

    def decorator(func: F) -> F:
        if getattr(func, _WRAPPED_FLAG, False):
            return func
        label = name or func.__qualname__

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any):
            if not logger.isEnabledFor(logging.DEBUG):
                return func(*args, **kwargs)
            logger.debug("Entering %s (%s)", label, _describe_call(args, kwargs))
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                logger.debug("%s raised %s: %s", label, type(exc).__name__, exc)
                raise
            logger.debug("Exiting %s -> %s", label, safe_repr(result))
            return result

        setattr(wrapper, _WRAPPED_FLAG, True)
        return cast(F, wrapper)

    return decorator


def apply_debug_logging(
    namespace: MutableMapping[str, Any],
    *,
    logger: Optional[logging.Logger] = None,
    skip: Optional[Iterable[str]] = None,
) -> None:
    """Wrap a module's public functions and the plain methods of its classes.

    Call at the bottom of the module with ``globals()``. Names starting with an
    underscore and names in ``skip`` are left alone.
    """
    module_name = namespace.get("__name__")
    logger = logger or logging.getLogger(module_name or __name__)
    skipped = set(skip or ())

    def own(obj: Any) -> bool:
        return getattr(obj, "__module__", None) == module_name

    for attr, value in list(namespace.items()):
        if attr in skipped or attr.startswith("_") or not own(value):
            continue
        if inspect.isfunction(value):
            namespace[attr] = debug_log_call(logger, name=attr)(value)
        elif inspect.isclass(value):
            for method_name, method in list(vars(value).items()):
                label = f"{attr}.{method_name}"
                if method_name.startswith("__") or label in skipped:
                    continue
                if inspect.isfunction(method) and own(method):
                    setattr(value, method_name, debug_log_call(logger, name=label)(method))
