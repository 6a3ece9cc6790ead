"""Logging and input validation around wardrobe tool calls."""

from __future__ import annotations

import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, Optional, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from wardrobe_app.logging_config import get_logger, log_event, operation_context

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

PREVIEW_KEYS = 6


def _preview(kwargs: Dict[str, Any]) -> Dict[str, Any]:
    preview = dict(list(kwargs.items())[:PREVIEW_KEYS])
    if len(kwargs) > PREVIEW_KEYS:
        preview["truncated"] = True
    return preview


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_tool(
    tool_name: str,
    input_model: Optional[type[BaseModel]] = None,
    on_validation_error: Optional[Callable[[ValidationError], Any]] = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Log start, completion and failure of a tool and validate its keyword input.

    With ``input_model`` set, keyword arguments are validated and replaced by
    the model's dump. A validation failure is handed to ``on_validation_error``
    when given and re-raised otherwise; the tool body does not run.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            with operation_context(f"tool:{tool_name}") as correlation_id:
                if input_model is not None:
                    try:
                        kwargs = input_model.model_validate(kwargs).model_dump()
                    except ValidationError as exc:
                        log_event(
                            LOGGER,
                            logging.WARNING,
                            "tool_validation_failed",
                            tool=tool_name,
                            errors=[error.get("msg") for error in exc.errors()],
                        )
                        if on_validation_error is None:
                            raise
                        return on_validation_error(exc)

                log_event(LOGGER, logging.INFO, "tool_call_started", tool=tool_name, kwargs=_preview(kwargs))
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    log_event(
                        LOGGER,
                        logging.ERROR,
                        "tool_call_failed",
                        tool=tool_name,
                        duration_ms=_elapsed_ms(start),
                        exc_info=True,
                    )
                    raise
                log_event(
                    LOGGER,
                    logging.INFO,
                    "tool_call_completed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                )
                return result

        return wrapper

    return decorator


__all__ = ["instrument_tool"]
