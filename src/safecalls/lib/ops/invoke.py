"""The one generic sentinel-checking call wrapper."""

from __future__ import annotations

from typing import Any

import structlog

from safecalls.lib import errstate
from safecalls.lib.errors import LastError, SafeCallError, error_class_for
from safecalls.lib.ops.registry import NativeOperation, get_operation
from safecalls.lib.sentinel import strictly_equal

logger = structlog.get_logger(__name__)


def _forwarded_kwargs(spec: NativeOperation, kwargs: dict[str, Any]) -> dict[str, Any]:
    if not spec.omit_defaults:
        return kwargs
    forwarded = dict(kwargs)
    for keyword, placeholder in spec.omit_defaults:
        if keyword in forwarded and strictly_equal(forwarded[keyword], placeholder):
            del forwarded[keyword]
    return forwarded


def _build_error(spec: NativeOperation, last_error: LastError | None) -> SafeCallError:
    if last_error is None:
        short_name = spec.name.partition(".")[2]
        last_error = LastError(code=None, message=f"{short_name}() failed")
    return error_class_for(spec.kind)(spec.name, last_error)


def invoke(spec: NativeOperation, *args: Any, **kwargs: Any) -> Any:
    """Call ``spec.native`` and turn its failure sentinel into a raised error.

    Arguments are forwarded unchanged (lists, dicts and ``Ref`` slots are the
    same objects the native writes into), except keywords that sit at one of
    the operation's omit-placeholders, which are left out entirely. Any
    non-sentinel result is returned as-is.
    """

    forwarded = _forwarded_kwargs(spec, kwargs)
    with errstate.error_scope() as frame:
        result = spec.native(*args, **forwarded)
        captured = errstate.capture(frame)
        if spec.sentinel.matches(result, captured):
            error = _build_error(spec, captured)
            errstate.remember(error)
            logger.debug(
                "native call failed",
                operation=spec.name,
                kind=spec.kind.value,
                errno=error.last_error.code,
                sentinel=spec.sentinel.label,
            )
            raise error
    return result


def call_operation(name: str, *args: Any, **kwargs: Any) -> Any:
    """Resolve ``name`` in the registry and :func:`invoke` it."""

    return invoke(get_operation(name), *args, **kwargs)
