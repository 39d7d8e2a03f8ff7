# family_views/revit/safe_api.py

from typing import Any, Callable, Dict, Optional, TypeVar

T = TypeVar("T")

POLICY_DEFAULT = "default"
POLICY_RAISE = "raise"
_POLICIES = (POLICY_DEFAULT, POLICY_RAISE)

# Context keys that map onto Diagnostics fields instead of going to extra
_EVENT_KEYS = ("elem_id", "view_id", "label")


def _record_failure(diag, phase, callsite, exc, ctx):
    if diag is None:
        return
    try:
        diag.error(
            phase=phase,
            callsite=callsite,
            message="Host read failed",
            exc=exc,
            elem_id=ctx.get("elem_id"),
            view_id=ctx.get("view_id"),
            label=ctx.get("label"),
            extra={k: v for k, v in ctx.items() if k not in _EVENT_KEYS} or None,
        )
    except Exception:
        # A broken recorder must not replace the host exception
        pass


def safe_call(
    diag: Any,
    *,
    phase: str,
    callsite: str,
    fn: Callable[[], T],
    default: T,
    context: Optional[Dict[str, Any]] = None,
    policy: str = POLICY_DEFAULT,
) -> T:
    """
    Run one Revit API read; on failure record an ERROR event, then either
    return default or re-raise.

    policy:
      - "default": record, return default
      - "raise":   record, re-raise

    Reserve "default" for reads the caller can do without (element names,
    bounding boxes, LoadFamily results). Writes inside a transaction must
    propagate so the transaction rolls back.
    """
    if policy not in _POLICIES:
        raise ValueError("policy must be one of {0}, got {1!r}".format(_POLICIES, policy))
    try:
        return fn()
    except Exception as e:
        _record_failure(diag, phase, callsite, e, context or {})
        if policy == POLICY_RAISE:
            raise
        return default


def safe_attr(diag: Any, obj: Any, attr: str, default: Any = None, *, phase: str = "revit", elem_id=None) -> Any:
    """Read obj.<attr> through safe_call; callsite is recorded as '<Type>.<attr>'."""
    return safe_call(
        diag,
        phase=phase,
        callsite="{0}.{1}".format(type(obj).__name__, attr),
        fn=lambda: getattr(obj, attr),
        default=default,
        context={"elem_id": elem_id} if elem_id is not None else None,
    )
