"""Outcome of best-effort side effects.

Cache writes and remember-token updates never raise into the caller. They
report what happened through a BestEffortResult, which callers are free to
ignore.
"""

from __future__ import annotations

from pydantic import BaseModel


class BestEffortResult(BaseModel):
    """Fire-and-forget outcome.

    Attributes:
        ok: Whether the side effect is known to have succeeded.
        detail: Short description of the failure, if any.
    """

    ok: bool
    detail: str | None = None

    model_config = {"frozen": True}

    @classmethod
    def succeeded(cls) -> BestEffortResult:
        return cls(ok=True)

    @classmethod
    def failed(cls, detail: str) -> BestEffortResult:
        return cls(ok=False, detail=detail)

    def __bool__(self) -> bool:
        return self.ok
