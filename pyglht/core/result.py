"""
Envelope shared by every computation in pyglht.

A model fit returns Result[LinearParams], a hypothesis batch
Result[GLHTParams]. Solution classes wrap the envelope; the numbers
live in the payload, the provenance (method, timing, backend, non-fatal
diagnostics) beside it.
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable payload plus provenance.

    Attributes:
        params: Computed payload (LinearParams, GLHTParams, JointTestParams)
        info: Method metadata, e.g. {'method': 'qr', 'rank': 3}
        timing: Timer.result() output, or None when not measured
        backend_name: Which backend produced the payload
        warnings: Human-readable non-fatal diagnostics, such as clamped
            variances or untestable rows
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        return any(substring in w for w in self.warnings)
