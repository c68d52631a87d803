"""Exception hierarchy and explicit unsupported results for brepcore.

Four kinds of failure show up in the kernel and they are kept apart:

``PreconditionError``
    The caller handed in something invalid: faces on different
    surfaces for a same-surface operation, a face without boundaries,
    a boundary edge that does not lie on its surface, a disconnected
    loop.  These are bugs at the call site.

``PointNotOnLoopError``
    A point that was expected to lie on a boundary loop does not.
    This is recoverable; it usually means the caller supplied a
    malformed loop.

``RemeshError``
    An internal invariant broke while reassembling boundary fragments
    (no continuation segment, odd crossing count).  It carries the
    diagnostic context needed to reproduce the failure.

``UnsupportedCaseError`` / ``Unsupported``
    The geometry is valid but the kernel has no implementation for the
    case (curve extraction on coincident curved surfaces, a sphere
    under non-uniform scale).  Functions that return tagged results
    hand back an ``Unsupported`` value; functions that must return a
    concrete object raise ``UnsupportedCaseError``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


class BrepError(Exception):
    """Base class for every error raised by brepcore."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class PreconditionError(BrepError, ValueError):
    """Raised when an operation is called with invalid inputs."""


class PointNotOnLoopError(BrepError, ValueError):
    """Raised when a point does not lie on the loop it was projected onto."""


class RemeshError(BrepError, RuntimeError):
    """Raised when boundary fragments cannot be reassembled into closed loops."""


class UnsupportedCaseError(BrepError, NotImplementedError):
    """Raised when a geometric case has no implementation."""


@dataclass(frozen=True)
class Unsupported:
    """Explicit result for a geometric case the kernel does not handle."""

    reason: str


__all__ = [
    'BrepError',
    'PreconditionError',
    'PointNotOnLoopError',
    'RemeshError',
    'UnsupportedCaseError',
    'Unsupported',
]
