"""
Error taxonomy and diagnostics for the motion graph compiler.

Two kinds of problems exist:

- Fatal errors are exceptions (`MalformedManifest`, `MissingBaseAnimations`).
  They stop the run: the manifest cannot be trusted, or no graph can be built.
- Everything else is recovered locally (the offending binding or patch entry
  is omitted) and reported as a `Diagnostic`, accumulated in a plain list that
  is returned alongside the successful output.

Example:
    >>> diagnostics: List[Diagnostic] = []
    >>> patch = compute_override_patch(graph, entries, "Variant C",
    ...                                diagnostics=diagnostics)
    >>> for diag in diagnostics:
    ...     print(f"⚠️  {diag}")
"""

from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional


class CompilerError(Exception):
    """Base class for fatal compiler errors."""


class MalformedManifest(CompilerError):
    """The manifest text does not parse into the expected shape."""


class MissingBaseAnimations(CompilerError):
    """The base variant matched no manifest entries, so no graph can be built."""

    def __init__(self, variant: str) -> None:
        super().__init__(
            f"No animations found for the base variant '{variant}'. "
            f"Check that manifest paths contain the segment '/{variant}/'."
        )
        self.variant = variant


class DiagnosticKind(str, Enum):
    """Non-fatal conditions surfaced to the caller."""

    UNRESOLVED_OVERRIDE = "UnresolvedOverride"
    EMPTY_VARIANT_FILTER = "EmptyVariantFilter"
    DUPLICATE_NAME_COLLISION = "DuplicateNameCollision"
    UNRESOLVED_BASE_ASSET = "UnresolvedBaseAsset"
    MISSING_CLIP_DURATION = "MissingClipDuration"


@dataclass(frozen=True)
class Diagnostic:
    """
    One non-fatal condition found during compilation.

    Attributes:
        kind: Category of the condition
        message: Human-readable description
        variant: Variant being processed, if any
        asset: Logical asset name involved, if any
        detail: Extra context (e.g. the losing path of a duplicate)
    """

    kind: DiagnosticKind
    message: str
    variant: Optional[str] = None
    asset: Optional[str] = None
    detail: Optional[str] = None

    def __str__(self) -> str:
        """Format diagnostic message."""
        scope = ", ".join(
            part for part in (self.variant, self.asset) if part
        )
        if scope:
            return f"{self.kind.value} [{scope}]: {self.message}"
        return f"{self.kind.value}: {self.message}"

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "variant": self.variant,
            "asset": self.asset,
            "detail": self.detail,
        }


def record(
    diagnostics: Optional[List[Diagnostic]],
    kind: DiagnosticKind,
    message: str,
    variant: Optional[str] = None,
    asset: Optional[str] = None,
    detail: Optional[str] = None,
) -> Diagnostic:
    """
    Build a diagnostic and append it to `diagnostics` when a list is given.

    Returns:
        The diagnostic that was built
    """
    diagnostic = Diagnostic(
        kind=kind, message=message, variant=variant, asset=asset, detail=detail
    )
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    return diagnostic


def count_by_kind(diagnostics: Iterable[Diagnostic]) -> Dict[DiagnosticKind, int]:
    """Tally diagnostics per kind, in first-seen order."""
    return dict(Counter(diag.kind for diag in diagnostics))
