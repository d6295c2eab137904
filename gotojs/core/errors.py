"""
Exceptions and diagnostics for the goto translator.

The rewrite engine is permissive: degenerate input produces best-effort
output plus :class:`Diagnostic` records instead of exceptions. The
exceptions below are raised only in strict mode, by the hook layer, or
when an internal invariant breaks.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class Diagnostic(BaseModel):
    """A non-fatal finding reported while translating a source unit"""

    model_config = ConfigDict(frozen=True)

    code: Literal[
        "unmatched-block",
        "undeclared-label",
        "duplicate-label",
        "placeholder-collision",
        "unresolved-placeholder",
    ]
    message: str
    offset: Optional[int] = Field(
        None, description="Offset in the input; label offsets are taken after literal shielding and before rewriting"
    )
    label: Optional[str] = None
    severity: Literal["warning", "error"] = "warning"

    def __str__(self) -> str:
        where = f" at offset {self.offset}" if self.offset is not None else ""
        return f"{self.severity}: {self.code}{where}: {self.message}"


class GotoJSError(Exception):
    """Base exception for gotojs errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class GotoTranslationError(GotoJSError):
    """Raised in strict mode when a translation produced diagnostics"""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        summary = "; ".join(str(d) for d in self.diagnostics)
        super().__init__(
            message=f"Translation produced {len(self.diagnostics)} diagnostic(s): {summary}",
            details={"diagnostics": [d.model_dump() for d in self.diagnostics]},
        )


class RewriteError(GotoJSError):
    """Raised when the label rewrite loop stops making progress"""

    def __init__(self, message: str, remaining_labels: int):
        super().__init__(
            message=message,
            details={"remaining_labels": remaining_labels},
        )


class ScriptHookError(GotoJSError):
    """Raised when a registered script block callback fails"""

    def __init__(self, content_type: str, original_exception: Exception):
        self.original_exception = original_exception
        super().__init__(
            message=f"Hook for '{content_type}' failed: {original_exception}",
            details={"content_type": content_type},
        )
