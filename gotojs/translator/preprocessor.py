"""
Goto preprocessor - translate goto/label JavaScript into plain JavaScript.

The high level flow of preprocessing is as follows:

1. Shield string literals behind a placeholder token
2. Rewrite every ``goto name;`` into a sentinel reset and ``continue name;``
3. Rewrite every ``[lbl] name:`` into a guarded labeled ``while`` loop,
   closing it at the end of the enclosing block
4. Restore the string literals in their original order

The translation is permissive: unbalanced braces, gotos to missing labels
and similar problems still produce output. They are reported as
diagnostics on the result, and strict mode turns them into an exception.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from gotojs.core.errors import Diagnostic, GotoTranslationError
from gotojs.core.logging import get_context_logger

from .goto_grammar import GotoGrammar
from .literal_shield import (
    LiteralScanner,
    LiteralShield,
    PygmentsLiteralScanner,
    RegexLiteralScanner,
)
from .rewriter import GotoRewriter, LabelRewrite


SCANNERS = {
    "regex": RegexLiteralScanner,
    "pygments": PygmentsLiteralScanner,
}


def get_scanner(name: str) -> LiteralScanner:
    """Build a literal scanner by name ("regex" or "pygments")."""
    try:
        return SCANNERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown literal scanner {name!r}; expected one of {sorted(SCANNERS)}"
        ) from None


@dataclass
class PreprocessResult:
    """Result of translating one source unit."""

    code: str
    """Translated JavaScript"""

    labels: List[str] = field(default_factory=list)
    """Label names rewritten into loops, in processing order"""

    goto_targets: List[str] = field(default_factory=list)
    """Targets of every rewritten goto, in source order"""

    literal_count: int = 0
    """Number of string literals shielded during the rewrite"""

    diagnostics: List[Diagnostic] = field(default_factory=list)
    """Problems noticed while translating; empty for well-formed input"""

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class GotoPreprocessor:
    """
    Translate goto/label source into native loop constructs.

    Each call to :meth:`preprocess` works on its own buffer and literal
    list, so one instance can be shared between threads.
    """

    def __init__(
        self,
        scanner: LiteralScanner | None = None,
        grammar: GotoGrammar | None = None,
        placeholder: str | None = None,
    ) -> None:
        self.grammar = grammar or GotoGrammar()
        self.scanner = scanner or RegexLiteralScanner()
        self._placeholder = placeholder
        self._rewriter = GotoRewriter(self.grammar)

    def preprocess(self, source: str, *, strict: bool = False, name: str = "<string>") -> PreprocessResult:
        """
        Translate ``source``.

        Args:
            source: Raw source code
            strict: If True, raise instead of returning a result with diagnostics
            name: Name of the source unit, used in log records

        Returns:
            PreprocessResult with the translated code and metadata

        Raises:
            GotoTranslationError: in strict mode, when diagnostics were found
        """
        log = get_context_logger(__name__, source=name)
        shield = LiteralShield(self.scanner, placeholder=self._placeholder)
        diagnostics: List[Diagnostic] = []

        # Hide string literals so markers inside them are left alone
        shielded = shield.shield(source)
        if shielded.placeholder in source:
            diagnostics.append(Diagnostic(
                code="placeholder-collision",
                message=f"Source already contains the placeholder {shielded.placeholder!r}",
                offset=source.index(shielded.placeholder),
            ))

        rewritten = self._rewriter.rewrite(shielded.text)
        diagnostics.extend(self._check_labels(rewritten.labels, rewritten.goto_targets))

        # Put the literals back in the order they were taken out
        restored = shield.restore(rewritten.code, shielded.literals, shielded.placeholder)
        if restored.unresolved:
            diagnostics.append(Diagnostic(
                code="unresolved-placeholder",
                message=f"{restored.unresolved} placeholder(s) had no literal to restore",
                severity="error",
            ))

        for diagnostic in diagnostics:
            log.warning("%s", diagnostic, extra_data={"code": diagnostic.code})
        log.debug(
            "Translated %d label(s), %d goto(s), %d literal(s)",
            len(rewritten.labels), len(rewritten.goto_targets), len(shielded.literals),
        )

        if strict and diagnostics:
            raise GotoTranslationError(diagnostics)

        return PreprocessResult(
            code=restored.text,
            labels=[label.name for label in rewritten.labels],
            goto_targets=rewritten.goto_targets,
            literal_count=len(shielded.literals),
            diagnostics=diagnostics,
        )

    def _check_labels(self, labels: List[LabelRewrite], goto_targets: List[str]) -> List[Diagnostic]:
        diagnostics: List[Diagnostic] = []

        for label in labels:
            if not label.enclosed:
                diagnostics.append(Diagnostic(
                    code="unmatched-block",
                    message=f"Label {label.name!r} has no enclosing block; its loop closes at the end of the source",
                    offset=label.source_offset,
                    label=label.name,
                ))

        counts = Counter(label.name for label in labels)
        for name, count in counts.items():
            if count > 1:
                diagnostics.append(Diagnostic(
                    code="duplicate-label",
                    message=f"Label {name!r} is declared {count} times; its sentinel is redeclared",
                    label=name,
                ))

        declared = set(counts)
        # Targets in first-seen order, each reported once
        for name in dict.fromkeys(goto_targets):
            if name not in declared:
                diagnostics.append(Diagnostic(
                    code="undeclared-label",
                    message=f"goto {name} has no matching label; the host will reject 'continue {name}'",
                    label=name,
                ))

        return diagnostics


def translate(source: str, scanner: LiteralScanner | None = None) -> str:
    """Translate ``source`` and return only the code. Never raises on malformed input."""
    return GotoPreprocessor(scanner=scanner).preprocess(source).code


def convert_goto_file(
    source_path: str | Path,
    *,
    output_path: str | Path | None = None,
    overwrite: bool = False,
    encoding: str = "utf-8",
    strict: bool = False,
    preprocessor: GotoPreprocessor | None = None,
) -> tuple[Path, PreprocessResult]:
    """Translate a goto script file and write plain JavaScript next to it."""

    src = Path(source_path)
    if not src.exists():
        raise FileNotFoundError(f"Source file not found: {src}")

    processor = preprocessor or GotoPreprocessor()
    result = processor.preprocess(src.read_text(encoding=encoding), strict=strict, name=str(src))

    output = Path(output_path) if output_path else default_output_path(src, ".js")
    if output.exists() and not overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file: {output}")

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(result.code, encoding=encoding)
    return output, result


def default_output_path(source: Path, suffix: str) -> Path:
    """``source`` with ``suffix``, or ``.out<suffix>`` when that would be the source itself."""
    output = source.with_suffix(suffix)
    if output == source:
        output = source.with_suffix(".out" + suffix)
    return output
