"""
Script block extraction and content-type hooks.

Host pages carry goto scripts in blocks such as::

    <script type="text/jsplusgoto">
      [lbl] top:
      ...
      goto top;
    </script>

This module finds script blocks by their ``type`` attribute and hands each
body to the callback registered for that content type. The callback's
return value replaces the body and the block is retagged as plain
JavaScript so the host runs it normally. Blocks of any other type are left
untouched. Nothing here executes code.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional

from gotojs.core.config import Settings, get_settings
from gotojs.core.errors import ScriptHookError
from gotojs.core.logging import get_logger

from .preprocessor import translate

logger = get_logger(__name__)

ScriptCallback = Callable[[str], str]


@dataclass
class ScriptBlock:
    """A ``<script>`` element found in a document."""

    content_type: Optional[str]
    """Value of the type attribute, None when absent"""

    attributes: str
    """Raw attribute text of the opening tag"""

    body: str
    """Script source between the tags"""

    start: int
    """Offset of ``<script`` in the document"""

    end: int
    """Offset just past the closing tag"""

    close_tag: str = "</script>"
    """Closing tag as written in the document"""


class ScriptBlockExtractor:
    """Finds ``<script>`` blocks in HTML documents."""

    SCRIPT_RE = re.compile(
        r"<script\b(?P<attrs>[^>]*)>(?P<body>.*?)(?P<close></script\s*>)",
        re.IGNORECASE | re.DOTALL,
    )
    TYPE_RE = re.compile(
        r"""(?<![\w-])type\s*=\s*(?:(?P<quote>["'])(?P<quoted>.*?)(?P=quote)|(?P<bare>[^\s>"']+))""",
        re.IGNORECASE | re.DOTALL,
    )

    def blocks(self, document: str) -> List[ScriptBlock]:
        """Every script block in ``document``, in order."""
        return [self._to_block(match) for match in self.SCRIPT_RE.finditer(document)]

    def extract(self, document: str, content_type: str) -> List[ScriptBlock]:
        """
        Script blocks whose type matches ``content_type``.

        Types are compared case-insensitively, ignoring surrounding spaces.

        Args:
            document: HTML source
            content_type: Type to select, e.g. "text/jsplusgoto"

        Returns:
            Matching ScriptBlock records in document order
        """
        wanted = content_type.strip().lower()
        return [
            block for block in self.blocks(document)
            if block.content_type is not None and block.content_type.strip().lower() == wanted
        ]

    def retag(self, attributes: str, content_type: str) -> str:
        """Replace the type attribute value in ``attributes`` with ``content_type``."""
        return self.TYPE_RE.sub(lambda _: f'type="{content_type}"', attributes, count=1)

    def _to_block(self, match: re.Match[str]) -> ScriptBlock:
        attrs = match.group("attrs")
        type_match = self.TYPE_RE.search(attrs)
        content_type = None
        if type_match:
            content_type = type_match.group("quoted")
            if content_type is None:
                content_type = type_match.group("bare")
        return ScriptBlock(
            content_type=content_type,
            attributes=attrs,
            body=match.group("body"),
            start=match.start(),
            end=match.end(),
            close_tag=match.group("close"),
        )


class ScriptHookRegistry:
    """
    Maps script content types to source-rewriting callbacks.

    Each callback takes the untransformed block body and returns the
    transformed body.
    """

    def __init__(
        self,
        output_content_type: str = "text/javascript",
        extractor: ScriptBlockExtractor | None = None,
    ):
        self.output_content_type = output_content_type
        self.extractor = extractor or ScriptBlockExtractor()
        self._hooks: Dict[str, ScriptCallback] = {}

    def register(self, content_type: str, callback: ScriptCallback) -> None:
        """Register ``callback`` for ``content_type``, replacing any earlier one."""
        self._hooks[content_type.strip().lower()] = callback

    def unregister(self, content_type: str) -> None:
        self._hooks.pop(content_type.strip().lower(), None)

    def callback_for(self, content_type: str | None) -> Optional[ScriptCallback]:
        if content_type is None:
            return None
        return self._hooks.get(content_type.strip().lower())

    def process(self, document: str) -> str:
        """
        Rewrite every script block that has a registered callback.

        Args:
            document: HTML source

        Returns:
            The document with hooked blocks transformed and retagged

        Raises:
            ScriptHookError: if a callback raises
        """
        pieces: List[str] = []
        pos = 0
        rewritten = 0

        for block in self.extractor.blocks(document):
            callback = self.callback_for(block.content_type)
            if callback is None:
                continue

            try:
                body = callback(block.body)
            except Exception as exc:
                raise ScriptHookError(block.content_type or "", exc) from exc

            attrs = self.extractor.retag(block.attributes, self.output_content_type)
            pieces.append(document[pos:block.start])
            pieces.append(f"<script{attrs}>{body}{block.close_tag}")
            pos = block.end
            rewritten += 1

        pieces.append(document[pos:])
        logger.debug("Rewrote %d script block(s)", rewritten)
        return "".join(pieces)


def default_registry(settings: Settings | None = None) -> ScriptHookRegistry:
    """Registry with :func:`translate` hooked to the configured goto content type."""
    settings = settings or get_settings()
    registry = ScriptHookRegistry(output_content_type=settings.OUTPUT_CONTENT_TYPE)
    registry.register(settings.CONTENT_TYPE, translate)
    return registry


def convert_html_file(
    source_path: str | Path,
    *,
    output_path: str | Path | None = None,
    overwrite: bool = False,
    encoding: str = "utf-8",
    registry: ScriptHookRegistry | None = None,
) -> tuple[Path, str]:
    """Rewrite the goto script blocks of an HTML file into a new file."""

    src = Path(source_path)
    if not src.exists():
        raise FileNotFoundError(f"Source file not found: {src}")

    registry = registry or default_registry()
    document = registry.process(src.read_text(encoding=encoding))

    output = Path(output_path) if output_path else src.with_suffix(".out" + (src.suffix or ".html"))
    if output.exists() and not overwrite:
        raise FileExistsError(f"Refusing to overwrite existing file: {output}")

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document, encoding=encoding)
    return output, document
