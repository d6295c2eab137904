"""
gotojs.translator - goto/label to native loop translation

Rewrites ``[lbl] name:`` declarations into guarded labeled ``while`` loops
and ``goto name;`` statements into ``continue name;``, leaving string
literals alone.
"""

from .block_locator import BlockSpan, find_container
from .goto_grammar import GotoGrammar
from .literal_shield import (
    LiteralScanner,
    LiteralShield,
    PygmentsLiteralScanner,
    RegexLiteralScanner,
    ShieldResult,
)
from .preprocessor import (
    GotoPreprocessor,
    PreprocessResult,
    convert_goto_file,
    get_scanner,
    translate,
)
from .rewriter import GotoRewriter, RewriteResult
from .script_blocks import (
    ScriptBlock,
    ScriptBlockExtractor,
    ScriptHookRegistry,
    convert_html_file,
    default_registry,
)

__all__ = [
    "BlockSpan",
    "find_container",
    "GotoGrammar",
    "LiteralScanner",
    "LiteralShield",
    "PygmentsLiteralScanner",
    "RegexLiteralScanner",
    "ShieldResult",
    "GotoPreprocessor",
    "PreprocessResult",
    "convert_goto_file",
    "get_scanner",
    "translate",
    "GotoRewriter",
    "RewriteResult",
    "ScriptBlock",
    "ScriptBlockExtractor",
    "ScriptHookRegistry",
    "convert_html_file",
    "default_registry",
]
