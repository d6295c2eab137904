"""gotojs - goto/label support for JavaScript by source rewriting.

Main namespace package:
- gotojs.translator: literal shielding, block location and the goto rewrite
- gotojs.core: settings, logging and error types shared by the CLI and hooks
"""

__version__ = "1.0.0"

__all__ = []
