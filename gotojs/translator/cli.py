"""Command line interface for the goto translator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from gotojs.core.config import Settings, get_settings
from gotojs.core.errors import Diagnostic, GotoJSError
from gotojs.core.logging import setup_logging

from .preprocessor import GotoPreprocessor, SCANNERS, convert_goto_file, get_scanner
from .script_blocks import ScriptHookRegistry, convert_html_file


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gotojs",
        description="Translate JavaScript using [lbl]/goto into plain JavaScript."
    )
    parser.add_argument(
        "source",
        type=Path,
        help="Path to the script (or HTML document with --html) to translate.",
    )
    parser.add_argument(
        "output",
        nargs="?",
        help="Destination file, or '-' for stdout (defaults to alongside the source).",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Treat the source as HTML and rewrite its goto script blocks.",
    )
    parser.add_argument(
        "--content-type",
        default=settings.CONTENT_TYPE,
        help=f"Script type rewritten in --html mode (default: {settings.CONTENT_TYPE}).",
    )
    parser.add_argument(
        "--scanner",
        choices=sorted(SCANNERS),
        default=settings.SCANNER,
        help=f"String literal scanner (default: {settings.SCANNER}).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=settings.STRICT,
        help="Fail instead of writing output when diagnostics are found.",
    )
    parser.add_argument(
        "--overwrite",
        action="store_true",
        help="Allow overwriting an existing output file.",
    )
    parser.add_argument(
        "--encoding",
        default=settings.ENCODING,
        help=f"Encoding to use when reading and writing files (default: {settings.ENCODING}).",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress informational output.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = _build_parser(settings)
    args = parser.parse_args(argv)
    setup_logging(settings)

    preprocessor = GotoPreprocessor(scanner=get_scanner(args.scanner))
    diagnostics: List[Diagnostic] = []
    to_stdout = args.output == "-"
    output = None if to_stdout or args.output is None else Path(args.output)

    def hook(body: str) -> str:
        result = preprocessor.preprocess(body, strict=args.strict, name=str(args.source))
        diagnostics.extend(result.diagnostics)
        return result.code

    try:
        if args.html:
            registry = ScriptHookRegistry(output_content_type=settings.OUTPUT_CONTENT_TYPE)
            registry.register(args.content_type, hook)
            if to_stdout:
                text = registry.process(args.source.read_text(encoding=args.encoding))
            else:
                written_path, text = convert_html_file(
                    args.source,
                    output_path=output,
                    overwrite=args.overwrite,
                    encoding=args.encoding,
                    registry=registry,
                )
        elif to_stdout:
            text = hook(args.source.read_text(encoding=args.encoding))
        else:
            written_path, result = convert_goto_file(
                args.source,
                output_path=output,
                overwrite=args.overwrite,
                encoding=args.encoding,
                strict=args.strict,
                preprocessor=preprocessor,
            )
            diagnostics.extend(result.diagnostics)
    # Missing, existing, unreadable or undecodable files all end the same way
    except (OSError, UnicodeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except GotoJSError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    if to_stdout:
        sys.stdout.write(text)
    elif not args.quiet:
        suffix = f" ({len(diagnostics)} diagnostic(s))" if diagnostics else ""
        print(f"Wrote {written_path}{suffix}")

    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
