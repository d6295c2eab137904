"""End-to-end tests for GotoPreprocessor and translate()."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from gotojs.core.errors import GotoTranslationError
from gotojs.translator import (
    GotoPreprocessor,
    PygmentsLiteralScanner,
    RegexLiteralScanner,
    get_scanner,
    translate,
)
from gotojs.translator.preprocessor import convert_goto_file, default_output_path


SCENARIO_1 = "function f(){ [lbl] top: x++; if(x<3){ goto top; } }"
SCENARIO_1_OUT = (
    "function f(){ var goto_function_top = false;\n"
    "top: while(!goto_function_top){\n"
    " goto_function_top = true;\n"
    " x++; if(x<3){ goto_function_top = false;\n"
    " continue top; } }}"
)


class TestTranslate:
    """The string-in, string-out contract."""

    def test_scenario_function_loop(self):
        """Label and goto inside a function become a guarded while loop."""
        assert translate(SCENARIO_1) == SCENARIO_1_OUT

    def test_scenario_string_protection(self):
        """Keywords inside string literals are not rewritten."""
        out = translate('var s = "goto top;"; [lbl] top: y++;')
        assert out == (
            'var s = "goto top;"; var goto_function_top = false;\n'
            "top: while(!goto_function_top){\n"
            " goto_function_top = true;\n"
            " y++;}"
        )
        assert '"goto top;"' in out
        assert "continue top;" not in out

    def test_label_text_in_string_untouched(self):
        """A label marker inside a string stays as written."""
        out = translate("log('[lbl] fake:'); function f(){ [lbl] real: a(); }")
        assert "log('[lbl] fake:');" in out
        assert "real: while(!goto_function_real)" in out
        assert "fake: while" not in out

    def test_goto_without_label(self):
        """A dangling goto still becomes a continue."""
        assert translate("goto nowhere;") == "goto_function_nowhere = false;\n continue nowhere;"

    def test_no_markers_is_identity(self):
        """Plain JavaScript passes through unchanged."""
        source = 'function add(a, b){ return a + b; } console.log("goto x;");'
        assert translate(source) == source

    def test_pygments_scanner(self):
        """translate() accepts an alternative literal scanner."""
        out = translate(SCENARIO_1, scanner=PygmentsLiteralScanner())
        assert out == SCENARIO_1_OUT

    def test_concurrent_calls_are_independent(self):
        """Parallel translations give the same results as sequential ones."""
        sources = [SCENARIO_1.replace("top", f"t{i}") + f' s("{i}");' for i in range(32)]
        expected = [translate(source) for source in sources]
        with ThreadPoolExecutor(max_workers=8) as pool:
            assert list(pool.map(translate, sources)) == expected


class TestPreprocessResult:
    """Metadata and diagnostics returned by preprocess()."""

    def test_metadata(self, preprocessor):
        """Labels, goto targets and literal count are reported."""
        result = preprocessor.preprocess(
            'function f(){ [lbl] a: x("1"); goto a; [lbl] b: y(\'2\'); goto b; goto a; }'
        )
        assert result.labels == ["a", "b"]
        assert result.goto_targets == ["a", "b", "a"]
        assert result.literal_count == 2
        assert result.diagnostics == []
        assert result.ok

    def test_undeclared_label_reported(self, preprocessor):
        """A goto without a label is a warning, not a failure."""
        result = preprocessor.preprocess("function f(){ goto missing; }")
        assert "continue missing;" in result.code
        assert [d.code for d in result.diagnostics] == ["undeclared-label"]
        assert result.diagnostics[0].label == "missing"
        assert not result.ok

    def test_unmatched_block_reported(self, preprocessor):
        """A label with no enclosing braces is reported."""
        result = preprocessor.preprocess("[lbl] top: y++;")
        assert result.code.endswith(" y++;}")
        assert [d.code for d in result.diagnostics] == ["unmatched-block"]
        assert result.diagnostics[0].offset == 0

    def test_unmatched_block_offset_of_later_label(self, preprocessor):
        """The offset points at the label in the input even after earlier labels grew the code."""
        source = "{ [lbl] a: x; } [lbl] b: y;"
        result = preprocessor.preprocess(source)
        assert [d.code for d in result.diagnostics] == ["unmatched-block"]
        assert result.diagnostics[0].label == "b"
        assert result.diagnostics[0].offset == source.index("[lbl] b")

    def test_duplicate_label_reported(self, preprocessor):
        """Declaring a label twice is reported once."""
        result = preprocessor.preprocess("{ [lbl] a: x; } { [lbl] a: y; }")
        assert result.code.count("var goto_function_a = false;") == 2
        assert [d.code for d in result.diagnostics] == ["duplicate-label"]

    def test_placeholder_collision_reported(self, placeholder):
        """Source that already contains the placeholder is flagged."""
        processor = GotoPreprocessor(placeholder=placeholder)
        result = processor.preprocess(f"var {placeholder} = 'x';")
        assert "placeholder-collision" in [d.code for d in result.diagnostics]

    def test_strict_mode_raises(self, preprocessor):
        """Strict mode turns diagnostics into an exception."""
        with pytest.raises(GotoTranslationError) as exc_info:
            preprocessor.preprocess("goto missing;", strict=True)
        assert [d.code for d in exc_info.value.diagnostics] == ["undeclared-label"]
        assert exc_info.value.details["diagnostics"][0]["label"] == "missing"

    def test_strict_mode_passes_clean_input(self, preprocessor):
        """Strict mode is silent for well-formed input."""
        assert preprocessor.preprocess(SCENARIO_1, strict=True).code == SCENARIO_1_OUT

    def test_translate_never_raises(self):
        """The permissive entry point tolerates malformed input."""
        out = translate("} [lbl] a: { goto b; [lbl] a: '")
        assert "[lbl]" not in out


class TestScannerLookup:
    """get_scanner()"""

    def test_known_scanners(self):
        assert isinstance(get_scanner("regex"), RegexLiteralScanner)
        assert isinstance(get_scanner("pygments"), PygmentsLiteralScanner)

    def test_unknown_scanner(self):
        with pytest.raises(ValueError, match="Unknown literal scanner"):
            get_scanner("lexer")


class TestConvertGotoFile:
    """File conversion helper."""

    def test_writes_js_next_to_source(self, tmp_path):
        src = tmp_path / "prog.gjs"
        src.write_text(SCENARIO_1, encoding="utf-8")
        written, result = convert_goto_file(src)
        assert written == tmp_path / "prog.js"
        assert written.read_text(encoding="utf-8") == SCENARIO_1_OUT
        assert result.labels == ["top"]

    def test_refuses_overwrite(self, tmp_path):
        src = tmp_path / "prog.gjs"
        src.write_text(SCENARIO_1, encoding="utf-8")
        convert_goto_file(src)
        with pytest.raises(FileExistsError):
            convert_goto_file(src)
        convert_goto_file(src, overwrite=True)

    def test_missing_source(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            convert_goto_file(tmp_path / "missing.gjs")

    def test_strict_failure_writes_nothing(self, tmp_path):
        src = tmp_path / "bad.gjs"
        src.write_text("goto nowhere;", encoding="utf-8")
        with pytest.raises(GotoTranslationError):
            convert_goto_file(src, strict=True)
        assert not (tmp_path / "bad.js").exists()

    def test_default_output_path_never_source(self, tmp_path):
        assert default_output_path(tmp_path / "a.gjs", ".js") == tmp_path / "a.js"
        assert default_output_path(tmp_path / "a.js", ".js") == tmp_path / "a.out.js"
