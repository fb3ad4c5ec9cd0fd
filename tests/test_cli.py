"""Tests for the CLI module: arg parsing, exit codes, check mode, end-to-end."""

from __future__ import annotations

import argparse
import io
from pathlib import Path

import pytest

from autodefault.cli import CliOptions, build_parser, expand_file, main, parse_name_arg
from autodefault.debug import dump_tokens
from autodefault.lexer import tokenize

from .conftest import DEFAULT

SOURCE = "#[auto_default]\nstruct S {\n    a: u8,\n}\n"
EXPECTED = f"struct S {{\n    a: u8{DEFAULT},\n}}\n"

# ---------------------------------------------------------------------------
# Argument parsing helpers
# ---------------------------------------------------------------------------


class TestParseHelpers:
    def test_parse_name_arg(self) -> None:
        assert parse_name_arg("auto_default") == "auto_default"

    def test_parse_name_arg_invalid_raises(self) -> None:
        with pytest.raises(argparse.ArgumentTypeError):
            parse_name_arg("not-a-name")


# ---------------------------------------------------------------------------
# Arg parsing via build_parser
# ---------------------------------------------------------------------------


class TestArgParsing:
    def test_input_only(self) -> None:
        p = build_parser()
        ns = p.parse_args(["lib.rs"])
        assert ns.input == "lib.rs"
        assert ns.output is None
        assert ns.attribute is None
        assert ns.emit_errors is None

    def test_output_flag(self) -> None:
        p = build_parser()
        ns = p.parse_args(["lib.rs", "-o", "out.rs"])
        assert ns.output == "out.rs"

    def test_names(self) -> None:
        p = build_parser()
        ns = p.parse_args(["lib.rs", "--attribute", "defaults", "--marker", "omit"])
        assert ns.attribute == "defaults"
        assert ns.marker == "omit"

    def test_flags(self) -> None:
        p = build_parser()
        ns = p.parse_args(["lib.rs", "--emit-errors", "--check", "--watch", "--debug", "-v"])
        assert ns.emit_errors is True
        assert ns.check is True
        assert ns.watch is True
        assert ns.debug is True
        assert ns.verbose is True


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------


class TestExitCodes:
    def test_success(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.rs"
        src.write_text(SOURCE)
        out = tmp_path / "out.rs"
        assert main([str(src), "-o", str(out)]) == 0
        assert out.read_text() == EXPECTED

    def test_stdout(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "ok.rs"
        src.write_text(SOURCE)
        assert main([str(src)]) == 0
        assert capsys.readouterr().out == EXPECTED

    def test_lex_error_returns_1(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "bad.rs"
        src.write_text("struct S {\n")
        assert main([str(src)]) == 1
        err = capsys.readouterr().err
        assert err.startswith("error: unclosed delimiter")
        assert f"{src}:1:10" in err

    def test_diagnostics_return_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "dup.rs"
        src.write_text(
            "#[auto_default]\nstruct S {\n"
            "    #[auto_default(skip)]\n    #[auto_default(skip)]\n    a: u8,\n}\n"
        )
        out = tmp_path / "out.rs"
        assert main([str(src), "-o", str(out)]) == 1
        assert "duplicate `#[auto_default(skip)]`" in capsys.readouterr().err
        # best-effort output is still written
        assert out.read_text() == "struct S {\n    a: u8,\n}\n"

    def test_bad_attribute_name_returns_2(self, tmp_path: Path) -> None:
        src = tmp_path / "ok.rs"
        src.write_text(SOURCE)
        assert main([str(src), "--attribute", "no-dashes"]) == 2


# ---------------------------------------------------------------------------
# --check and --emit-errors
# ---------------------------------------------------------------------------


class TestCheck:
    def test_would_change(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        src = tmp_path / "lib.rs"
        src.write_text(SOURCE)
        assert main([str(src), "--check"]) == 1
        captured = capsys.readouterr()
        assert "would be rewritten" in captured.err
        assert captured.out == ""
        assert src.read_text() == SOURCE

    def test_unchanged(self, tmp_path: Path) -> None:
        src = tmp_path / "lib.rs"
        src.write_text("struct S { a: u8 }\n")
        assert main([str(src), "--check"]) == 0


class TestEmitErrors:
    def test_compile_error_in_output(self, tmp_path: Path) -> None:
        src = tmp_path / "lib.rs"
        src.write_text("#[auto_default(oops)]\nstruct S {}\n")
        out = tmp_path / "out.rs"
        assert main([str(src), "--emit-errors", "-o", str(out)]) == 1
        assert 'compile_error! { "no arguments expected" }' in out.read_text()


# ---------------------------------------------------------------------------
# expand_file smoke test
# ---------------------------------------------------------------------------


class TestExpandFile:
    def test_basic(self, tmp_path: Path) -> None:
        src = tmp_path / "simple.rs"
        src.write_text(SOURCE)
        opts = CliOptions(
            input_file=src,
            output_file=None,
            namespace="auto_default",
            marker="skip",
            emit_errors=False,
            check=False,
            watch=False,
            debug=False,
        )
        source, result = expand_file(opts)
        assert source == SOURCE
        assert result.text == EXPECTED

    def test_debug_dumps_tokens(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "simple.rs"
        src.write_text(SOURCE)
        assert main([str(src), "--debug"]) == 0
        err = capsys.readouterr().err
        assert "Punct '#' @1:1" in err
        assert "Group {} @2:10" in err
        assert "  Ident 'a' @3:5" in err

    def test_dump_tokens_resolves_stderr_at_call_time(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        dump_tokens(tokenize("a"))
        assert capsys.readouterr().err == "Ident 'a' @1:1\nEof @1:2\n"

    def test_dump_tokens_to_file(self) -> None:
        buf = io.StringIO()
        dump_tokens(tokenize("f(x)"), file=buf)
        assert buf.getvalue() == (
            "Ident 'f' @1:1\nGroup () @1:2\n  Ident 'x' @1:3\nEof @1:5\n"
        )


# ---------------------------------------------------------------------------
# Unreadable input
# ---------------------------------------------------------------------------


class TestUnreadableInput:
    def test_missing_file_returns_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        missing = tmp_path / "missing.rs"
        assert main([str(missing)]) == 1
        err = capsys.readouterr().err
        assert err.startswith(f"error: cannot read {missing}")

    def test_non_utf8_file_returns_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "latin1.rs"
        src.write_bytes(b"struct S { a: u8 } // \xff\n")
        assert main([str(src)]) == 1
        assert capsys.readouterr().err.startswith("error: cannot read")
