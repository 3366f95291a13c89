"""
Tests for 'bin/doctestbash.py', and a run of 'tests/echo.typescript' through it
"""

import argparse
from pathlib import Path

import pytest

import argdoc
import doctestbash


TYPESCRIPT = Path(__file__).parent / "echo.typescript"


class TestSplitTypescript:
    """Tests of taking the Tests out of a Transcript"""

    def test_commands_and_output(self):
        lines = [
            "# a comment",
            "$ echo.py a",
            "a",
            "$ echo.py -e 'b\\n'",
            "b",
            "",
            "$",
            "# a comment after a bare prompt",
        ]
        tests = doctestbash.split_typescript(lines)

        assert [_.shline for _ in tests] == ["echo.py a", "echo.py -e 'b\\n'"]
        assert tests[0].wants == ["a"]
        assert tests[1].wants == ["b"]

    def test_dented_output(self):
        lines = ["  $ echo.py '  a'", "    a", "  $ true"]
        tests = doctestbash.split_typescript(lines)

        assert tests[0].dent == "  "
        assert tests[0].wants == ["  a"]
        assert tests[1].wants == list()


class TestCompare:
    def test_ellipses(self):
        assert doctestbash.equal_but_for_ellipses("usage: echo.py [-h]", "usage: ...")
        assert doctestbash.equal_but_for_ellipses("ab", want="a...b")
        assert not doctestbash.equal_but_for_ellipses("ab", want="a...c")
        assert not doctestbash.equal_but_for_ellipses("a.b", want="a*b")

    def test_first_mismatch(self):
        assert doctestbash.find_first_mismatch(["a", "b"], wants=["a", "b"]) is None
        assert doctestbash.find_first_mismatch(["a"], wants=["a", "b"]) == (1, "b", "")
        assert doctestbash.find_first_mismatch(["x"], wants=["..."]) is None

    def test_mismatch_exits_one(self, capsys):
        args = argparse.Namespace(vq=0)
        test = doctestbash.Test(dent="", shline="echo.py a", wants=["b"])

        with pytest.raises(SystemExit) as exc_info:
            doctestbash.require_test_passed(
                args, path="x.typescript", passes=3, test=test, gots=["a"]
            )
        assert exc_info.value.code == 1
        assert "unexpected output after 3 tests" in capsys.readouterr().err


class TestHelp:
    def test_says_where_it_finds_echo_py(self):
        parser = argdoc.ArgumentParser(doc=doctestbash.__doc__)
        argdoc.parser_exit_unless_doc_eq(parser, doc=doctestbash.__doc__)

        assert "not in site-packages" in parser.epilog


class TestRunShline:
    def test_shows_the_exit_status(self, posix_only):
        assert doctestbash.run_one_shline("echo a; exit 3") == ["a", "+ exit 3"]


class TestEchoTypescript:
    """Play back the Transcript of 'echo.py'"""

    def test_rip_bash_paste(self, capsys):
        doctestbash.main(["doctestbash.py", "-b", str(TYPESCRIPT)])

        shlines = capsys.readouterr().out.splitlines()
        assert shlines[0] == "echo.py"
        assert "echo.py -- -n data" in shlines

    def test_echo_typescript(self, echo_py_dir, posix_only):
        with open(TYPESCRIPT) as reading:
            tests = doctestbash.split_typescript(reading.read().splitlines())

        assert tests
        for test in tests:
            gots = doctestbash.run_one_shline(test.shline, path_dirs=[str(echo_py_dir)])
            mismatch = doctestbash.find_first_mismatch(gots, wants=test.wants)
            assert mismatch is None, (test.shline, gots)
