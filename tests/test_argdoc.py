"""
Tests for 'bin/argdoc.py': compiling a Parser from the Help Lines of a Doc
"""

import json
import textwrap

import pytest

import argdoc
import echo


TALLY_DOC = textwrap.dedent(
    """
    usage: tally.py [-h] [-v] [--sep SEP] WORD [WORD ...]

    tally some words

    positional arguments:
      WORD        a word to tally

    options:
      -h, --help  show this help message and exit
      -v          say more
      --sep SEP   print this between each tally and the next

    examples:
      tally.py a b a
    """
)

BAD_DOC = textwrap.dedent(
    """
    usage: bad.py [-h] [-q]

    do bad stuff

    options:
      -h, --help  show this help message and exit
      -v          say more
    """
)

QUIET_DOC = textwrap.dedent(
    """
    usage: quiet.py [-q]

    say little

    options:
      -q          say less
    """
)


class TestPluralEn:
    @pytest.mark.parametrize(
        "word, plural",
        [
            ("word", "words"),
            ("file", "files"),
            ("box", "boxes"),
            ("lorry", "lorries"),
            ("day", "days"),
            ("criterion", "criteria"),
        ],
    )
    def test_guesses(self, word, plural):
        assert argdoc.plural_en(word) == plural


class TestArgumentParser:
    """Tests of the Parser compiled from a Doc"""

    def test_counts_and_metavars_and_plurals(self):
        args = argdoc.parse_args("-vv --sep , a b".split(), doc=TALLY_DOC)
        assert vars(args) == dict(v=2, sep=",", words=["a", "b"])

    def test_defaults(self):
        args = argdoc.parse_args(["a"], doc=TALLY_DOC)
        assert args.v == 0
        assert args.sep is None

    def test_prog_and_description_and_epilog(self):
        parser = argdoc.ArgumentParser(doc=TALLY_DOC)
        assert parser.prog == "tally.py"
        assert parser.description == "tally some words"
        assert parser.epilog.startswith("examples:")

    def test_drops_help_when_the_doc_does(self):
        parser = argdoc.ArgumentParser(doc=QUIET_DOC)
        assert not parser.add_help

        args = argdoc.parse_args(["-qq"], doc=QUIET_DOC)
        assert vars(args) == dict(q=2)

        with pytest.raises(SystemExit) as exc_info:
            argdoc.parse_args(["-h"], doc=QUIET_DOC)
        assert exc_info.value.code == 2

    def test_doc_mismatch_exits_one(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            argdoc.parse_args([], doc=BAD_DOC)
        assert exc_info.value.code == 1
        assert "[-q]" in capsys.readouterr().err

    def test_echo_doc_matches_its_parser(self):
        parser = argdoc.ArgumentParser(doc=echo.__doc__)
        argdoc.parser_exit_unless_doc_eq(parser, doc=echo.__doc__)

        args = parser.parse_args("-ne -E hi you".split())
        assert vars(args) == dict(n=1, s=0, e=1, E=1, verbose=0, words=["hi", "you"])


class TestTextwrap:
    def test_split_paras(self):
        paras = argdoc.textwrap_split_paras("  a\n    b\n\n\n  c\n")
        assert paras == [["  a", "    b"], ["  c"]]

    def test_unbreakdent_lines(self):
        lines = argdoc.textwrap_para_unbreakdent_lines([" a", "    b", " c"])
        assert lines == [" a b", " c"]

    def test_doc_upgrade(self):
        doc = "usage: echo.py [WORD [WORD ...]]\n\noptional arguments:\n  -h"
        assert argdoc.argparse_doc_upgrade(doc) == (
            "usage: echo.py [WORD ...]\n\noptions:\n  -h"
        )


class TestMain:
    """Tests of the Command Line of Arg Doc Py"""

    def test_parses_args_for_a_file(self, bin_dir, capsys, monkeypatch):
        argv = ["argdoc.py", str(bin_dir / "echo.py"), "hi", "you"]
        monkeypatch.setattr("sys.argv", argv)

        argdoc.main()

        parsed = json.loads(capsys.readouterr().out)
        assert parsed == dict(n=0, s=0, e=0, E=0, verbose=0, words=["hi", "you"])

    def test_rejects_a_file_without_docstring(self, tmp_path, monkeypatch):
        path = tmp_path / "nodoc.py"
        path.write_text("x = 1\n")
        monkeypatch.setattr("sys.argv", ["argdoc.py", str(path)])

        with pytest.raises(SystemExit) as exc_info:
            argdoc.main()
        assert exc_info.value.code == 1
