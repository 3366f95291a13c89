#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
usage: argdoc.py [-h] [FILE] [WORD ...]

parse command line args as per a top-of-file docstring of help lines

positional arguments:
  FILE        some python file begun by a docstring (default: this file)
  WORD        an arg to parse for the file

options:
  -h, --help  show this help message and exit

quirks:
  plural args go to an english plural key, such as '[WORD ...]' to '.words'
  options without a metavar count up from zero, such as '-n' to '.n'
  you lose your '-h' and '--help' options if you drop them from your 'options:'
  exits 1 with a diff, when the doc and the parser compiled from it don't match

unsurprising quirks:
  prints the parsed args as json
  says '--' to mark the args for the file, after the file

examples:
  argdoc.py -h                          # show this help message and exit
  argdoc.py                             # parse no args for argdoc.py itself
  argdoc.py bin/echo.py                 # parse no args for echo.py
  argdoc.py bin/echo.py -- -nse hi you  # parse '-nse hi you' for echo.py
"""


import __main__
import argparse
import ast
import contextlib
import difflib
import inspect
import json
import os
import re
import sys
import textwrap


_89_COLUMNS = 89  # the Black app for styling Python promotes 89 columns per line


#
# Run as a command line:  ./argdoc.py ...
#


def main():
    """Run an Arg Doc Py command line"""

    run_self_tests()

    args = parse_args()

    doc = __doc__
    if args.file is not None:
        doc = eval_doc_from_path(args.file)
        if doc is None:
            stderr_print(
                "argdoc.py: error: no docstring at top of:  {}".format(args.file)
            )

            sys.exit(1)  # exit 1 to require docstring found

    file_args = parse_args(args.words, doc=doc)

    chars = json.dumps(vars(file_args), indent=4)
    print(chars)


def run_self_tests():
    """Run some Self Tests, as part of every Launch"""

    _plural_en_test()
    _argdoc_test()


def _argdoc_test():
    """Run some Self Tests of this Arg Doc Py"""

    parser = ArgumentParser(doc=__doc__)
    parser_exit_unless_doc_eq(parser, doc=__doc__)

    args = parser.parse_args([])
    assert vars(args) == dict(file=None, words=list()), vars(args)

    args = parser.parse_args("bin/echo.py hi you".split())
    assert args.file == "bin/echo.py", vars(args)
    assert args.words == "hi you".split(), vars(args)

    counts_doc = textwrap.dedent(
        """
        usage: counts.py [-h] [-q] [-v] [--log FILE] WORD [WORD ...]

        count some words

        positional arguments:
          WORD         a word to count

        options:
          -h, --help   show this help message and exit
          -q           say less
          -v           say more
          --log FILE   append to a file
        """
    )

    counts_parser = ArgumentParser(doc=counts_doc)
    parser_exit_unless_doc_eq(counts_parser, doc=counts_doc)

    counts_args = counts_parser.parse_args("-vv --log x.log a b".split())
    assert counts_args.v == 2, vars(counts_args)
    assert counts_args.q == 0, vars(counts_args)
    assert counts_args.log == "x.log", vars(counts_args)
    assert counts_args.words == "a b".split(), vars(counts_args)


def eval_doc_from_path(path):
    """Pick the DocString out from top of a File of Python Source Chars, else None"""

    try:
        with open(path, "r") as reading:
            pychars = reading.read()
    except OSError as exc:
        stderr_print("argdoc.py: error: {}: {}".format(type(exc).__name__, exc))

        sys.exit(1)  # exit 1 to require input file found

    try:
        module = ast.parse(pychars, filename=path)
    except SyntaxError:

        return None

    doc = ast.get_docstring(module, clean=False)

    return doc


#
# Work with an ArgumentParser compiled from the DocString of the Calling Module
#


def parse_args(args=None, doc=None):
    """
    Call 'argparse.parse_arg' on a Parser of the calling Module's DocString

    However,
    + work instead from the given Doc, if any
    + print help and exit zero when Args call for Help
    + print diff and exit 1, if the Doc doesn't match the Parser it sketches
    """

    alt_argv = sys.argv[1:] if (args is None) else args

    f = inspect.currentframe()
    (alt_doc, alt_file) = module_find_doc_and_file(doc=doc, f=f)
    parser = ArgumentParser(doc=alt_doc)
    try:
        parser_exit_unless_doc_eq(parser, doc=alt_doc, file=alt_file)
    except SystemExit:
        stderr_print(
            "{}: error: Doc doesn't match Parser compiled from Doc".format(
                os.path.basename(alt_file)
            )
        )

        raise

    alt_namespace = parser.parse_args(alt_argv)

    return alt_namespace


# deffed in many files  # missing from docs.python.org
def module_find_doc_and_file(doc, f):
    """Take the Doc as from Main File, else pick the Doc out of the Calling Module"""

    module_doc = doc
    module_file = getattr(__main__, "__file__", sys.argv[0])

    if doc is None:
        module = inspect.getmodule(f.f_back)

        module_doc = module.__doc__
        module_file = f.f_back.f_code.co_filename

    return (module_doc, module_file)


class ArgumentParser(argparse.ArgumentParser):
    """Form an ArgumentParser with Args and Options and Epilog, from a Doc"""

    def __init__(self, doc=None):

        f = inspect.currentframe()
        (alt_doc, _) = module_find_doc_and_file(doc=doc, f=f)

        paras = textwrap_split_paras(alt_doc)
        if not paras[1:]:  # 1 paragraph of Usage, 1 paragraph of Desc
            alt_doc = "usage: prog\n\ndo stuff"
            paras = textwrap_split_paras(alt_doc)

        # Pick the Prog out of the top line, and the Desc out of the 2nd Paragraph

        usage_words = paras[0][0].split()
        prog = usage_words[1] if usage_words[1:] else "prog"

        description = " ".join(_.strip() for _ in paras[1])

        # Drop the Help Option if the Doc drops it

        add_help = doc_has_help_option(alt_doc)

        # Take up all the rest of the Doc as the Epilog

        epilog = None
        epi = doc_find_epi(alt_doc)
        if epi:
            epilog_at = alt_doc.index(epi)
            epilog = alt_doc[epilog_at:]

        # Form an ArgumentParser with Epilog, but begin with no Args and no Options

        super().__init__(
            prog=prog,
            description=description,
            add_help=add_help,
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=epilog,
        )

        # Add zero or more Args and/or Options from the Doc

        parser_adds_from_doc(parser=self, doc=alt_doc)


def doc_has_help_option(doc):
    """Find the conventional H/ Help Option and return True, else False"""

    help_tail = "show this help message and exit"

    lines = doc.splitlines()
    for (index, line) in enumerate(lines):
        rejoined = " ".join(line.split())
        if rejoined.startswith("-h, --help"):
            next_line = lines[index + 1] if lines[(index + 1) :] else ""
            if rejoined.endswith(help_tail) or (next_line.strip() == help_tail):

                return True

    return False


def doc_find_epi(doc):
    """Pick the first Line of an ArgParse Epilog out of a Doc, else None"""

    paras = textwrap_split_paras(argparse_doc_upgrade(doc))
    paras = paras[2:]  # Skip over Usage and Desc

    if paras and paras[0][0].startswith("positional arguments"):
        paras = paras[1:]

    if paras and paras[0][0].startswith("options"):
        paras = paras[1:]

    if paras:
        epi = paras[0][0]

        return epi

    return None


#
# Rip Add_Argument calls out from the Doc
#


def parser_adds_from_doc(parser, doc):
    """Add the Positional Arguments and/or Options that the Doc lists"""

    paras = textwrap_split_paras(argparse_doc_upgrade(doc))

    usage = " ".join(paras[0])
    assert usage.startswith("usage: "), repr(usage)

    paras = paras[2:]  # Skip over Usage and Desc

    if paras and paras[0][0].startswith("positional arguments"):
        for line in textwrap_para_unbreakdent_lines(paras[0][1:]):
            parser_add_arg_line(parser, usage=usage, line=line)
        paras = paras[1:]

    if paras and paras[0][0].startswith("options"):
        for line in textwrap_para_unbreakdent_lines(paras[0][1:]):
            parser_add_option_line(parser, usage=usage, line=line)


def parser_add_arg_line(parser, usage, line):
    """Add one Positional Arg from one Doc Line"""

    words = line.split()
    if not words:

        return

    metavar = words[0]
    help_tail = line.split(None, 1)[-1] if words[1:] else None

    # Take mentions of NArgs ? or NArgs + or NArgs * from Usage

    dest = metavar.lower()
    nargs = None
    if "[{}]".format(metavar) in usage:
        nargs = "?"  # argparse.OPTIONAL
    elif " {} [{} ...]".format(metavar, metavar) in usage:
        dest = plural_en(dest)
        nargs = "+"  # argparse.ONE_OR_MORE
    elif "[{} ...]".format(metavar) in usage:
        dest = plural_en(dest)
        nargs = "*"  # argparse.ZERO_OR_MORE

    alt_help_tail = help_tail.replace("%", "%%") if help_tail else None
    parser.add_argument(dest, metavar=metavar, nargs=nargs, help=alt_help_tail)


def parser_add_option_line(parser, usage, line):
    """Add one Option, spelled once or twice, from one Doc Line"""

    words = line.split()
    if not words:

        return

    # Take the Metavar from Usage, such as the 'FILE' of '[--log FILE]'

    metavar = usage_find_metavar(usage, opt=words[0].rstrip(","))

    # Take the Option Strings, such as:  -f, --file  or  -f FILE, --file FILE

    opts = list()
    index = 0
    while words[index:] and words[index].startswith("-") and (len(opts) < 2):
        opts.append(words[index].rstrip(","))
        index += 1
        if metavar and words[index:] and (words[index].rstrip(",") == metavar):
            index += 1

    help_tail = line.split(None, index)[-1] if words[index:] else None
    alt_help_tail = help_tail.replace("%", "%%") if help_tail else None

    # Call victory when Parser Add_Help already did add this Option

    if (opts == ["-h", "--help"]) and parser.add_help:

        return

    # Count up from zero when the Option takes no Metavar

    if metavar is None:
        parser.add_argument(*opts, action="count", default=0, help=alt_help_tail)
    else:
        parser.add_argument(*opts, metavar=metavar, help=alt_help_tail)


def usage_find_metavar(usage, opt):
    """Pick the Metavar of an Option out of Usage, else None"""

    mark = "[{} ".format(opt)
    if mark not in usage:

        return None

    tail = usage[usage.index(mark) + len(mark) :]
    metavar = tail.split()[0].rstrip("]")

    return metavar


# deffed in many files  # missing from docs.python.org
def plural_en(word):
    """Guess the English plural of a word"""

    consonants = "bcdfghjklmnpqrstvwxz"  # without "y"

    rules = [
        (r"ex$", r"ices"),  # vortex, vortices
        (r"f$", r"ves"),  # leaf, leaves
        (r"is$", r"es"),  # basis, bases
        (r"ix$", r"ices"),  # appendix, appendices
        (r"o$", r"oes"),  # tomato, tomatoes
        (r"on$", r"a"),  # criterion, criteria
        (r"([{}])y$".format(consonants), r"\1ies"),  # lorry, lorries
        (r"(ch|s|sh|x|z)$", r"\1es"),  # stitch bus ash box lutz, ...es
    ]

    for (pattern, repl) in rules:
        if re.search(pattern, string=word):
            plural = re.sub(pattern, repl=repl, string=word)

            return plural

    plural = word + "s"  # word, words

    return plural

    # don't try to solve:  nucleus, nuclei


def _plural_en_test():

    # Test correct plurals

    singulars = "vortex leaf basis appendix tomato criterion lorry lutz".split()
    plurals = "vortices leaves bases appendices tomatoes criteria lorries lutzes"

    singulars.extend("cafe diagnosis safe word".split())
    plurals += " cafes diagnoses safes words"

    guesses = " ".join(plural_en(_) for _ in singulars)
    assert guesses == plurals, guesses

    # Test incorrect plurals

    incorrect_singulars = "child knife nucleus ox roof cello mouse".split()
    incorrect_plurals = "childs knifes nucleuses oxes rooves celloes mouses"

    incorrect_guesses = " ".join(plural_en(_) for _ in incorrect_singulars)
    assert incorrect_guesses == incorrect_plurals, incorrect_guesses


#
# Compare the Doc with the Help of the Parser compiled from it
#


# deffed in many files  # missing from docs.python.org
def parser_exit_unless_doc_eq(parser, doc, file=None):
    """Exit nonzero, unless the Doc equals 'parser.format_help()'"""

    fromfile = os.path.basename(file) if file else parser.prog
    fromfile = "{} --help".format(fromfile)
    tofile = "ArgumentParser(..."

    # Fetch the Parser Doc with Lines wrapped by a virtual Terminal of a fixed width

    with os_environ_patched(COLUMNS=str(_89_COLUMNS), PYTHON_COLORS="0"):
        parser_doc = parser.format_help()

    # Cut the jitter in Doc from ArgParse evolving across Python 3

    fromdoc = argparse_doc_upgrade(doc)
    todoc = argparse_doc_upgrade(parser_doc)

    diffchars = diff_fuzzed_else_complete(
        fromdoc=fromdoc, todoc=todoc, fromfile=fromfile, tofile=tofile
    )
    if diffchars:
        stderr_print(diffchars)  # '... --help' vs 'ArgumentParser(...'

        sys.exit(1)  # exit 1 to require Parser == Doc


# deffed in many files  # missing from docs.python.org
def argparse_doc_upgrade(doc):
    """Cut the jitter in Doc from ArgParse evolving across Python 3"""

    alt_doc = doc.strip()
    alt_doc = textwrap_unwrap_first_paragraph(alt_doc)

    pattern = r" \[([A-Z]+) \[[A-Z]+ [.][.][.]\]\]"
    alt_doc = re.sub(pattern, repl=r" [\1 ...]", string=alt_doc)

    alt_doc = alt_doc.replace("\noptional arguments:", "\noptions:")

    return alt_doc

    # such as:  'usage: echo.py [WORD [WORD ...]]'  ->  'usage: echo.py [WORD ...]'


def diff_fuzzed_else_complete(fromdoc, todoc, fromfile, tofile):
    """Diff the Doc's, but say no Diffs when they differ only in Whitespace"""

    fromlines = fromdoc.splitlines()
    tolines = todoc.splitlines()

    # Substitute the first matching Stale Line for each Fresh Line with equal Words

    from_rejoins = list(" ".join(_.split()) for _ in fromlines)

    fuzzed_tolines = list()
    for toline in tolines:
        rejoined = " ".join(toline.split())
        if rejoined in from_rejoins:
            fuzzed_tolines.append(fromlines[from_rejoins.index(rejoined)])
        else:
            fuzzed_tolines.append(toline)

    if fuzzed_tolines == fromlines:

        return ""

    # Show every Diff, once we know there is a Diff more than Whitespace

    difflines = difflib.unified_diff(
        a=fromlines, b=tolines, fromfile=fromfile, tofile=tofile, lineterm=""
    )
    diffchars = "\n".join(difflines)

    return diffchars


#
# Git-track some Python idioms here
#


# deffed in many files  # missing from docs.python.org
def textwrap_split_paras(text):
    """Divide the Chars into a List of non-empty Lists of possibly dented Lines"""

    paras = list()

    para = None
    for line in (text + "\n\n").splitlines():
        if not line.strip():
            if para is not None:
                paras.append(para)
            para = None
        elif not para:
            para = [line]
        else:
            para.append(line)

    return paras

    # such as:  "  a\n    b\n\n  c\n"  ->  [['  a', '    b'], ['  c']]


def textwrap_para_unbreakdent_lines(para):
    """Join the continuation lines dented beneath each leading line"""

    above_dent = None

    lines = list()
    for line in para:
        dent = line[: len(line) - len(line.lstrip())]

        if lines and (len(dent) > len(above_dent)):
            lines[-1] += " " + line.strip()

            continue

        lines.append(line)
        above_dent = dent

    return lines

    # such as:  [' a', '    b', ' c']  ->  [' a b', ' c']


def textwrap_unwrap_first_paragraph(text):
    """Join by single spaces all the leading lines up to the first empty line"""

    index = (text + "\n\n").index("\n\n")
    lines = text[:index].splitlines()
    chars = " ".join(_.strip() for _ in lines)
    alt_text = chars + text[index:]

    return alt_text


# deffed in many files  # missing from docs.python.org
@contextlib.contextmanager
def os_environ_patched(**kwargs):
    """Patch some Env Vars for a while, then put them back"""

    withs = dict((k, os.environ.get(k)) for k in kwargs.keys())
    os.environ.update(kwargs)
    try:
        yield
    finally:
        for (k, v) in withs.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v


# deffed in many files  # missing from docs.python.org
def stderr_print(*args):
    """Print the Args, but to Stderr, not to Stdout"""

    sys.stdout.flush()
    print(*args, file=sys.stderr)
    sys.stderr.flush()  # like for kwargs["end"] != "\n"


if __name__ == "__main__":
    main()


# copied from:  git clone https://github.com/pelavarre/pybashish.git
