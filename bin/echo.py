#!/usr/bin/env python3

r"""
usage: echo.py [-h] [-n] [-s] [-e] [-E] [--verbose] [WORD ...]

print some words

positional arguments:
  WORD        a word to print

options:
  -h, --help  show this help message and exit
  -n          print just the words, don't add an end-of-line
  -s          print the words without a space between each word and the next
  -e          interpret backslash escapes
  -E          don't interpret backslash escapes (default)
  --verbose   print the words to "sys.stderr" too, before printing them

escapes:
  \\      backslash
  \a      alert (BEL)
  \b      backspace
  \c      produce no further output
  \e      escape
  \f      form feed
  \n      new line
  \r      carriage return
  \t      horizontal tab
  \v      vertical tab
  \0NNN   char of octal value NNN (1 to 3 digits)
  \xHH    char of hexadecimal value HH (1 to 2 digits)

quirks:
  understand "-n" like bash or zsh echo, unlike sh echo
  understand "-s" and "\c" and "\e" like fish echo, unlike bash echo
  takes the last of "-e" and "-E" as the one that counts, like fish echo
  takes options after words too, unlike bash echo, so say "--" before words like "-n"
  keeps just the last eight bits of an octal escape past \0377, like gnu echo
  leaves a backslash in place when it begins no escape, such as at "\q"

examples:
  echo 'Hello, Echo World!'
  echo.py -n '⌃ ⌥ ⇧ ⌘ ← → ↓ ↑ ' |hexdump -C
  echo.py -e 'column\tcolumn\ncolumn\tcolumn'
  echo.py -nse 'Hello,' ' Echo' ' World' '\x21' && echo
  echo.py -e 'data \c more data' |hexdump -C  # no end-of-line after 'data '
  echo.py --verbose -- -n
"""


import collections
import contextlib
import os
import re
import sys

import argdoc


Invocation = collections.namedtuple(
    "Invocation",
    "suppress_newline suppress_spacing interpret_escapes operands".split(),
)


# The Backslash Escapes of Echo, in the order we replace them

ECHO_ESCAPES = [
    (r"\\", "\\"),
    (r"\a", "\x07"),  # BEL
    (r"\b", "\x08"),  # BS
    (r"\c", None),  # produce no further output
    (r"\e", "\x1B"),  # ESC
    (r"\f", "\x0C"),  # FF
    (r"\n", "\x0A"),  # LF
    (r"\r", "\x0D"),  # CR
    (r"\t", "\x09"),  # HT
    (r"\v", "\x0B"),  # VT
]

ECHO_NUMERIC_ESCAPES = [
    (r"\\0([0-7]{1,3})", 8),
    (r"\\x([0-9A-Fa-f]{1,2})", 16),
]


# deffed in many files  # missing from docs.python.org
class BrokenPipeErrorSink(contextlib.ContextDecorator):
    """Cut unhandled BrokenPipeError down to sys.exit(1)

    Test with large Stdout cut sharply, such as:  echo.py -e '\\n\\n\\n' |head -1
    """

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        (exc_type, exc, exc_traceback) = exc_info
        if isinstance(exc, BrokenPipeError):  # catch this one

            null_fileno = os.open(os.devnull, flags=os.O_WRONLY)
            os.dup2(null_fileno, sys.stdout.fileno())  # avoid the next one

            sys.exit(1)


@BrokenPipeErrorSink()
def main(argv=None):
    """Run from the Command Line"""

    run_self_tests()

    alt_argv = sys.argv if (argv is None) else argv
    args = argdoc.parse_args(alt_argv[1:])

    if args.verbose:
        stderr_print(args.words)

    invocation = Invocation(
        suppress_newline=bool(args.n),
        suppress_spacing=bool(args.s),
        interpret_escapes=choose_escapes(args, argv_tail=alt_argv[1:]),
        operands=tuple(args.words),
    )

    chars = format_echo(invocation)
    stdout_write(chars)


def run_self_tests():
    """Run some Self Tests, as part of every Launch"""

    _echo_test()


def choose_escapes(args, argv_tail):
    """Say to interpret Escapes, or not, as told by the last of '-e' and '-E'"""

    if not args.e:

        return False

    if not args.E:

        return True

    # Take the last of '-e' and '-E' when given both, such as at:  -ne -E -e

    choice = None
    for arg in argv_tail:
        if arg == "--":
            break

        if re.match(r"^-[A-Za-z]+$", string=arg):
            for ch in arg[len("-") :]:
                if ch in "eE":
                    choice = ch == "e"

    return bool(choice)


#
# Form the Chars to print
#


def format_echo(invocation):
    """Join the Words, end the Line, and then interpret Escapes if asked"""

    sep = "" if invocation.suppress_spacing else " "
    end = "" if invocation.suppress_newline else "\n"

    chars = sep.join(invocation.operands) + end

    if invocation.interpret_escapes:
        chars = unescape_echo(chars)

    return chars

    # such as:  ("data", "more \\ndata") with -nse  ->  "datamore \ndata"


def unescape_echo(chars):
    """
    Replace each Backslash Escape with the Char it means, in the order of ECHO_ESCAPES

    Keep the Chars as a List of Shreds, where the even Shreds are Chars still to
    scan and the odd Shreds are Chars already replaced. Never scan a replaced
    Shred again, so the "\\" of "\\\\n" doesn't combine with the "n" after it
    """

    shreds = [chars]

    for (escape, repl) in ECHO_ESCAPES:
        if repl is None:
            shreds = shreds_truncate(shreds, mark=escape)
        else:
            shreds = shreds_replace(shreds, escape=escape, repl=repl)

    for (pattern, base) in ECHO_NUMERIC_ESCAPES:
        shreds = shreds_resub(shreds, pattern=pattern, base=base)

    unescaped = "".join(shreds)

    return unescaped


def shreds_replace(shreds, escape, repl):
    """Replace each Escape found inside the Shreds still to scan"""

    alt_shreds = list()
    for (index, shred) in enumerate(shreds):
        if index % 2:
            alt_shreds.append(shred)
            continue

        splits = shred.split(escape)

        alt_shreds.append(splits[0])
        for split in splits[1:]:
            alt_shreds.append(repl)
            alt_shreds.append(split)

    return alt_shreds


def shreds_resub(shreds, pattern, base):
    """Replace each Numeric Escape found inside the Shreds still to scan"""

    alt_shreds = list()
    for (index, shred) in enumerate(shreds):
        if index % 2:
            alt_shreds.append(shred)
            continue

        splits = re.split(pattern, string=shred)  # the digits land at odd indices
        for (split_index, split) in enumerate(splits):
            if split_index % 2:
                code = int(split, base) & 0xFF  # from 0o777 down to 0o377 at most
                alt_shreds.append(chr(code))
            else:
                alt_shreds.append(split)

    return alt_shreds


def shreds_truncate(shreds, mark):
    """Drop the first Mark found inside the Shreds still to scan, and all after it"""

    for (index, shred) in enumerate(shreds):
        if not (index % 2):
            mark_at = shred.find(mark)
            if mark_at >= 0:
                alt_shreds = shreds[:index] + [shred[:mark_at]]

                return alt_shreds

    return shreds


def _echo_test():
    """Run some Self Tests of this Echo Py"""

    def echo(*words, **kwargs):
        invocation = Invocation(
            suppress_newline=kwargs.get("n", False),
            suppress_spacing=kwargs.get("s", False),
            interpret_escapes=kwargs.get("e", False),
            operands=words,
        )
        chars = format_echo(invocation)

        return chars

    assert echo() == "\n"
    assert echo("data", "more data") == "data more data\n"
    assert echo("data", r"more data\n") == "data more data\\n\n"
    assert echo("data", "more data", n=True) == "data more data"
    assert echo("data", "more data", s=True) == "datamore data\n"

    assert echo("data", r"more \ndata", n=True, s=True, e=True) == "datamore \ndata"
    assert echo(r"data \c more data", e=True) == "data "
    assert echo(r"data \0153 more data", e=True) == "data k more data\n"
    assert echo(r"data \x75 more data", e=True) == "data u more data\n"

    assert echo("data\\\\", "more data", e=True) == "data\\ more data\n"
    assert echo(r"data\\n", e=True) == "data\\n\n"
    assert echo(r"data\\c more data", e=True) == "data\\c more data\n"


#
# Write the Chars out
#


def stdout_write(chars):
    """Write the Chars as UTF-8, but pass through the undecodable Bytes of Args"""

    encoded = chars.encode("utf-8", errors="surrogateescape")

    sys.stdout.flush()
    if not hasattr(sys.stdout, "buffer"):
        sys.stdout.write(chars)
    else:
        sys.stdout.buffer.write(encoded)
    sys.stdout.flush()


# deffed in many files  # missing from docs.python.org
def stderr_print(*args, **kwargs):
    sys.stdout.flush()
    print(*args, **kwargs, file=sys.stderr)
    sys.stderr.flush()  # esp. when kwargs["end"] != "\n"


if __name__ == "__main__":
    main(sys.argv)


# copied from:  git clone https://github.com/pelavarre/pybashish.git
