#!/usr/bin/env python3

"""
usage: doctestbash.py [-h] [-b] [-q] [-v] [FILE ...]

test if bash behaves as the transcripts say it should

positional arguments:
  FILE                  folders or files of '.typescript' files

options:
  -h, --help            show this help message and exit
  -b, --rip-bash-paste  print the bash input lines, but don't run them
  -q, --quiet           say less
  -v, --verbose         say more

quirks:
  puts its own folder first in the PATH of bash, such as to find "echo.py" there
  finds "echo.py" there in a checkout or editable install, not in site-packages
  prints the actual output with -vv, even when matching it to "..." (unlike doctest)
  allows blank lines in output to mean blank lines (unlike classic doctest)
  shows a nonzero exit status as "+ exit N" after the output
  drops trailing blanks from each line of output, and blank lines around the output

examples:
  bin/doctestbash.py tests/
  bin/doctestbash.py -vv tests/echo.typescript
  bin/doctestbash.py -b tests/echo.typescript |head

see also:  python "import doctest"
"""


import collections
import os
import re
import subprocess
import sys

import argdoc


Test = collections.namedtuple("Test", "dent shline wants".split())


def main(argv=None):
    """Run from the Command Line"""

    alt_argv = sys.argv if (argv is None) else argv
    args = argdoc.parse_args(alt_argv[1:])
    args.vq = args.verbose - args.quiet

    # Require one or more args

    if not args.files:
        stderr_print(
            "doctestbash.py: error: the following arguments are required: FILE"
        )

        sys.exit(2)  # exit 2 to reject usage

    # Work each arg in order

    for path in walk_typescript_paths(args.files):
        run_typescript_file(args, path=path)


def walk_typescript_paths(files):
    """Yield each File, and each '.typescript' File found inside each Folder"""

    for args_file in files:
        if not os.path.isdir(args_file):
            yield args_file

            continue

        for (root, dirs, hits) in os.walk(args_file):
            dirs.sort()  # mutate, to walk in order
            for hit in sorted(hits):
                path = os.path.join(root, hit)
                if os.path.splitext(path)[-1] == ".typescript":
                    yield path


def run_typescript_file(args, path):
    """Run each Test of one TypeScript File, and count the Tests passed"""

    with open(path) as incoming:
        tests = split_typescript(incoming.read().splitlines())

    passes = 0
    for test in tests:

        if args.rip_bash_paste:
            print(test.shline)
            passes += 1

            continue

        if args.vq >= 1:
            stderr_print("+ {}".format(test.shline))

        gots = run_one_shline(test.shline)
        require_test_passed(args, path=path, passes=passes, test=test, gots=gots)

        passes += 1

    if not args.rip_bash_paste:
        if args.vq >= 0:
            stderr_print("doctestbash.py: {} tests passed at:  {}".format(passes, path))

    return passes


#
# Take the Tests out of a Transcript
#


def split_typescript(lines):
    """Take each Test: an input line, and the output lines dented beneath it"""

    prompt = "$ "

    tests = list()

    taking = None
    for line in lines:
        (dent, text) = str_splitdent(line.rstrip())
        prompting = text.startswith(prompt) or (text == prompt.strip())

        # Take output, till the next Prompt at the same Dent, or a Line dented less

        if taking is not None:
            if not text:
                taking.wants.append("")

                continue

            if dent.startswith(taking.dent):
                if (dent != taking.dent) or not prompting:
                    taking.wants.append(line.rstrip()[len(taking.dent) :])

                    continue

            tests.append(taking)
            taking = None

        # Take input, else skip a comment

        if prompting:
            shline = text[len(prompt) :]
            taking = Test(dent=dent, shline=shline, wants=list())

    if taking is not None:
        tests.append(taking)

    # Drop each empty input, such as a "$" line ahead of more comments

    alt_tests = list()
    for test in tests:
        if test.shline.strip():
            wants = lines_strip_blank_ends(test.wants)
            alt_tests.append(test._replace(wants=wants))

    return alt_tests


# deffed in many files  # missing from docs.python.org
def str_splitdent(line):
    """Split apart the indentation of a line, from the remainder of the line"""

    lstripped = line.lstrip()
    len_dent = len(line) - len(lstripped)

    tail = lstripped
    if not lstripped:  # see no chars, not all chars, as the indentation of a blank line
        tail = line
        len_dent = 0

    dent = len_dent * " "

    return (dent, tail)


def lines_strip_blank_ends(lines):
    """Drop the blank lines at the start and at the end"""

    chars = "\n".join(_.rstrip() for _ in lines)
    alt_lines = chars.strip("\n").splitlines()

    return alt_lines


#
# Run the Tests
#


def run_one_shline(shline, path_dirs=None):
    """Shell out, and return the Lines of Output, with any nonzero Exit Status"""

    alt_path_dirs = path_dirs
    if path_dirs is None:
        alt_path_dirs = [os.path.dirname(os.path.realpath(__file__))]

    env = dict(os.environ)
    env["PATH"] = os.pathsep.join(list(alt_path_dirs) + [env.get("PATH", "")])

    run = subprocess.run(
        shline,
        shell=True,
        stdin=subprocess.PIPE,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        env=env,
    )
    assert not run.stderr  # because stderr=subprocess.STDOUT

    chars = run.stdout.decode("utf-8", errors="replace").replace("\r\n", "\n")
    gots = lines_strip_blank_ends(chars.splitlines())
    if run.returncode:
        gots.append("+ exit {}".format(run.returncode))

    return gots


def find_first_mismatch(gots, wants):
    """Return the Index, Want, and Got of the first Line that differs, else None"""

    max_len = max(len(wants), len(gots))
    alt_wants = wants + (max_len - len(wants)) * [""]
    alt_gots = gots + (max_len - len(gots)) * [""]

    for (index, (want, got)) in enumerate(zip(alt_wants, alt_gots)):
        if got != want:
            if not equal_but_for_ellipses(got, want=want):

                return (index, want, got)

    return None


def require_test_passed(args, path, passes, test, gots):
    """Exit nonzero, unless actual output roughly equals expected output"""

    mismatch = find_first_mismatch(gots, wants=test.wants)

    if args.vq >= 2:
        for got in gots[: mismatch[0] if mismatch else len(gots)]:
            stderr_print(test.dent + got)

    if mismatch is None:

        return

    (index, want, got) = mismatch

    if args.vq >= 2:
        stderr_print()
        stderr_print("wants ......: {}".format(repr(test.wants[index:])))
        stderr_print("but gots ...: {}".format(repr(gots[index:])))
        stderr_print()
        stderr_print("want .......: {}".format(want))
        stderr_print("but got ....: {}".format(got))
        diff_mask = "".join(("^" if (_[0] != _[-1]) else ".") for _ in zip(want, got))
        stderr_print("diff mask ..: {}".format(diff_mask))
        stderr_print()

    reasons = list()
    reasons.append("unexpected output after {} tests:".format(passes))
    reasons.append("$ {}".format(test.shline))
    if args.vq < 2:
        reasons.append("try again with -vv")
    reasons.append("fix the code, else the test:  vim {}".format(path))  # or both

    for reason in reasons:
        stderr_print("doctestbash.py: error: {}".format(reason))

    sys.exit(1)  # exit 1 to require the transcript played back


def equal_but_for_ellipses(got, want):
    """Compare two strings, but match "..." to zero or more characters"""

    ellipsis = "..."

    musts = want.split(ellipsis)
    pattern = ".*".join(re.escape(_) for _ in musts)

    if re.fullmatch(pattern, string=got, flags=re.DOTALL):

        return True

    return False

    # such as:  "usage: echo.py [-h] ..." matching the whole usage line


# deffed in many files  # missing from docs.python.org
def stderr_print(*args):
    """Print the Args, but to Stderr, not to Stdout"""

    sys.stdout.flush()
    print(*args, file=sys.stderr)
    sys.stderr.flush()  # like for kwargs["end"] != "\n"


if __name__ == "__main__":
    sys.exit(main(sys.argv))


# copied from:  git clone https://github.com/pelavarre/pybashish.git
