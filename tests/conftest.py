"""
Pytest configuration and fixtures shared by the tests of the 'bin/' verbs
"""

import os
import shlex
import stat
import sys
from pathlib import Path

import pytest


# Put the 'bin/' dir on the path, for 'import echo' and friends

BIN_DIR = Path(__file__).parent.parent / "bin"
sys.path.insert(0, str(BIN_DIR))


@pytest.fixture
def bin_dir():
    """The dir of the verbs under test"""
    return BIN_DIR


@pytest.fixture
def echo_py_dir(tmp_path):
    """A dir holding an 'echo.py' that runs 'bin/echo.py' under this Python"""

    path = tmp_path / "echo.py"
    path.write_text(
        "#!/bin/sh\nexec {} {} \"$@\"\n".format(
            shlex.quote(sys.executable), shlex.quote(str(BIN_DIR / "echo.py"))
        )
    )
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)

    return tmp_path


@pytest.fixture
def posix_only():
    """Skip tests that need a Posix shell"""
    if os.name != "posix":
        pytest.skip("needs a posix shell")
