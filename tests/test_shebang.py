import pytest

from ebi.models.script import Language, ParseError
from ebi.parser.shebang import (
    ShebangInfo,
    detect_language,
    extract_language,
    is_env_shebang,
    parse_shebang,
    resolve_env_interpreter,
    validate_shebang,
)


def test_parse_bash_shebang():
    shebang = parse_shebang("#!/bin/bash\necho hello")
    assert shebang.interpreter == "bash"
    assert shebang.full_path == "/bin/bash"
    assert shebang.args == []


def test_parse_python_env_shebang():
    shebang = parse_shebang("#!/usr/bin/env python3 -u\nprint('hello')")
    assert shebang.interpreter == "env"
    assert shebang.args == ["python3", "-u"]


def test_language_detection():
    assert detect_language("#!/bin/bash\necho test") == Language.BASH
    assert detect_language("#!/usr/bin/env python3\nprint('test')") == Language.PYTHON


def test_no_shebang():
    assert parse_shebang("echo hello") is None
    assert detect_language("echo hello") is None


def test_empty_shebang():
    assert parse_shebang("#!   \necho") is None
    assert parse_shebang("") is None


def test_validate_dangerous_shebang():
    with pytest.raises(ParseError):
        validate_shebang("#!/bin/rm\necho test")


def test_validate_ordinary_shebang_passes():
    assert validate_shebang("#!/bin/bash\necho ok") is None


def test_env_helpers():
    env = ShebangInfo("env", ["python3"], "/usr/bin/env")
    bare_env = ShebangInfo("env", [], "/usr/bin/env")
    assert is_env_shebang(env) is True
    assert is_env_shebang(bare_env) is False
    assert resolve_env_interpreter(env) == "python3"
    assert resolve_env_interpreter(bare_env) is None


@pytest.mark.parametrize(
    "info, expected",
    [
        (ShebangInfo("zsh", [], "/bin/zsh"), Language.BASH),
        (ShebangInfo("python2", [], "/usr/bin/python2"), Language.PYTHON),
        (ShebangInfo("python3.11", [], "/opt/Python/bin/python3.11"), Language.PYTHON),
        (ShebangInfo("ruby", [], "/usr/bin/ruby"), None),
    ],
)
def test_extract_language(info, expected):
    assert extract_language(info) == expected


def test_crlf_first_line():
    shebang = parse_shebang("#!/bin/sh\r\necho hi\r\n")
    assert shebang.interpreter == "sh"
    assert detect_language("#!/bin/sh\r\necho hi") == Language.BASH