import pytest

from ebi.models.script import Language, UnknownLanguageError
from ebi.parser.language import (
    detect_from_cli_override,
    detect_from_command,
    detect_from_extension,
    detect_from_shebang,
    detect_language,
)


@pytest.mark.parametrize(
    "name, expected",
    [("bash", Language.BASH), ("sh", Language.BASH), ("Python", Language.PYTHON)],
)
def test_cli_override(name, expected):
    assert detect_from_cli_override(name) is expected


def test_cli_override_unknown_raises():
    with pytest.raises(UnknownLanguageError):
        detect_from_cli_override("ruby")


@pytest.mark.parametrize(
    "command, expected",
    [
        ("bash", Language.BASH),
        ("/bin/zsh", Language.BASH),
        ("dash", Language.BASH),
        ("python2", Language.PYTHON),
        ("/usr/bin/python3", Language.PYTHON),
        ("node", None),
        ("python3.11", None),
    ],
)
def test_detect_from_command(command, expected):
    assert detect_from_command(command) is expected


@pytest.mark.parametrize(
    "content, expected",
    [
        ("#!/bin/bash\necho hi", Language.BASH),
        ("#!/bin/sh\n", Language.BASH),
        ("#!/usr/bin/env zsh", Language.BASH),
        ("#!/usr/bin/env python3\nprint(1)", Language.PYTHON),
        ("#!/usr/bin/env node", None),
        ("  #!/bin/bash", None),
        ("echo hello", None),
        ("", None),
    ],
)
def test_detect_from_shebang(content, expected):
    assert detect_from_shebang(content) is expected


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("install.sh", Language.BASH),
        ("dir/run.bash", Language.BASH),
        ("tool.py", Language.PYTHON),
        ("notes.txt", None),
        ("Makefile", None),
    ],
)
def test_detect_from_extension(filename, expected):
    assert detect_from_extension(filename) is expected


def test_cli_override_has_top_priority():
    content = "#!/usr/bin/env python3\nprint('hello')"
    assert detect_language(content, cli_override="bash", command="python3") is Language.BASH


def test_command_beats_shebang():
    assert detect_language("#!/bin/bash\necho x", command="python3") is Language.PYTHON


def test_unrecognised_command_falls_back_to_shebang():
    assert detect_language("#!/bin/bash\necho x", command="node") is Language.BASH


def test_shebang_beats_extension():
    assert detect_language("#!/bin/bash\n", filename="tool.py") is Language.BASH


def test_extension_used_without_shebang():
    assert detect_language("x = 1", filename="tool.py") is Language.PYTHON


def test_heuristics_bash():
    content = "export PATH=/usr/bin\necho ${HOME}\n[[ -f x ]] && echo yes"
    assert detect_language(content) is Language.BASH


def test_heuristics_python():
    content = "import os\n\ndef main():\n    print('hi')\n"
    assert detect_language(content) is Language.PYTHON


def test_heuristics_tie_prefers_python():
    assert detect_language("import os\nexport X=1") is Language.PYTHON


def test_heuristics_fail_raises():
    with pytest.raises(UnknownLanguageError):
        detect_language("hello world\n")


def test_empty_content_raises():
    with pytest.raises(UnknownLanguageError):
        detect_language("")