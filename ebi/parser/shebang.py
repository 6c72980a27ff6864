"""Reading the shebang line at the top of a script."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath

from ebi.models.script import Language, ParseError

_DANGEROUS_INTERPRETERS = ("rm", "dd", "mkfs", "fdisk")


@dataclass
class ShebangInfo:
    """Interpreter named by a shebang, with its arguments and full path."""

    interpreter: str
    args: list[str] = field(default_factory=list)
    full_path: str = ""


def _first_line(content: str) -> str | None:
    if not content:
        return None
    line = content.split("\n", 1)[0]
    return line[:-1] if line.endswith("\r") else line


def parse_shebang(content: str) -> ShebangInfo | None:
    """Parse the shebang on the first line of content; None if there is none."""
    first = _first_line(content)
    if first is None or not first.startswith("#!"):
        return None
    parts = first[2:].split()
    if not parts:
        return None
    interpreter_path, *args = parts
    interpreter = PurePosixPath(interpreter_path).name or interpreter_path
    return ShebangInfo(interpreter=interpreter, args=args, full_path=interpreter_path)


def extract_language(shebang_info: ShebangInfo) -> Language | None:
    """Language of the interpreter, judged by its name and then its path."""
    if shebang_info.interpreter in ("bash", "sh", "zsh", "fish", "dash"):
        return Language.BASH
    if shebang_info.interpreter in ("python", "python3", "python2", "py"):
        return Language.PYTHON
    path = shebang_info.full_path.lower()
    if "bash" in path or "/bin/sh" in path:
        return Language.BASH
    if "python" in path:
        return Language.PYTHON
    return None


def is_env_shebang(shebang_info: ShebangInfo) -> bool:
    """Whether the shebang runs env with an interpreter as argument."""
    return shebang_info.interpreter == "env" and bool(shebang_info.args)


def resolve_env_interpreter(shebang_info: ShebangInfo) -> str | None:
    """Interpreter that an env shebang starts, if it is one."""
    if is_env_shebang(shebang_info):
        return shebang_info.args[0]
    return None


def detect_language(content: str) -> Language | None:
    """Language named by the shebang of content, looking through env."""
    shebang = parse_shebang(content)
    if shebang is None:
        return None
    real_interpreter = resolve_env_interpreter(shebang)
    if real_interpreter is not None:
        shebang = ShebangInfo(
            interpreter=real_interpreter,
            args=shebang.args[1:],
            full_path=shebang.full_path,
        )
    return extract_language(shebang)


def validate_shebang(content: str) -> None:
    """Raise ParseError if the shebang names an empty or dangerous interpreter."""
    shebang = parse_shebang(content)
    if shebang is None:
        return
    if not shebang.full_path:
        raise ParseError("Empty shebang interpreter")
    if shebang.interpreter in _DANGEROUS_INTERPRETERS:
        raise ParseError(
            f"Potentially dangerous interpreter in shebang: {shebang.interpreter}"
        )