"""Working out which scripting language a script is written in."""

from __future__ import annotations

from pathlib import Path

from ebi.models.script import Language, UnknownLanguageError


def _first_line(content: str) -> str | None:
    if not content:
        return None
    line = content.split("\n", 1)[0]
    return line[:-1] if line.endswith("\r") else line


def _lines(content: str) -> list[str]:
    if not content:
        return []
    parts = content.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def detect_from_cli_override(lang_str: str) -> Language:
    """Language named explicitly by the user."""
    return Language.from_name(lang_str)


def detect_from_command(command: str) -> Language | None:
    """Language implied by an interpreter command, which may be a path."""
    name = Path(command).name or command
    if name in ("bash", "sh", "zsh", "fish", "dash"):
        return Language.BASH
    if name in ("python", "python3", "python2", "py"):
        return Language.PYTHON
    return None


def detect_from_shebang(content: str) -> Language | None:
    """Language named by the shebang on the first line, if any."""
    first = _first_line(content)
    if first is None or not first.startswith("#!"):
        return None
    shebang = first.strip()
    if "bash" in shebang or "/bin/sh" in shebang or "zsh" in shebang:
        return Language.BASH
    if "python" in shebang:
        return Language.PYTHON
    return None


def detect_from_extension(filename: str) -> Language | None:
    """Language implied by a file name's extension."""
    extension = Path(filename).suffix[1:]
    if extension in ("sh", "bash"):
        return Language.BASH
    if extension in ("py", "python"):
        return Language.PYTHON
    return None


def _is_bash_line(line: str) -> bool:
    return (
        line.startswith("export ")
        or ("$" in line and ("{" in line or "(" in line))
        or "[[" in line
        or "]]" in line
        or line.startswith("if [")
        or line.startswith("while [")
        or ">&" in line
        or "2>&1" in line
        or line.startswith("function ")
        or " && " in line
        or " || " in line
    )


def _is_python_line(line: str) -> bool:
    return (
        line.startswith(("def ", "class ", "import ", "from "))
        or "if __name__ == '__main__'" in line
        or "print(" in line
        or (
            line.endswith(":")
            and line.startswith(("if ", "for ", "while ", "try:", "except "))
        )
    )


def _detect_from_content_heuristics(content: str) -> Language:
    bash_score = 0
    python_score = 0
    for line in _lines(content):
        trimmed = line.strip()
        bash_score += _is_bash_line(trimmed)
        python_score += _is_python_line(trimmed)

    if bash_score > python_score and bash_score > 0:
        return Language.BASH
    if python_score > 0:
        return Language.PYTHON
    raise UnknownLanguageError()


def detect_language(
    content: str,
    cli_override: str | None = None,
    command: str | None = None,
    filename: str | None = None,
) -> Language:
    """Detect the language from, in order: override, command, shebang, extension, content."""
    if cli_override is not None:
        return detect_from_cli_override(cli_override)

    if command is not None:
        language = detect_from_command(command)
        if language is not None:
            return language

    language = detect_from_shebang(content)
    if language is not None:
        return language

    if filename is not None:
        language = detect_from_extension(filename)
        if language is not None:
            return language

    return _detect_from_content_heuristics(content)