"""Scripts, their languages and the errors raised while handling them."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class EbiError(Exception):
    """Base class for all errors raised by the package."""


class UnknownLanguageError(EbiError):
    """The script language could not be determined or is not supported."""

    def __init__(self, message: str = "Unknown or unsupported script language") -> None:
        super().__init__(message)


class InvalidArgumentsError(EbiError):
    """An argument given by the user is not acceptable."""


class ParseError(EbiError):
    """The script could not be parsed."""


def _lines(text: str) -> list[str]:
    """Split text into lines on '\\n', dropping a '\\r' before it and a final empty line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _first_line(text: str) -> str | None:
    lines = _lines(text)
    return lines[0] if lines else None


class Language(Enum):
    """Scripting language of a script."""

    BASH = "bash"
    PYTHON = "python"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> Language:
        """Parse a language name given by the user."""
        lowered = name.lower()
        if lowered in ("bash", "sh", "shell"):
            return cls.BASH
        if lowered in ("python", "python3", "py"):
            return cls.PYTHON
        raise UnknownLanguageError()

    @classmethod
    def from_command(cls, command: str) -> Language | None:
        """Infer the language from the name of the interpreter command."""
        if command in ("bash", "sh", "zsh", "dash", "fish"):
            return cls.BASH
        if command.startswith("python"):
            return cls.PYTHON
        return None

    @classmethod
    def from_shebang(cls, shebang_line: str) -> Language | None:
        """Infer the language from a shebang line."""
        shebang = shebang_line.strip()
        if not shebang.startswith("#!"):
            return None
        interpreter = shebang
        while interpreter.startswith("#!"):
            interpreter = interpreter[2:]
        if "python" in interpreter:
            return cls.PYTHON
        if "bash" in interpreter or "/sh" in interpreter:
            return cls.BASH
        return None

    def __str__(self) -> str:
        return self.value


class OutputLanguage(Enum):
    """Natural language used for analysis output."""

    ENGLISH = "english"
    JAPANESE = "japanese"

    @classmethod
    def from_name(cls, name: str) -> OutputLanguage:
        """Parse an output language name or code."""
        lowered = name.lower()
        if lowered in ("english", "en"):
            return cls.ENGLISH
        if lowered in ("japanese", "ja", "jp"):
            return cls.JAPANESE
        raise InvalidArgumentsError(f"Unsupported output language: {name}")

    def as_llm_language(self) -> str:
        """Capitalised language name used in prompts."""
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScriptSource:
    """Where a script was read from: standard input when path is None."""

    path: Path | None = None

    @classmethod
    def stdin(cls) -> ScriptSource:
        return cls(None)

    @classmethod
    def file(cls, path: str | Path) -> ScriptSource:
        return cls(Path(path))

    @property
    def is_stdin(self) -> bool:
        return self.path is None

    def __str__(self) -> str:
        return "stdin" if self.path is None else str(self.path)


@dataclass
class Script:
    """A script's text together with its source and language."""

    content: str
    source: ScriptSource = field(default_factory=ScriptSource.stdin)
    language: Language = Language.UNKNOWN

    def detect_language(self, cli_lang: str | None = None, command: str | None = None) -> None:
        """Set the language from the CLI flag, the command name or the shebang, in that order."""
        if cli_lang is not None:
            self.language = Language.from_name(cli_lang)
            return

        if command is not None:
            language = Language.from_command(command)
            if language is not None:
                self.language = language
                return

        first = _first_line(self.content)
        if first is not None:
            language = Language.from_shebang(first)
            if language is not None:
                self.language = language
                return

        raise UnknownLanguageError()

    def is_empty(self) -> bool:
        return not self.content.strip()

    def size_bytes(self) -> int:
        return len(self.content.encode("utf-8"))

    def line_count(self) -> int:
        return len(_lines(self.content))