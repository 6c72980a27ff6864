"""Line-based parsing of scripts into comments, literals, code and notable nodes."""

from __future__ import annotations

import time
from dataclasses import dataclass

from ebi.models.components import ScriptComponents
from ebi.models.script import Language, UnknownLanguageError

_QUOTES = ('"', "'")
_PYTHON_QUOTE_PAIRS = (('"""', '"""'), ("'''", "'''"), ('"', '"'), ("'", "'"))


def _lines(text: str) -> list[str]:
    """Split on '\\n', dropping a '\\r' before it and a final empty line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _outside_quotes(prefix: str) -> bool:
    """Whether text following prefix is outside a string, by counting quotes."""
    return sum(prefix.count(quote) for quote in _QUOTES) % 2 == 0


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


@dataclass
class ParsedNode:
    """A node of a parse tree with its text and position."""

    node_type: str
    text: str
    start_byte: int
    end_byte: int
    start_row: int
    end_row: int


@dataclass
class ParseTree:
    """The result of parsing a script: a root node spanning the whole source."""

    root_node: ParsedNode
    language: Language
    total_nodes: int


def _bash_string_literals(line: str) -> list[str]:
    literals: list[str] = []
    in_single = False
    in_double = False
    current: list[str] = []
    for ch in line:
        if ch == "'" and not in_double:
            if in_single:
                literals.append(f"'{''.join(current)}'")
                current.clear()
            in_single = not in_single
        elif ch == '"' and not in_single:
            if in_double:
                literals.append(f'"{"".join(current)}"')
                current.clear()
            in_double = not in_double
        elif in_single or in_double:
            current.append(ch)
    return literals


def _python_string_literals(line: str) -> list[str]:
    literals: list[str] = []
    for start, end in _PYTHON_QUOTE_PAIRS:
        start_pos = line.find(start)
        if start_pos < 0:
            continue
        body_start = start_pos + len(start)
        end_pos = line.find(end, body_start)
        if end_pos >= 0:
            literals.append(line[start_pos : end_pos + len(end)])
    return literals


def _bash_function_name(line: str) -> str | None:
    if line.startswith("function "):
        rest = line[9:]
        paren = rest.find("(")
        if paren >= 0:
            return rest[:paren].strip()
        space = rest.find(" ")
        if space >= 0:
            return rest[:space].strip()
        return None
    paren = line.find("() {")
    if paren >= 0:
        return line[:paren].strip()
    return None


def _python_function_name(line: str) -> str | None:
    rest = line[4:]
    paren = rest.find("(")
    return rest[:paren].strip() if paren >= 0 else None


def _python_class_name(line: str) -> str | None:
    rest = line[6:]
    paren = rest.find("(")
    if paren >= 0:
        return rest[:paren].strip()
    colon = rest.find(":")
    if colon >= 0:
        return rest[:colon].strip()
    return None


def _strip_bash_comment(line: str) -> str:
    pos = line.find("#")
    if pos >= 0 and _outside_quotes(line[:pos]):
        return line[:pos].rstrip()
    return line


class ScriptParser:
    """Parses Bash or Python scripts and extracts their components."""

    def __init__(self, language: Language) -> None:
        if language not in (Language.BASH, Language.PYTHON):
            raise UnknownLanguageError()
        self.language = language

    def parse(self, source_code: str) -> ParseTree:
        """Build a parse tree whose root spans the whole source."""
        lines = _lines(source_code)
        root = ParsedNode(
            node_type="source_file",
            text=source_code,
            start_byte=0,
            end_byte=len(source_code.encode("utf-8")),
            start_row=0,
            end_row=max(len(lines) - 1, 0),
        )
        return ParseTree(root_node=root, language=self.language, total_nodes=len(lines))

    def extract_components(self, parse_tree: ParseTree) -> ScriptComponents:
        """Separate comments, string literals and code, and record notable nodes."""
        start = time.perf_counter()
        components = ScriptComponents()
        if self.language is Language.BASH:
            self._extract_bash(parse_tree.root_node, components)
        else:
            self._extract_python(parse_tree.root_node, components)

        components.metadata.total_nodes = parse_tree.total_nodes
        components.metadata.parse_time_ms = _elapsed_ms(start)
        components.metadata.language = self.language
        return components

    @staticmethod
    def _extract_bash(node: ParsedNode, components: ScriptComponents) -> None:
        lines = _lines(node.text)
        for number, line in enumerate(lines, 1):
            trimmed = line.strip()

            hash_pos = trimmed.find("#")
            if hash_pos >= 0 and _outside_quotes(trimmed[:hash_pos]):
                components.comments.append(trimmed[hash_pos:])

            components.string_literals.extend(_bash_string_literals(line))

            if trimmed.startswith("function ") or "() {" in trimmed:
                name = _bash_function_name(trimmed)
                if name is not None:
                    components.add_function_definition(name, number)

            equals = trimmed.find("=")
            if equals > 0 and " " not in trimmed[:equals]:
                components.add_variable_assignment(trimmed[:equals], number)

            if "$(" in trimmed or "`" in trimmed:
                components.add_command_substitution(f"Line {number}: {trimmed}")

        stripped = (_strip_bash_comment(line) for line in lines)
        components.code_body = "\n".join(line for line in stripped if line.strip())

    @staticmethod
    def _extract_python(node: ParsedNode, components: ScriptComponents) -> None:
        lines = _lines(node.text)
        for number, line in enumerate(lines, 1):
            trimmed = line.strip()

            if trimmed.startswith("#"):
                components.comments.append(trimmed)

            components.string_literals.extend(_python_string_literals(line))

            if trimmed.startswith("def "):
                name = _python_function_name(trimmed)
                if name is not None:
                    components.add_function_definition(name, number)

            if trimmed.startswith("class "):
                name = _python_class_name(trimmed)
                if name is not None:
                    components.add_class_definition(name, number)

            if trimmed.startswith(("import ", "from ")):
                components.add_import_statement(trimmed, number)

        components.code_body = "\n".join(
            line for line in lines if line.strip() and not line.strip().startswith("#")
        )


def create_parser(language: Language) -> ScriptParser:
    """Create a parser for the given language."""
    return ScriptParser(language)