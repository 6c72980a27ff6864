"""Pieces extracted from a script and the metadata gathered while parsing it."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from ebi.models.script import Language

_LINE_NUMBER = re.compile(r"\+?[0-9]+")


class SecurityRelevance(Enum):
    """How much a piece of code matters for security."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"

    @property
    def rank(self) -> int:
        """Sort rank: CRITICAL is 0, LOW is 3."""
        return _RELEVANCE_RANK[self]

    @classmethod
    def from_node_type(cls, node_type: str) -> SecurityRelevance:
        """Classify a syntax node type by name."""
        lowered = node_type.lower()
        if lowered in ("command_substitution", "process_substitution", "eval", "exec"):
            return cls.CRITICAL
        if lowered in ("file_redirect", "pipe", "curl", "wget", "ssh", "scp"):
            return cls.HIGH
        if lowered in ("variable_assignment", "export", "source", "import"):
            return cls.MEDIUM
        return cls.LOW

    def __str__(self) -> str:
        return self.value


_RELEVANCE_RANK = {
    SecurityRelevance.CRITICAL: 0,
    SecurityRelevance.HIGH: 1,
    SecurityRelevance.MEDIUM: 2,
    SecurityRelevance.LOW: 3,
}


@dataclass
class NodeInfo:
    """A security-relevant construct found at some lines of a script."""

    node_type: str
    line_start: int
    line_end: int
    security_relevance: SecurityRelevance


@dataclass
class ParseMetadata:
    """Facts recorded while parsing a script."""

    total_nodes: int = 0
    parse_time_ms: int = 0
    truncated: bool = False
    priority_nodes: list[NodeInfo] = field(default_factory=list)
    language: Language = Language.UNKNOWN


@dataclass
class ScriptComponents:
    """Code body, comments and string literals of a script, kept apart."""

    code_body: str = ""
    comments: list[str] = field(default_factory=list)
    string_literals: list[str] = field(default_factory=list)
    metadata: ParseMetadata = field(default_factory=ParseMetadata)

    def add_function_definition(self, name: str, line: int) -> None:
        self.add_node_info(
            NodeInfo(f"function_definition: {name}", line, line, SecurityRelevance.LOW)
        )

    def add_class_definition(self, name: str, line: int) -> None:
        self.add_node_info(
            NodeInfo(f"class_definition: {name}", line, line, SecurityRelevance.LOW)
        )

    def add_variable_assignment(self, name: str, line: int) -> None:
        self.add_node_info(
            NodeInfo(f"variable_assignment: {name}", line, line, SecurityRelevance.MEDIUM)
        )

    def add_import_statement(self, statement: str, line: int) -> None:
        self.add_node_info(
            NodeInfo(f"import: {statement}", line, line, SecurityRelevance.MEDIUM)
        )

    def add_command_substitution(self, command: str) -> None:
        """Record a command substitution; a 'Line N:' prefix gives its line number."""
        line = 1
        if command.startswith("Line "):
            candidate = command[5:].split(":", 1)[0]
            if _LINE_NUMBER.fullmatch(candidate):
                line = int(candidate)
        self.add_node_info(
            NodeInfo(
                f"command_substitution: {command}", line, line, SecurityRelevance.CRITICAL
            )
        )

    def add_node_info(self, node_info: NodeInfo) -> None:
        """Add a node, keeping nodes ordered by relevance and then by line."""
        nodes = self.metadata.priority_nodes
        nodes.append(node_info)
        nodes.sort(key=lambda node: (node.security_relevance.rank, node.line_start))

    def has_content(self) -> bool:
        return bool(self.code_body.strip() or self.comments or self.string_literals)

    def total_extracted_items(self) -> int:
        return len(self.comments) + len(self.string_literals)

    def critical_nodes(self) -> list[NodeInfo]:
        return [
            node
            for node in self.metadata.priority_nodes
            if node.security_relevance is SecurityRelevance.CRITICAL
        ]

    def high_risk_nodes(self) -> list[NodeInfo]:
        return [
            node
            for node in self.metadata.priority_nodes
            if node.security_relevance in (SecurityRelevance.CRITICAL, SecurityRelevance.HIGH)
        ]

    def analysis_content(self, language: Language, include_priority_nodes: bool) -> str:
        """Markdown summary of the code body and, optionally, its priority nodes."""
        parts = [f"# {language.value} Script Analysis\n\n"]

        if self.code_body.strip():
            parts.append(f"## Code Logic:\n{self.code_body}\n\n")

        if include_priority_nodes and self.metadata.priority_nodes:
            parts.append("## Security-Relevant Operations:\n")
            parts.extend(
                f"- {node.security_relevance.value}: {node.node_type} "
                f"(lines {node.line_start}-{node.line_end})\n"
                for node in self.metadata.priority_nodes
            )
            parts.append("\n")

        return "".join(parts)

    def injection_content(self) -> str:
        """Comments and string literals, numbered, for injection analysis."""
        parts: list[str] = []
        for title, items in (("Comments", self.comments), ("String Literals", self.string_literals)):
            if items:
                parts.append(f"## {title}:\n")
                parts.extend(f"{number}. {item}\n" for number, item in enumerate(items, 1))
                parts.append("\n")

        if not parts:
            return "No comments or string literals found.\n"
        return "".join(parts)