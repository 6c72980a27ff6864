"""Extracting script components and security-relevant operations from a script."""

from __future__ import annotations

import time

from ebi.models.components import NodeInfo, ScriptComponents, SecurityRelevance
from ebi.models.script import Language, UnknownLanguageError
from ebi.parser.shebang import parse_shebang, validate_shebang
from ebi.parser.syntax import ParsedNode, ParseTree, ScriptParser

_SHEBANG_RELEVANCE = {
    "bash": SecurityRelevance.LOW,
    "sh": SecurityRelevance.LOW,
    "zsh": SecurityRelevance.LOW,
    "python": SecurityRelevance.LOW,
    "python3": SecurityRelevance.LOW,
    "node": SecurityRelevance.LOW,
    "ruby": SecurityRelevance.LOW,
    "env": SecurityRelevance.MEDIUM,
    "rm": SecurityRelevance.CRITICAL,
    "dd": SecurityRelevance.CRITICAL,
    "fdisk": SecurityRelevance.CRITICAL,
    "mkfs": SecurityRelevance.CRITICAL,
}

_BASH_NETWORK_COMMANDS = ("curl", "wget", "nc", "netcat", "ssh", "scp", "rsync")

_PYTHON_DANGEROUS_MODULES = {
    "os": SecurityRelevance.HIGH,
    "subprocess": SecurityRelevance.HIGH,
    "sys": SecurityRelevance.MEDIUM,
    "ctypes": SecurityRelevance.HIGH,
    "pickle": SecurityRelevance.CRITICAL,
    "marshal": SecurityRelevance.CRITICAL,
    "importlib": SecurityRelevance.MEDIUM,
    "__import__": SecurityRelevance.CRITICAL,
}

_PYTHON_NETWORK_PATTERNS = ("urllib", "requests", "http", "socket", "ftplib")
_WRITE_MODES = ("'w'", '"w"', "'a'", '"a"')


def _lines(text: str) -> list[str]:
    """Split on '\\n', dropping a '\\r' before it and a final empty line."""
    if not text:
        return []
    parts = text.split("\n")
    if parts[-1] == "":
        parts.pop()
    return [part[:-1] if part.endswith("\r") else part for part in parts]


def _node(node_type: str, line: int, relevance: SecurityRelevance) -> NodeInfo:
    return NodeInfo(node_type, line, line, relevance)


def _bash_security_patterns(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    if "$(" in line or "`" in line:
        nodes.append(_node("command_substitution", number, SecurityRelevance.CRITICAL))
    if "eval " in line:
        nodes.append(_node("eval_statement", number, SecurityRelevance.CRITICAL))
    if "<(" in line or ">(" in line:
        nodes.append(_node("process_substitution", number, SecurityRelevance.HIGH))
    return nodes


def _bash_network_operations(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    for command in _BASH_NETWORK_COMMANDS:
        if command not in line:
            continue
        if command in ("curl", "wget") and "|" in line:
            relevance = SecurityRelevance.CRITICAL  # piped download
        else:
            relevance = SecurityRelevance.HIGH
        nodes.append(_node(f"network_operation: {command}", number, relevance))
    return nodes


def _bash_file_operations(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    if "rm -rf" in line or "rm -fr" in line:
        nodes.append(_node("dangerous_file_removal", number, SecurityRelevance.CRITICAL))
    if " > " in line or " >> " in line or " < " in line:
        nodes.append(_node("file_redirection", number, SecurityRelevance.MEDIUM))
    if "chmod" in line:
        relevance = (
            SecurityRelevance.HIGH
            if "777" in line or "+x" in line
            else SecurityRelevance.MEDIUM
        )
        nodes.append(_node("permission_change", number, relevance))
    return nodes


def _bash_privilege_patterns(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    if "sudo " in line:
        nodes.append(_node("privilege_escalation: sudo", number, SecurityRelevance.HIGH))
    if "su " in line or "su -" in line:
        nodes.append(_node("privilege_escalation: su", number, SecurityRelevance.HIGH))
    return nodes


def _python_security_patterns(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    if "subprocess." in line:
        relevance = (
            SecurityRelevance.CRITICAL if "shell=True" in line else SecurityRelevance.HIGH
        )
        nodes.append(_node("subprocess_call", number, relevance))
    if "os.system" in line:
        nodes.append(_node("os_system_call", number, SecurityRelevance.CRITICAL))
    return nodes


def _python_dangerous_imports(line: str, number: int) -> list[NodeInfo]:
    return [
        _node(f"dangerous_import: {module}", number, relevance)
        for module, relevance in _PYTHON_DANGEROUS_MODULES.items()
        if line.startswith(f"import {module}") or line.startswith(f"from {module} import")
    ]


def _python_exec_patterns(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    if "exec(" in line:
        nodes.append(_node("exec_statement", number, SecurityRelevance.CRITICAL))
    if "eval(" in line:
        nodes.append(_node("eval_statement", number, SecurityRelevance.CRITICAL))
    if "compile(" in line:
        nodes.append(_node("code_compilation", number, SecurityRelevance.HIGH))
    return nodes


def _python_io_operations(line: str, number: int) -> list[NodeInfo]:
    nodes = []
    if "open(" in line:
        relevance = (
            SecurityRelevance.MEDIUM
            if any(mode in line for mode in _WRITE_MODES)
            else SecurityRelevance.LOW
        )
        nodes.append(_node("file_operation", number, relevance))
    nodes.extend(
        _node(f"network_operation: {pattern}", number, SecurityRelevance.HIGH)
        for pattern in _PYTHON_NETWORK_PATTERNS
        if pattern in line
    )
    return nodes


_BASH_RULES = (
    _bash_security_patterns,
    _bash_network_operations,
    _bash_file_operations,
    _bash_privilege_patterns,
)

_PYTHON_RULES = (
    _python_security_patterns,
    _python_dangerous_imports,
    _python_exec_patterns,
    _python_io_operations,
)


class ComponentExtractor:
    """Splits a script into components and records its security-relevant operations."""

    def extract_from_script(self, content: str, language: Language) -> ScriptComponents:
        """Parse content and collect its components, shebang and notable operations.

        Raises UnknownLanguageError for an unsupported language and ParseError
        for a shebang naming a dangerous interpreter.
        """
        start = time.perf_counter()

        parser = ScriptParser(language)
        parse_tree = parser.parse(content)
        components = parser.extract_components(parse_tree)
        components.metadata.language = language

        self._extract_shebang_info(content, components)
        self._extract_ast_components(parse_tree, components)

        components.metadata.parse_time_ms += int((time.perf_counter() - start) * 1000)
        return components

    @staticmethod
    def _extract_shebang_info(content: str, components: ScriptComponents) -> None:
        shebang = parse_shebang(content)
        if shebang is None:
            return
        lines = _lines(content)
        first_line = lines[0] if lines else ""
        components.comments.append(f"SHEBANG: {first_line}")

        validate_shebang(content)

        relevance = _SHEBANG_RELEVANCE.get(shebang.interpreter, SecurityRelevance.MEDIUM)
        components.add_node_info(
            _node(f"shebang_interpreter: {shebang.interpreter}", 1, relevance)
        )

    @staticmethod
    def _extract_ast_components(parse_tree: ParseTree, components: ScriptComponents) -> None:
        if parse_tree.language is Language.BASH:
            rules = _BASH_RULES
        elif parse_tree.language is Language.PYTHON:
            rules = _PYTHON_RULES
        else:
            raise UnknownLanguageError()
        ComponentExtractor._apply_rules(parse_tree.root_node, rules, components)

    @staticmethod
    def _apply_rules(root: ParsedNode, rules, components: ScriptComponents) -> None:
        for number, line in enumerate(_lines(root.text), 1):
            trimmed = line.strip()
            for rule in rules:
                for node in rule(trimmed, number):
                    components.add_node_info(node)