"""Rating the security relevance of script constructs by simple pattern rules."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from ebi.models.components import NodeInfo, SecurityRelevance
from ebi.models.script import Language

_RISK_EXPLANATIONS = {
    SecurityRelevance.CRITICAL: (
        "Contains operations that could cause immediate system damage, "
        "execute arbitrary code, or compromise system security"
    ),
    SecurityRelevance.HIGH: (
        "Contains operations that require elevated privileges, "
        "perform network communication, or modify system state"
    ),
    SecurityRelevance.MEDIUM: (
        "Contains operations that access system resources, "
        "environment variables, or perform file I/O"
    ),
    SecurityRelevance.LOW: "Contains only standard operations with minimal security impact",
}

_WRITE_MODES = ("'w'", '"w"', "'a'", '"a"')
_READ_MODES = ("'r'", '"r"')


def _has_any(content: str, needles: Iterable[str]) -> bool:
    return any(needle in content for needle in needles)


def _is_critical_bash(node_type: str, content: str) -> bool:
    if "eval" in node_type or "eval " in content:
        return True
    if "command_substitution" in node_type and _has_any(
        content, ("curl", "wget", "rm -rf", "dd ")
    ):
        return True
    if _has_any(content, ("curl", "wget")) and _has_any(content, (" | bash", " | sh")):
        return True
    if _has_any(content, ("rm -rf /", "rm -rf $", "mkfs", "fdisk")):
        return True
    if "process_substitution" in node_type and _has_any(content, ("curl", "wget")):
        return True
    return False


def _is_high_risk_bash(node_type: str, content: str) -> bool:
    if _has_any(content, ("sudo ", "su ")):
        return True
    if _has_any(content, ("ssh", "scp", "nc ", "netcat")):
        return True
    if _has_any(content, ("chmod 777", "chmod +x")):
        return True
    if _has_any(content, ("curl", "wget")):
        return True
    if "process_substitution" in node_type:
        return True
    if "source " in content and _has_any(content, ("http", "ftp")):
        return True
    return False


def _is_medium_risk_bash(node_type: str, content: str) -> bool:
    if _has_any(content, ("export ", "unset ")):
        return True
    if _has_any(content, (" > ", " >> ", " < ")):
        return True
    if "variable_assignment" in node_type and _has_any(content, ("$", "`", "$(")):
        return True
    if "chmod" in content and "777" not in content and "+x" not in content:
        return True
    if "source " in content and "http" not in content and "ftp" not in content:
        return True
    return False


def _is_critical_python(content: str) -> bool:
    if _has_any(content, ("exec(", "eval(")):
        return True
    if "os.system(" in content:
        return True
    if "subprocess." in content and "shell=True" in content:
        return True
    if _has_any(content, ("pickle.loads(", "marshal.loads(")):
        return True
    if _has_any(content, ("__import__(", "importlib.import_module")):
        return True
    return False


def _is_high_risk_python(content: str) -> bool:
    if "subprocess." in content:
        return True
    if _has_any(content, ("urllib.request", "requests.", "http.client", "socket.")):
        return True
    if "open(" in content and _has_any(content, _WRITE_MODES):
        return True
    if "ctypes." in content:
        return True
    if "compile(" in content:
        return True
    return False


def _is_medium_risk_python(node_type: str, content: str) -> bool:
    if "open(" in content and _has_any(content, _READ_MODES):
        return True
    if _has_any(content, ("os.environ", "os.getenv")):
        return True
    if "import" in node_type and _has_any(content, ("os", "sys", "subprocess", "ctypes")):
        return True
    if _has_any(content, ("os.path", "pathlib")):
        return True
    return False


class SecurityClassifier:
    """Classifies script constructs and whole scripts by security relevance."""

    def classify_node_security(
        self, node_type: str, content: str, language: Language
    ) -> SecurityRelevance:
        """Relevance of one construct, given its node type and source text."""
        if language is Language.BASH:
            if _is_critical_bash(node_type, content):
                return SecurityRelevance.CRITICAL
            if _is_high_risk_bash(node_type, content):
                return SecurityRelevance.HIGH
            if _is_medium_risk_bash(node_type, content):
                return SecurityRelevance.MEDIUM
            return SecurityRelevance.LOW
        if language is Language.PYTHON:
            if _is_critical_python(content):
                return SecurityRelevance.CRITICAL
            if _is_high_risk_python(content):
                return SecurityRelevance.HIGH
            if _is_medium_risk_python(node_type, content):
                return SecurityRelevance.MEDIUM
            return SecurityRelevance.LOW
        # An unknown language is treated as risky.
        return SecurityRelevance.MEDIUM

    def classify_script_overall_risk(self, nodes: Sequence[NodeInfo]) -> SecurityRelevance:
        """Relevance of a whole script from the relevance of its nodes."""
        relevances = [node.security_relevance for node in nodes]
        if SecurityRelevance.CRITICAL in relevances:
            return SecurityRelevance.CRITICAL

        high_count = relevances.count(SecurityRelevance.HIGH)
        if high_count >= 6:
            return SecurityRelevance.CRITICAL
        if high_count >= 1:
            return SecurityRelevance.HIGH

        medium_count = relevances.count(SecurityRelevance.MEDIUM)
        if medium_count >= 8:
            return SecurityRelevance.HIGH
        if medium_count >= 1:
            return SecurityRelevance.MEDIUM

        return SecurityRelevance.LOW

    def risk_explanation(self, relevance: SecurityRelevance) -> str:
        """Plain-language explanation of a relevance level."""
        return _RISK_EXPLANATIONS[relevance]

    def should_block_execution(self, relevance: SecurityRelevance) -> bool:
        """Only critical relevance blocks execution."""
        return relevance is SecurityRelevance.CRITICAL

    def risk_mitigation_suggestions(self, nodes: Sequence[NodeInfo]) -> list[str]:
        """Generic suggestions are not given; context-specific advice comes from analysis."""
        return []