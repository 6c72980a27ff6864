"""Requests to and results of a security analysis."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from ebi.models.script import Language, OutputLanguage, ScriptSource


class RiskLevel(IntEnum):
    """Severity of a risk, ordered from NONE to CRITICAL."""

    NONE = 0
    INFO = 1
    LOW = 2
    MEDIUM = 3
    HIGH = 4
    CRITICAL = 5

    @classmethod
    def from_name(cls, name: str) -> RiskLevel | None:
        """Parse a risk level name case-insensitively; None if unknown."""
        return cls.__members__.get(name.upper())

    @property
    def label(self) -> str:
        return self.name

    def as_emoji(self) -> str:
        return _RISK_EMOJI[self]

    def numeric_value(self) -> int:
        return int(self)

    def __str__(self) -> str:
        return self.name


_RISK_EMOJI = {
    RiskLevel.NONE: "✅",
    RiskLevel.INFO: "ℹ️",
    RiskLevel.LOW: "⚠️",
    RiskLevel.MEDIUM: "🔶",
    RiskLevel.HIGH: "⚠️",
    RiskLevel.CRITICAL: "🚨",
}


class AnalysisType(Enum):
    """Kind of analysis performed."""

    INJECTION_DETECTION = "injection_detection"
    CODE_VULNERABILITY = "code_vulnerability"
    DETAILED_RISK_ANALYSIS = "detailed_risk_analysis"
    SPECIFIC_THREAT_ANALYSIS = "specific_threat_analysis"

    def description(self) -> str:
        return _ANALYSIS_DESCRIPTIONS[self]

    def __str__(self) -> str:
        return self.value


_ANALYSIS_DESCRIPTIONS = {
    AnalysisType.INJECTION_DETECTION: "Prompt injection and hidden instruction analysis",
    AnalysisType.CODE_VULNERABILITY: "Code vulnerability and security analysis",
    AnalysisType.DETAILED_RISK_ANALYSIS: "Comprehensive risk breakdown for high-risk scripts",
    AnalysisType.SPECIFIC_THREAT_ANALYSIS: "Line-by-line threat analysis",
}


@dataclass(frozen=True)
class AnalysisContext:
    """Information about the script being analysed."""

    language: Language
    source: ScriptSource = field(default_factory=ScriptSource.stdin)
    script_type: str | None = None
    truncated: bool = False


@dataclass(frozen=True)
class AnalysisRequest:
    """A request for one analysis of some script content."""

    analysis_type: AnalysisType
    content: str
    context: AnalysisContext
    model: str
    timeout_seconds: int
    output_language: OutputLanguage = OutputLanguage.ENGLISH

    @classmethod
    def code_analysis(
        cls, content: str, language: Language, model: str, timeout_seconds: int
    ) -> AnalysisRequest:
        return cls(
            AnalysisType.CODE_VULNERABILITY,
            content,
            AnalysisContext(language),
            model,
            timeout_seconds,
        )

    @classmethod
    def injection_analysis(
        cls, content: str, language: Language, model: str, timeout_seconds: int
    ) -> AnalysisRequest:
        return cls(
            AnalysisType.INJECTION_DETECTION,
            content,
            AnalysisContext(language),
            model,
            timeout_seconds,
        )

    def with_script_type(self, script_type: str) -> AnalysisRequest:
        """Return a copy whose context carries the given script type."""
        context = dataclasses.replace(self.context, script_type=script_type)
        return dataclasses.replace(self, context=context)

    def mark_truncated(self) -> AnalysisRequest:
        """Return a copy whose context is marked as truncated."""
        context = dataclasses.replace(self.context, truncated=True)
        return dataclasses.replace(self, context=context)

    def is_empty(self) -> bool:
        return not self.content.strip()

    def content_size(self) -> int:
        return len(self.content.encode("utf-8"))


@dataclass
class Finding:
    """One issue found by an analysis."""

    description: str
    severity: RiskLevel
    location: str | None = None
    recommendation: str | None = None

    def is_actionable(self) -> bool:
        return self.recommendation is not None


@dataclass
class AnalysisResult:
    """Outcome of one analysis."""

    analysis_type: AnalysisType
    model_used: str
    analysis_duration_ms: int
    risk_level: RiskLevel = RiskLevel.NONE
    summary: str = ""
    details: str | None = None
    findings: list[Finding] = field(default_factory=list)
    confidence: float = 0.0

    def __post_init__(self) -> None:
        self.confidence = min(max(self.confidence, 0.0), 1.0)

    def add_finding(self, finding: Finding) -> None:
        """Record a finding, raising the overall risk level if it is more severe."""
        if finding.severity > self.risk_level:
            self.risk_level = finding.severity
        self.findings.append(finding)

    def has_high_risk_findings(self) -> bool:
        return any(f.severity >= RiskLevel.HIGH for f in self.findings)

    def is_valid(self) -> bool:
        return bool(self.summary) and self.confidence > 0.0