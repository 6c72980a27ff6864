"""The report produced by analysing a script, and the user's decision on it."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ebi.models.analysis import AnalysisResult, Finding, RiskLevel
from ebi.models.script import Language

_RULE = "═══════════════════════════════════════════════════════════"

_LANGUAGE_TITLES = {
    Language.BASH: "Bash",
    Language.PYTHON: "Python",
    Language.UNKNOWN: "Unknown",
}


class ExecutionRecommendation(Enum):
    """What the analysis advises about running the script."""

    SAFE = "SAFE"
    CAUTION = "CAUTION"
    DANGEROUS = "DANGEROUS"
    BLOCKED = "BLOCKED"

    @classmethod
    def for_risk(cls, risk: RiskLevel) -> ExecutionRecommendation:
        """Recommendation that matches an overall risk level."""
        if risk <= RiskLevel.LOW:
            return cls.SAFE
        if risk == RiskLevel.MEDIUM:
            return cls.CAUTION
        if risk == RiskLevel.HIGH:
            return cls.DANGEROUS
        return cls.BLOCKED

    def description(self) -> str:
        return _RECOMMENDATION_DESCRIPTIONS[self]

    def should_prompt_user(self) -> bool:
        """Whether the user should be asked to confirm execution."""
        return self is not ExecutionRecommendation.BLOCKED

    def __str__(self) -> str:
        return self.description()


_RECOMMENDATION_DESCRIPTIONS = {
    ExecutionRecommendation.SAFE: "Low risk, likely safe to execute",
    ExecutionRecommendation.CAUTION: "Medium risk, review carefully before executing",
    ExecutionRecommendation.DANGEROUS: "High risk, execution not recommended",
    ExecutionRecommendation.BLOCKED: "Critical risk or analysis failure, execution blocked",
}


def _detect_script_type(size_bytes: int, line_count: int) -> str:
    if size_bytes > 10_000 or line_count > 500:
        return "Large Script"
    if line_count < 10:
        return "Simple Script"
    return "Regular Script"


@dataclass
class ScriptInfo:
    """Basic facts about the analysed script."""

    language: Language
    size_bytes: int
    line_count: int
    detected_type: str | None = None

    def __post_init__(self) -> None:
        if self.detected_type is None:
            self.detected_type = _detect_script_type(self.size_bytes, self.line_count)


@dataclass
class AnalysisReport:
    """Combined outcome of the analyses of one script."""

    script_info: ScriptInfo
    overall_risk: RiskLevel = RiskLevel.NONE
    injection_analysis: AnalysisResult | None = None
    code_analysis: AnalysisResult | None = None
    execution_recommendation: ExecutionRecommendation = ExecutionRecommendation.SAFE
    execution_advice: str | None = None
    warnings: list[str] = field(default_factory=list)
    risk_explanation: str | None = None
    mitigation_suggestions: list[str] = field(default_factory=list)
    analysis_summary: str = ""

    def add_injection_analysis(self, analysis: AnalysisResult) -> None:
        """Attach the injection analysis and reassess the report."""
        self.injection_analysis = analysis
        self.update_overall_assessment()

    def add_code_analysis(self, analysis: AnalysisResult) -> None:
        """Attach the code analysis and reassess the report."""
        self.code_analysis = analysis
        self.update_overall_assessment()

    def update_overall_assessment(self) -> None:
        """Recompute overall risk and recommendation from the attached analyses."""
        risks = [
            analysis.risk_level
            for analysis in (self.injection_analysis, self.code_analysis)
            if analysis is not None
        ]
        self.overall_risk = max(risks, default=RiskLevel.NONE)
        self.execution_recommendation = ExecutionRecommendation.for_risk(self.overall_risk)

    def should_block_execution(self) -> bool:
        return self.execution_recommendation is ExecutionRecommendation.BLOCKED

    def has_analysis_results(self) -> bool:
        return self.injection_analysis is not None or self.code_analysis is not None

    def all_findings(self) -> list[Finding]:
        """Findings of the injection analysis followed by those of the code analysis."""
        findings: list[Finding] = []
        for analysis in (self.injection_analysis, self.code_analysis):
            if analysis is not None:
                findings.extend(analysis.findings)
        return findings

    def generate_summary(self) -> str:
        """Human-readable summary of the report."""
        info = self.script_info
        parts = [
            f"Script Type: {_LANGUAGE_TITLES[info.language]} Script\n",
            f"Size: {info.size_bytes} bytes, {info.line_count} lines\n",
            f"Risk Level: {self.overall_risk.name}\n",
        ]
        if self.code_analysis is not None:
            parts.append(f"\n▶ CODE ANALYSIS\n{self.code_analysis.summary}\n")
        if self.injection_analysis is not None:
            parts.append(f"\n▶ INJECTION ANALYSIS\n{self.injection_analysis.summary}\n")
        if self.warnings:
            parts.append("\n⚠️ WARNINGS:\n")
            parts.extend(f"- {warning}\n" for warning in self.warnings)
        return "".join(parts)

    def __str__(self) -> str:
        parts = [
            f"{_RULE}\n",
            "🦐 EBI SECURITY ANALYSIS REPORT 🍤\n",
            f"{_RULE}\n\n",
            self.generate_summary(),
            f"\n{_RULE}\n",
        ]
        if self.should_block_execution():
            parts.append("❌ EXECUTION BLOCKED DUE TO SECURITY CONCERNS\n")
        else:
            parts.append("Execute this script? (yes/no): ")
        return "".join(parts)


def _report_hash(report: AnalysisReport) -> str:
    digest = hashlib.sha256()
    pieces = [
        report.overall_risk.name,
        report.script_info.language.value,
        str(report.script_info.size_bytes),
        str(report.script_info.line_count),
    ]
    if report.analysis_summary:
        pieces.append(report.analysis_summary)
    for piece in pieces:
        digest.update(piece.encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()[:16]


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExecutionDecision:
    """Whether the user chose to run the script, recorded for audit."""

    proceed: bool
    timestamp: datetime
    analysis_report_hash: str

    @classmethod
    def from_report(cls, proceed: bool, analysis_report: AnalysisReport) -> ExecutionDecision:
        """Decision tied to a report through a short hash of its key facts."""
        return cls(proceed, _now(), _report_hash(analysis_report))

    @classmethod
    def proceed_manually(cls) -> ExecutionDecision:
        return cls(True, _now(), "manual-proceed")

    @classmethod
    def decline_manually(cls) -> ExecutionDecision:
        return cls(False, _now(), "manual-decline")