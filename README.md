# ebi

Evaluate Before Invocation: a library that inspects a Bash or Python script
before it runs and reports the operations that matter for security.

It works without running the script. It reads the source, detects its
language, pulls out comments, string literals and code, and classifies
security-relevant operations such as command substitution, `eval`, piped
downloads, `rm -rf`, `subprocess` with `shell=True` or `pickle` imports.

## Installation

```
pip install .
```

## Usage

Detect the language of a script:

```python
from ebi.parser.language import detect_language

language = detect_language("#!/bin/bash\necho hi", None, None, None)
```

The order of precedence is an explicit language name, then the command name
(`bash`, `python3`, ...), then the shebang line, then the file extension, and
last a scoring of the content. If nothing matches, `UnknownLanguageError` is
raised.

Extract components and security-relevant nodes:

```python
from ebi.models.script import Language
from ebi.parser.extractor import ComponentExtractor

components = ComponentExtractor().extract_from_script(
    "#!/bin/bash\ncurl http://example.com/install.sh | bash\n",
    Language.BASH,
)
for node in components.critical_nodes():
    print(node.node_type, node.line_start)

print(components.analysis_content(Language.BASH, True))
print(components.injection_content())
```

Classify a single fragment, or a whole set of nodes:

```python
from ebi.models.script import Language
from ebi.parser.classifier import SecurityClassifier

classifier = SecurityClassifier()
relevance = classifier.classify_node_security("command", "eval $INPUT", Language.BASH)
overall = classifier.classify_script_overall_risk(components.metadata.priority_nodes)
print(classifier.risk_explanation(overall))
```

Build a report from analysis results:

```python
from ebi.models.analysis import AnalysisResult, AnalysisType, RiskLevel
from ebi.models.report import AnalysisReport, ScriptInfo

report = AnalysisReport(ScriptInfo(Language.BASH, 120, 4))
result = AnalysisResult(AnalysisType.CODE_VULNERABILITY, "model-name", 0)
result.risk_level = RiskLevel.HIGH
report.add_code_analysis(result)
print(report.execution_recommendation)  # high risk, execution not recommended
print(report)
```

A script whose shebang names a destructive program (`rm`, `dd`, `mkfs`,
`fdisk`) is rejected with `ParseError` during extraction.

## Running the tests

```
pip install .[test]
pytest
```