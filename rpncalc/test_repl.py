import pytest

from rpncalc.config import Settings
from rpncalc.repl import HELP_TEXT, REPL


class ScriptedSession:
    """Stands in for a PromptSession, returning queued lines or raising queued exceptions."""

    def __init__(self, lines):
        self.lines = list(lines)
        self.prompts = []

    def prompt(self, message, **kwargs):
        self.prompts.append(message)
        if not self.lines:
            raise EOFError()
        item = self.lines.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item


@pytest.fixture
def repl(tmp_path):
    return REPL(Settings(history_file=str(tmp_path / "history")))


def test_evaluate_line_result(repl):
    assert repl.evaluate_line("1 + 2 * 3") == (True, "Result: 7")
    assert repl.evaluate_line("2 ^ 0.5 ^ 2") == (True, "Result: 1.189207115002721")
    assert repl.evaluate_line("1 / 0") == (True, "Result: inf")


def test_evaluate_line_errors_return_false_and_message(repl):
    ok, out = repl.evaluate_line("1 + x")
    assert not ok and out.startswith("Illegal arguments found in the expression.")
    ok, out = repl.evaluate_line("1 + 2 )")
    assert not ok and out == "Mismatched parenthesis in the expression."
    ok, out = repl.evaluate_line("+")
    assert not ok and out.startswith("Calculation unsuccessful.")


@pytest.mark.parametrize("line", ["1 + 2 ", " 1 + 2", "1  + 2"])
def test_expression_whitespace_is_not_trimmed(repl, line):
    ok, out = repl.evaluate_line(line)
    assert not ok
    assert out.startswith("Illegal arguments found in the expression.")


def test_commands_tolerate_surrounding_whitespace(repl):
    assert repl.evaluate_line("  help ") == (True, HELP_TEXT)
    assert repl.evaluate_line(" RPN 1 + 2") == (True, "RPN: 1 2 +")
    ok, out = repl.evaluate_line("rpn 1 + 2 ")
    assert not ok and "Illegal arguments" in out

def test_help_and_rpn_commands(repl):
    assert repl.evaluate_line("help") == (True, HELP_TEXT)
    assert repl.evaluate_line("rpn ( 1 + 2 ) * 3") == (True, "RPN: 1 2 + 3 *")
    ok, out = repl.evaluate_line("rpn 1 + 2 )")
    assert not ok and "Mismatched parenthesis" in out


@pytest.mark.parametrize("line", ["exit", " exit ", "EXIT", "quit", ":exit"])
def test_exit_commands(repl, line):
    assert repl.is_exit(line)


def test_repl_loop_prints_results_until_exit(tmp_path, capsys):
    session = ScriptedSession(["1 + 2", "", "1 + x", "exit", "3 * 3"])
    repl = REPL(Settings(history_file=str(tmp_path / "history"), prompt="calc> "), session=session)
    repl.repl_loop()
    out = capsys.readouterr().out
    assert "Result: 3\n\n" in out
    assert "Illegal arguments found in the expression." in out
    assert "Result: 9" not in out
    assert session.prompts == ["calc> "] * 4


def test_repl_loop_survives_interrupt_and_stops_on_eof(repl, capsys):
    repl._session = ScriptedSession([KeyboardInterrupt(), "2 ^ 3 ^ 2"])
    repl.repl_loop()
    out = capsys.readouterr().out
    assert "^C" in out
    assert "Result: 512" in out
    assert out.rstrip().endswith("Exiting.")
