import pytest

from pattern_catalog.behavioral.interpreter import (
    AddExpression,
    AndExpression,
    AssignStatement,
    Context,
    ExpressionParser,
    FalseExpression,
    FunctionalExpression,
    NotExpression,
    NumberExpression,
    OrExpression,
    PrintStatement,
    Program,
    TrueExpression,
    VariableExpression,
    truncating_divide,
)
from pattern_catalog.core import InvalidArgument, NotFound


@pytest.fixture
def context(narrator):
    return Context(narrator)


class TestParser:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("2 + 3 * 4", 14),
            ("(2 + 3) * 4", 20),
            ("10 - 4 - 3", 3),
            ("7 / 2", 3),
            ("100", 100),
        ],
    )
    def test_precedence_and_associativity(self, context, text, expected):
        assert ExpressionParser().parse(text).interpret(context) == expected

    def test_variables(self, context):
        context.set("x", 10)
        context.set("y", 5)
        expression = ExpressionParser().parse("x * y + 2")
        assert str(expression) == "((x * y) + 2)"
        assert expression.interpret(context) == 52

    @pytest.mark.parametrize("text", ["2 +", "(1 + 2", "3 $ 4", ""])
    def test_malformed_input(self, text):
        with pytest.raises(InvalidArgument):
            ExpressionParser().parse(text)

    def test_division_by_zero(self, context):
        with pytest.raises(InvalidArgument, match="Division by zero"):
            ExpressionParser().parse("1 / 0").interpret(context)

    def test_unknown_variable(self, context):
        with pytest.raises(NotFound):
            VariableExpression("z").interpret(context)


def test_truncating_divide_rounds_toward_zero():
    assert truncating_divide(7, 2) == 3
    assert truncating_divide(-7, 2) == -3
    assert truncating_divide(7, -2) == -3
    assert truncating_divide(-7, -2) == 3


def test_binary_steps_are_narrated(context, narrator):
    AddExpression(NumberExpression(2), NumberExpression(3)).interpret(context)
    assert narrator.lines[-1] == "➕ 2 + 3 = 5"


class TestBooleans:
    def test_truth_table(self, context):
        expression = OrExpression(
            AndExpression(TrueExpression(), FalseExpression()), NotExpression(FalseExpression())
        )
        assert expression.evaluate(context) is True
        assert str(expression) == "((true AND false) OR (NOT false))"


class TestProgram:
    def test_statements_share_context(self, context, narrator):
        parser = ExpressionParser()
        program = (
            Program()
            .add(AssignStatement("x", parser.parse("10")))
            .add(AssignStatement("y", parser.parse("x * 2")))
            .add(PrintStatement(parser.parse("x + y")))
        )
        program.execute(context)
        assert context.variables == {"x": 10, "y": 20}
        assert "📄 Print: (x + y) = 30" in narrator
        assert narrator.lines[-1] == "✅ Program execution completed"

    def test_clear(self, context):
        context.set("a", 1)
        context.clear()
        assert "a" not in context


def test_functional_expressions(context):
    context.set("n", 4)
    expression = FunctionalExpression.number(3) * FunctionalExpression.variable("n") + FunctionalExpression.number(1)
    assert expression.evaluate(context) == 13
    assert expression.description == "((3 * n) + 1)"
