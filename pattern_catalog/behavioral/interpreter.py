r"""Interpreter.

A small integer language. Each grammar rule is a class with `interpret`;
composite rules interpret their operands first and narrate the step they
take. `ExpressionParser` is a recursive-descent parser:

    expression := term (("+" | "-") term)*
    term       := factor (("*" | "/") factor)*
    factor     := number | identifier | "(" expression ")"
    identifier := [A-Za-z_][A-Za-z0-9_]*

Division truncates toward zero. Dividing by zero and referring to an unset
variable are errors, as is any malformed input (reported with the offset
where parsing stopped).
"""

from __future__ import annotations

import logging
import re
import sys
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from ..catalog import register_demo, run_standalone
from ..core import CatalogError, DemoContext, InvalidArgument, Narrator, NotFound

__all__ = [
    "Context",
    "Expression",
    "NumberExpression",
    "VariableExpression",
    "AddExpression",
    "SubtractExpression",
    "MultiplyExpression",
    "DivideExpression",
    "ExpressionParser",
    "BooleanExpression",
    "TrueExpression",
    "FalseExpression",
    "AndExpression",
    "OrExpression",
    "NotExpression",
    "Statement",
    "AssignStatement",
    "PrintStatement",
    "Program",
    "FunctionalExpression",
    "truncating_divide",
]

logger = logging.getLogger(__name__)


def truncating_divide(left: int, right: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


class Context:
    """Variable bindings plus the narrator that interpreting speaks through."""

    def __init__(self, narrator: Narrator):
        self.narrator = narrator
        self.variables: Dict[str, int] = {}

    def set(self, name: str, value: int) -> None:
        self.variables[name] = value
        self.narrator.say(f"📝 Set variable {name} = {value}")

    def get(self, name: str) -> int:
        if name not in self.variables:
            raise NotFound(
                f"Variable '{name}' not found",
                ["Assign the variable before using it"],
                {"participant": "Context", "operation": "get"},
            )
        return self.variables[name]

    def __contains__(self, name: str) -> bool:
        return name in self.variables

    def display(self) -> None:
        self.narrator.say("Variables:")
        for name in sorted(self.variables):
            self.narrator.say(f"  {name} = {self.variables[name]}")

    def clear(self) -> None:
        self.variables.clear()
        self.narrator.say("🗑️ Variables cleared")


# -----------------------------------------------------------------------------
# Arithmetic Expressions
# -----------------------------------------------------------------------------


class Expression(ABC):
    @abstractmethod
    def interpret(self, context: Context) -> int: ...

    @abstractmethod
    def __str__(self) -> str: ...


class NumberExpression(Expression):
    def __init__(self, value: int):
        self.value = value

    def interpret(self, context: Context) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


class VariableExpression(Expression):
    def __init__(self, name: str):
        self.name = name

    def interpret(self, context: Context) -> int:
        return context.get(self.name)

    def __str__(self) -> str:
        return self.name


class _Binary(Expression):
    symbol = "?"
    icon = ""

    def __init__(self, left: Expression, right: Expression):
        self.left = left
        self.right = right

    def apply(self, left: int, right: int) -> int:
        raise NotImplementedError

    def interpret(self, context: Context) -> int:
        left = self.left.interpret(context)
        right = self.right.interpret(context)
        result = self.apply(left, right)
        context.narrator.say(f"{self.icon} {left} {self.symbol} {right} = {result}")
        return result

    def __str__(self) -> str:
        return f"({self.left} {self.symbol} {self.right})"


class AddExpression(_Binary):
    symbol, icon = "+", "➕"

    def apply(self, left: int, right: int) -> int:
        return left + right


class SubtractExpression(_Binary):
    symbol, icon = "-", "➖"

    def apply(self, left: int, right: int) -> int:
        return left - right


class MultiplyExpression(_Binary):
    symbol, icon = "*", "✖️"

    def apply(self, left: int, right: int) -> int:
        return left * right


class DivideExpression(_Binary):
    symbol, icon = "/", "➗"

    def apply(self, left: int, right: int) -> int:
        if right == 0:
            raise InvalidArgument(
                "Division by zero",
                ["Check the divisor before dividing"],
                {"participant": "DivideExpression", "operation": "interpret"},
            )
        return truncating_divide(left, right)


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------


class ExpressionParser:
    """Recursive-descent parser for the arithmetic grammar."""

    _NUMBER = re.compile(r"[0-9]+")
    _IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

    _OPERATORS = {
        "+": AddExpression,
        "-": SubtractExpression,
        "*": MultiplyExpression,
        "/": DivideExpression,
    }

    def __init__(self):
        self._text = ""
        self._pos = 0

    def parse(self, text: str) -> Expression:
        self._text, self._pos = text, 0
        expression = self._expression()
        self._skip_whitespace()
        if self._pos < len(self._text):
            self._fail("Unexpected characters at end of expression")
        return expression

    def _fail(self, message: str) -> None:
        raise InvalidArgument(
            f"{message} at position {self._pos}",
            [f"Input was: {self._text!r}"],
            {"participant": "ExpressionParser", "operation": "parse"},
        )

    def _peek(self) -> str:
        self._skip_whitespace()
        return self._text[self._pos] if self._pos < len(self._text) else ""

    def _skip_whitespace(self) -> None:
        while self._pos < len(self._text) and self._text[self._pos].isspace():
            self._pos += 1

    def _binary_chain(self, operand: Callable[[], Expression], symbols: str) -> Expression:
        left = operand()
        while self._peek() and self._peek() in symbols:
            symbol = self._text[self._pos]
            self._pos += 1
            left = self._OPERATORS[symbol](left, operand())
        return left

    def _expression(self) -> Expression:
        return self._binary_chain(self._term, "+-")

    def _term(self) -> Expression:
        return self._binary_chain(self._factor, "*/")

    def _factor(self) -> Expression:
        char = self._peek()
        if char == "(":
            self._pos += 1
            expression = self._expression()
            if self._peek() != ")":
                self._fail("Expected ')'")
            self._pos += 1
            return expression
        number = self._NUMBER.match(self._text, self._pos)
        if number:
            self._pos = number.end()
            return NumberExpression(int(number.group()))
        identifier = self._IDENTIFIER.match(self._text, self._pos)
        if identifier:
            self._pos = identifier.end()
            return VariableExpression(identifier.group())
        self._fail("Unexpected character" if char else "Unexpected end of input")
        raise AssertionError("unreachable")


# -----------------------------------------------------------------------------
# Boolean Expressions
# -----------------------------------------------------------------------------


def _flag(value: bool) -> str:
    return "true" if value else "false"


class BooleanExpression(ABC):
    @abstractmethod
    def evaluate(self, context: Context) -> bool: ...

    @abstractmethod
    def __str__(self) -> str: ...


class TrueExpression(BooleanExpression):
    def evaluate(self, context: Context) -> bool:
        return True

    def __str__(self) -> str:
        return "true"


class FalseExpression(BooleanExpression):
    def evaluate(self, context: Context) -> bool:
        return False

    def __str__(self) -> str:
        return "false"


class AndExpression(BooleanExpression):
    def __init__(self, left: BooleanExpression, right: BooleanExpression):
        self.left, self.right = left, right

    def evaluate(self, context: Context) -> bool:
        left, right = self.left.evaluate(context), self.right.evaluate(context)
        result = left and right
        context.narrator.say(f"🔗 {_flag(left)} AND {_flag(right)} = {_flag(result)}")
        return result

    def __str__(self) -> str:
        return f"({self.left} AND {self.right})"


class OrExpression(BooleanExpression):
    def __init__(self, left: BooleanExpression, right: BooleanExpression):
        self.left, self.right = left, right

    def evaluate(self, context: Context) -> bool:
        left, right = self.left.evaluate(context), self.right.evaluate(context)
        result = left or right
        context.narrator.say(f"🔀 {_flag(left)} OR {_flag(right)} = {_flag(result)}")
        return result

    def __str__(self) -> str:
        return f"({self.left} OR {self.right})"


class NotExpression(BooleanExpression):
    def __init__(self, operand: BooleanExpression):
        self.operand = operand

    def evaluate(self, context: Context) -> bool:
        value = self.operand.evaluate(context)
        context.narrator.say(f"❌ NOT {_flag(value)} = {_flag(not value)}")
        return not value

    def __str__(self) -> str:
        return f"(NOT {self.operand})"


# -----------------------------------------------------------------------------
# Command Language
# -----------------------------------------------------------------------------


class Statement(ABC):
    @abstractmethod
    def execute(self, context: Context) -> None: ...


class AssignStatement(Statement):
    def __init__(self, variable: str, expression: Expression):
        self.variable = variable
        self.expression = expression

    def execute(self, context: Context) -> None:
        value = self.expression.interpret(context)
        context.set(self.variable, value)
        context.narrator.say(f"✅ Assigned {self.variable} = {value}")

    def __str__(self) -> str:
        return f"{self.variable} = {self.expression}"


class PrintStatement(Statement):
    def __init__(self, expression: Expression):
        self.expression = expression

    def execute(self, context: Context) -> None:
        value = self.expression.interpret(context)
        context.narrator.say(f"📄 Print: {self.expression} = {value}")

    def __str__(self) -> str:
        return f"print {self.expression}"


class Program:
    def __init__(self, statements: List[Statement] = None):
        self.statements: List[Statement] = list(statements or [])

    def add(self, statement: Statement) -> "Program":
        self.statements.append(statement)
        return self

    def execute(self, context: Context) -> None:
        context.narrator.say("🚀 Executing program...")
        for statement in self.statements:
            context.narrator.say(f"  Executing: {statement}")
            statement.execute(context)
        context.narrator.say("✅ Program execution completed")

    def display(self, narrator: Narrator) -> None:
        narrator.say("📋 Program:")
        for number, statement in enumerate(self.statements, start=1):
            narrator.say(f"  {number}: {statement}")


# -----------------------------------------------------------------------------
# Functional Interpreter
# -----------------------------------------------------------------------------


class FunctionalExpression:
    """An expression built from closures instead of a class per rule."""

    def __init__(self, evaluate: Callable[[Context], int], description: str):
        self._evaluate = evaluate
        self.description = description

    def evaluate(self, context: Context) -> int:
        return self._evaluate(context)

    @classmethod
    def number(cls, value: int) -> "FunctionalExpression":
        return cls(lambda ctx: value, str(value))

    @classmethod
    def variable(cls, name: str) -> "FunctionalExpression":
        return cls(lambda ctx: ctx.get(name), name)

    def __add__(self, other: "FunctionalExpression") -> "FunctionalExpression":
        return FunctionalExpression(
            lambda ctx: self.evaluate(ctx) + other.evaluate(ctx),
            f"({self.description} + {other.description})",
        )

    def __mul__(self, other: "FunctionalExpression") -> "FunctionalExpression":
        return FunctionalExpression(
            lambda ctx: self.evaluate(ctx) * other.evaluate(ctx),
            f"({self.description} * {other.description})",
        )


# -----------------------------------------------------------------------------
# Demo
# -----------------------------------------------------------------------------


@register_demo("interpreter", "Interpreter Pattern", "behavioral", "Arithmetic parser, boolean logic, mini language")
def demo(ctx: DemoContext) -> None:
    say, narrator = ctx.say, ctx.narrator
    say("=== Interpreter Pattern Demo ===")

    say("\n1. Mathematical Expression Interpreter:")
    say("=" * 60)
    context = Context(narrator)
    context.set("x", 10)
    context.set("y", 5)
    context.set("z", 3)

    parser = ExpressionParser()
    for text in (
        "x + y",
        "x * y - z",
        "(x + y) * z",
        "x / y + z * 2",
        "100 - x * 5",
        "(0 - 7) / 2",
        "x / (y - 5)",
        "x + (y",
        "x + unknown_value",
    ):
        say(f"\nEvaluating: {text}")
        try:
            expression = parser.parse(text)
            say(f"Parsed as: {expression}")
            say(f"🎯 Final result: {expression.interpret(context)}")
        except CatalogError as exc:
            say(f"❌ Error: {exc.message}")

    say("\n\n2. Boolean Expression Interpreter:")
    say("=" * 60)
    first = AndExpression(TrueExpression(), OrExpression(FalseExpression(), TrueExpression()))
    say(f"Expression: {first}")
    say("Evaluation:")
    say(f"🎯 Result: {_flag(first.evaluate(context))}")

    second = NotExpression(AndExpression(TrueExpression(), FalseExpression()))
    say(f"\nExpression: {second}")
    say("Evaluation:")
    say(f"🎯 Result: {_flag(second.evaluate(context))}")

    say("\n\n3. Simple Command Language:")
    say("=" * 60)
    program = (
        Program()
        .add(AssignStatement("a", NumberExpression(5)))
        .add(AssignStatement("b", MultiplyExpression(VariableExpression("a"), NumberExpression(3))))
        .add(AssignStatement("c", AddExpression(VariableExpression("a"), VariableExpression("b"))))
        .add(PrintStatement(VariableExpression("c")))
    )
    program.display(narrator)
    program_context = Context(narrator)
    say("\nExecution:")
    program.execute(program_context)
    say("\nFinal context:")
    program_context.display()

    say("\n\n4. Functional Interpreter:")
    say("=" * 60)
    num, var = FunctionalExpression.number, FunctionalExpression.variable
    functional = (var("x") + num(5)) * var("y")
    say(f"Expression: {functional.description}")
    say(f"🎯 Result: {functional.evaluate(context)}")


if __name__ == "__main__":
    sys.exit(run_standalone("interpreter"))
