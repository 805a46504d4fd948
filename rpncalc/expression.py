# Expression parsing and evaluation for the rpncalc calculator.
#
# Input is a line of single-space-separated tokens. Parsing maps each token to a
# component (a float or an Operator); evaluation reorders the components into
# postfix order with the shunting-yard algorithm and then reduces the postfix
# sequence with a value stack.
#
# Arithmetic is IEEE-754 float64: division by zero gives inf, invalid powers give
# nan. Errors are raised as CalculatorError subclasses and never replaced by a
# default value.

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple, Union

import numpy as np

logger = logging.getLogger(__name__)

# --------------------------
# Exceptions
# --------------------------

class CalculatorError(Exception):
    """Base class for all calculator errors."""
    message = "Calculation failed."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        text = self.message if not detail else f"{self.message} {detail}"
        super().__init__(text)

class ParseError(CalculatorError):
    """Raised when a line cannot be turned into an Expression."""
    message = "Invalid expression."

class IllegalArgumentError(ParseError):
    """Raised for a token that is neither an operator symbol nor a number."""
    message = "Illegal arguments found in the expression."

    def __init__(self, token: str, position: int):
        self.token = token
        self.position = position
        super().__init__(f"Unrecognized token {token!r} at position {position}.")

class EvalError(CalculatorError):
    """Raised when a parsed Expression cannot be reduced to a value."""
    pass

class MismatchedParenthesisError(EvalError):
    """Raised for a ')' without a matching '('."""
    message = "Mismatched parenthesis in the expression."

class RPNCalculationError(EvalError):
    """Raised when the postfix sequence is structurally invalid."""
    message = "Calculation unsuccessful."

# --------------------------
# Operators
# --------------------------

class Associativity(Enum):
    LEFT = "left"
    RIGHT = "right"

class Operator(Enum):
    """The closed set of operator tokens, keyed by their symbol."""
    PLUS = "+"
    MINUS = "-"
    ASTERISK = "*"
    FORWARD_SLASH = "/"
    POWER = "^"
    LEFT_PARENTHESIS = "("
    RIGHT_PARENTHESIS = ")"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def is_arithmetic(self) -> bool:
        return self in _PRECEDENCE

    @property
    def precedence(self) -> Optional[int]:
        """Binding strength, or None for parentheses."""
        return _PRECEDENCE.get(self)

    @property
    def associativity(self) -> Optional[Associativity]:
        """Grouping direction, or None for parentheses."""
        if not self.is_arithmetic:
            return None
        if self is Operator.POWER:
            return Associativity.RIGHT
        return Associativity.LEFT

    def apply(self, first: float, second: float) -> float:
        """Compute ``first <op> second`` with float64 semantics.

        Division by zero, overflow and invalid powers produce inf/nan instead of
        raising, so the result may be non-finite.
        """
        func = _BINARY_FUNCS.get(self)
        if func is None:
            raise RPNCalculationError(f"{self.symbol!r} is not an arithmetic operator.")
        with np.errstate(all="ignore"):
            return float(func(np.float64(first), np.float64(second)))

    def __str__(self) -> str:
        return self.value

_PRECEDENCE: Dict[Operator, int] = {
    Operator.PLUS: 2,
    Operator.MINUS: 2,
    Operator.ASTERISK: 3,
    Operator.FORWARD_SLASH: 3,
    Operator.POWER: 4,
}

_BINARY_FUNCS: Dict[Operator, Callable[[np.float64, np.float64], np.float64]] = {
    Operator.PLUS: np.add,
    Operator.MINUS: np.subtract,
    Operator.ASTERISK: np.multiply,
    Operator.FORWARD_SLASH: np.true_divide,
    Operator.POWER: np.power,
}

_SYMBOLS: Dict[str, Operator] = {op.value: op for op in Operator}

Component = Union[float, Operator]

# --------------------------
# Parser
# --------------------------

# Python's float() also accepts digit-group underscores and non-ASCII digits; numeric literals here do not.
_FLOAT_LITERAL = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)

def _to_component(token: str, position: int) -> Component:
    op = _SYMBOLS.get(token)
    if op is not None:
        return op
    if not _FLOAT_LITERAL.fullmatch(token):
        raise IllegalArgumentError(token, position)
    return float(token)

@dataclass(frozen=True)
class Expression:
    """An ordered, immutable sequence of components.

    Well-formedness (balanced parentheses, operand/operator alternation) is not
    checked here; malformed sequences fail in evaluate().
    """
    components: Tuple[Component, ...]

    @classmethod
    def parse(cls, text: str) -> "Expression":
        return parse(text)

    def to_rpn(self) -> Tuple[Component, ...]:
        return to_rpn(self)

    def evaluate(self) -> float:
        return evaluate(self)

    def __len__(self) -> int:
        return len(self.components)

    def __str__(self) -> str:
        return render(self.components)

def format_number(value: float) -> str:
    """Format a value the way results are displayed: ``7`` rather than ``7.0``."""
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)

def render(components) -> str:
    """Join components back into the single-space token form."""
    return " ".join(str(c) if isinstance(c, Operator) else format_number(c) for c in components)

def parse(text: str) -> Expression:
    """Convert a line of single-space-separated tokens into an Expression.

    Raises IllegalArgumentError for the first token that is neither an operator
    symbol nor a float literal. Empty input and doubled spaces produce empty
    tokens, which are illegal.
    """
    components = [
        _to_component(piece.strip(), position)
        for position, piece in enumerate(text.split(" "))
    ]
    logger.debug("Parsed %d components from %r", len(components), text)
    return Expression(tuple(components))

# --------------------------
# Evaluator
# --------------------------

def _should_pop(top: Operator, incoming: Operator) -> bool:
    if top.precedence > incoming.precedence:
        return True
    return top.precedence == incoming.precedence and incoming.associativity is Associativity.LEFT

def to_rpn(expression: Expression) -> Tuple[Component, ...]:
    """Reorder an infix Expression into postfix order (shunting-yard).

    An unmatched ')' raises MismatchedParenthesisError. An unmatched '(' is
    drained into the output like any other stacked operator and is rejected
    later by the reduction step.
    """
    output: List[Component] = []
    stack: List[Operator] = []

    for component in expression.components:
        if not isinstance(component, Operator):
            output.append(component)
        elif component.is_arithmetic:
            while stack and stack[-1] is not Operator.LEFT_PARENTHESIS:
                top = stack[-1]
                if not top.is_arithmetic:
                    raise MismatchedParenthesisError()
                if not _should_pop(top, component):
                    break
                output.append(stack.pop())
            stack.append(component)
        elif component is Operator.LEFT_PARENTHESIS:
            stack.append(component)
        else:
            while True:
                if not stack:
                    raise MismatchedParenthesisError()
                top = stack.pop()
                if top is Operator.LEFT_PARENTHESIS:
                    break
                output.append(top)

    while stack:
        output.append(stack.pop())

    logger.debug("RPN form: %s", render(output))
    return tuple(output)

def reduce_rpn(components) -> float:
    """Reduce a postfix component sequence to a single value."""
    values: List[float] = []
    for component in components:
        if not isinstance(component, Operator):
            values.append(component)
            continue
        if not component.is_arithmetic:
            raise RPNCalculationError(f"Unexpected {component.symbol!r} in postfix sequence.")
        if len(values) < 2:
            raise RPNCalculationError(f"Missing operand for {component.symbol!r}.")
        second = values.pop()
        first = values.pop()
        values.append(component.apply(first, second))

    if len(values) != 1:
        raise RPNCalculationError(f"Expected one value, {len(values)} remained.")
    return values[0]

def evaluate(expression: Expression) -> float:
    """Evaluate a parsed Expression to a float.

    Raises MismatchedParenthesisError or RPNCalculationError for malformed input.
    The result may be inf or nan.
    """
    return float(reduce_rpn(to_rpn(expression)))

def calculate(text: str) -> float:
    """Parse and evaluate a line in one step."""
    return evaluate(parse(text))
