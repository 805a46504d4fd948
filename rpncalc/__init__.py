"""rpncalc - evaluate infix arithmetic expressions through a postfix (RPN) stage."""

__version__ = "0.1.0"

from .expression import (
    Associativity,
    CalculatorError,
    EvalError,
    Expression,
    IllegalArgumentError,
    MismatchedParenthesisError,
    Operator,
    ParseError,
    RPNCalculationError,
    calculate,
    evaluate,
    parse,
    to_rpn,
)

__all__ = [
    'Associativity', 'CalculatorError', 'EvalError', 'Expression',
    'IllegalArgumentError', 'MismatchedParenthesisError', 'Operator',
    'ParseError', 'RPNCalculationError', 'calculate', 'evaluate', 'parse',
    'to_rpn',
]
