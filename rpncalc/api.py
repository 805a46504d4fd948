# api.py
"""
Expression evaluation service with FastAPI

Exposes the rpncalc parse/evaluate pipeline over HTTP. Every request is
evaluated independently; nothing is shared between requests.

Error mapping:
- IllegalArgumentError        -> 400
- MismatchedParenthesisError  -> 422
- RPNCalculationError         -> 422
"""

import logging
import math
from typing import Annotated, List, Optional

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator

from . import __version__
from .expression import (
    CalculatorError,
    IllegalArgumentError,
    MismatchedParenthesisError,
    format_number,
    parse,
    reduce_rpn,
)

logger = logging.getLogger(__name__)

# ----- Pydantic Models -----

class EvaluateRequest(BaseModel):
    """Model for an evaluation request."""
    expression: str = Field(..., description="Single-space-separated infix expression")

    @field_validator('expression')
    @classmethod
    def expression_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError('Expression cannot be empty')
        return v


class EvaluateResponse(BaseModel):
    """Model for a successful evaluation."""
    expression: str
    rpn: List[str]
    result: Optional[float] = Field(None, description="Numeric result; null when it is inf or nan")
    text: str = Field(..., description="Display form of the result, including 'inf' and 'nan'")


class ErrorResponse(BaseModel):
    """Model for error responses."""
    detail: str
    kind: str
    token: Optional[str] = None
    position: Optional[int] = None


class CalculationFailed(Exception):
    """Carries a CalculatorError to the exception handler with its HTTP status."""

    def __init__(self, status_code: int, error: CalculatorError):
        self.status_code = status_code
        self.error = error


# ----- Service Layer -----

def _error_kind(error: CalculatorError) -> str:
    if isinstance(error, IllegalArgumentError):
        return "illegal_argument"
    if isinstance(error, MismatchedParenthesisError):
        return "mismatched_parenthesis"
    return "rpn_calculation"


def evaluate_expression(expression: str) -> EvaluateResponse:
    """
    Parse and evaluate an expression.

    Args:
        expression: Infix expression with single-space-separated tokens

    Returns:
        EvaluateResponse with the postfix form and the result

    Raises:
        CalculationFailed: If the expression cannot be parsed or evaluated
    """
    try:
        parsed = parse(expression)
        rpn = parsed.to_rpn()
        value = reduce_rpn(rpn)
    except IllegalArgumentError as e:
        logger.warning(f"Rejected token {e.token!r} in {expression!r}")
        raise CalculationFailed(400, e)
    except CalculatorError as e:
        logger.warning(f"Evaluation of {expression!r} failed: {e}")
        raise CalculationFailed(422, e)

    return EvaluateResponse(
        expression=expression,
        rpn=[format_number(c) if isinstance(c, float) else str(c) for c in rpn],
        result=value if math.isfinite(value) else None,
        text=format_number(value),
    )


# ----- Application -----

app = FastAPI(
    title="rpncalc",
    description="Evaluate arithmetic expressions with operator precedence",
    version=__version__,
)


@app.exception_handler(CalculationFailed)
async def calculation_failed_handler(request, exc: CalculationFailed):
    error = exc.error
    body = ErrorResponse(
        detail=str(error),
        kind=_error_kind(error),
        token=getattr(error, "token", None),
        position=getattr(error, "position", None),
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# ----- API Routes -----

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
}


@app.get("/health", summary="Service health")
def health():
    return {"status": "ok", "version": __version__}


@app.post(
    "/evaluate",
    response_model=EvaluateResponse,
    responses=_ERROR_RESPONSES,
    summary="Evaluate an expression",
)
def evaluate_post(request: EvaluateRequest):
    """
    Evaluate the expression in the request body.

    Args:
        request: EvaluateRequest containing the expression

    Returns:
        EvaluateResponse with the postfix form and the result
    """
    logger.info(f"Processing POST evaluate request: {request.expression!r}")
    return evaluate_expression(request.expression)


@app.get(
    "/evaluate",
    response_model=EvaluateResponse,
    responses=_ERROR_RESPONSES,
    summary="Evaluate an expression (GET)",
)
def evaluate_get(
    expression: Annotated[str, Query(..., min_length=1, description="Infix expression")],
):
    logger.info(f"Processing GET evaluate request: {expression!r}")
    return evaluate_expression(expression)


def serve(host: str, port: int, log_level: str = "info") -> None:
    """Run the service with uvicorn."""
    import uvicorn
    uvicorn.run(app, host=host, port=port, log_level=log_level.lower())
