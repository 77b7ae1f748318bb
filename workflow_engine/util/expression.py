"""
Sandboxed expression evaluation for transform, filter and condition nodes.

Expressions are compiled by a jinja2 ``ImmutableSandboxedEnvironment``:
field paths, comparisons, arithmetic, boolean combinators, inline
``x if c else y`` and filters are available, but there is no access to
Python builtins, modules, or methods that mutate the inputs. Undefined
names raise instead of silently evaluating to an empty value.
"""

from __future__ import annotations

import functools
import logging
import re
from typing import Any

from jinja2 import StrictUndefined, TemplateError, Undefined
from jinja2.sandbox import ImmutableSandboxedEnvironment

from workflow_engine.errors import EvaluationError

logger = logging.getLogger(__name__)

env = ImmutableSandboxedEnvironment(undefined=StrictUndefined)


def regex_match(s, pattern, ignorecase=False):
    flags = re.IGNORECASE if ignorecase else 0
    return re.search(pattern, str(s), flags=flags) is not None


def regex_findall(s, pattern, ignorecase=False, dotall=False):
    flags = 0
    if ignorecase:
        flags |= re.IGNORECASE
    if dotall:
        flags |= re.DOTALL
    return re.findall(pattern, str(s), flags=flags)


env.filters['regex_match'] = regex_match
env.filters['regex_findall'] = regex_findall


@functools.lru_cache(maxsize=256)
def compile_expression(source: str):
    """Compile ``source`` once; syntax errors surface as EvaluationError."""
    try:
        return env.compile_expression(source, undefined_to_none=False)
    except TemplateError as e:
        raise EvaluationError(f"Invalid expression {source!r}: {e}", expression=source) from e


def evaluate(source: str, **context: Any) -> Any:
    """
    Evaluate ``source`` against ``context``.

    Raises:
        EvaluationError: on syntax errors, undefined names, sandbox
            violations or runtime errors inside the expression.
    """
    expression = compile_expression(source)
    try:
        result = expression(**context)
    except (TemplateError, ArithmeticError, TypeError, ValueError, LookupError) as e:
        raise EvaluationError(f"Error evaluating {source!r}: {e}", expression=source) from e
    if isinstance(result, Undefined):
        raise EvaluationError(f"Expression {source!r} evaluated to an undefined value", expression=source)
    logger.debug("Expression %r evaluated to %r", source, result)
    return result
