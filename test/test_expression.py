import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import pytest

from workflow_engine.errors import EvaluationError
from workflow_engine.util.expression import evaluate


class TestExpression:
    """Sandboxed expression evaluation."""

    def test_field_paths_and_comparison(self):
        assert evaluate("item.value > 2", item={"value": 3}) is True
        assert evaluate("item['value'] > 2", item={"value": 1}) is False

    def test_arithmetic(self):
        assert evaluate("data * 2 + 1", data=4) == 9

    def test_boolean_combinators(self):
        item = {"value": 5, "active": False}
        assert evaluate("item.value > 2 and not item.active", item=item) is True
        assert evaluate("item.value > 9 or item.active", item=item) is False

    def test_inline_conditional_and_filters(self):
        assert evaluate("'big' if value > 10 else 'small'", value=3) == 'small'
        assert evaluate("value | upper", value="abc") == "ABC"
        assert evaluate("value | regex_match('^a')", value="abc") is True

    def test_builds_new_structures(self):
        assert evaluate("{'doubled': data.n * 2}", data={"n": 4}) == {"doubled": 8}

    def test_syntax_error(self):
        with pytest.raises(EvaluationError):
            evaluate("data +", data=1)

    def test_undefined_name(self):
        with pytest.raises(EvaluationError):
            evaluate("missing + 1", data=1)

    def test_undefined_result(self):
        with pytest.raises(EvaluationError):
            evaluate("data.nothing", data={})

    def test_private_attributes_blocked(self):
        with pytest.raises(EvaluationError):
            evaluate("data.__class__.__mro__", data=1)

    def test_inputs_cannot_be_mutated(self):
        data = {"a": 1}
        with pytest.raises(EvaluationError):
            evaluate("data.update({'a': 2})", data=data)
        assert data == {"a": 1}

    def test_runtime_error(self):
        with pytest.raises(EvaluationError):
            evaluate("data / 0", data=1)
