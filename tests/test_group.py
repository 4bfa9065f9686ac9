"""
Tests for ConditionGroup.
"""

import pytest

from backend.beancond import (
    Condition,
    ConditionGroup,
    EmptyGroupError,
    FunctionCondition,
    GroupOp,
    InvalidConditionError,
    StaticContext,
    UnknownOperatorError,
)


class Counting(Condition):
    """Condition with a fixed result that counts its evaluations."""

    def __init__(self, result):
        self.result = result
        self.calls = 0

    def matches(self, context):
        self.calls += 1
        return self.result


TRUE = FunctionCondition(lambda ctx: True)
FALSE = FunctionCondition(lambda ctx: False)


@pytest.fixture
def context():
    return StaticContext()


class TestGroupConstruction:
    """Tests for building groups."""

    @pytest.mark.parametrize("op", list(GroupOp))
    def test_empty_group_rejected(self, op):
        """Test an empty group fails regardless of operator."""
        with pytest.raises(EmptyGroupError):
            ConditionGroup(op)

    def test_empty_iterable_rejected(self):
        """Test an empty list of members also fails."""
        with pytest.raises(EmptyGroupError):
            ConditionGroup(GroupOp.ALL, [])

    def test_empty_group_with_invalid_operator(self):
        """Test emptiness is reported before the operator is checked."""
        with pytest.raises(EmptyGroupError):
            ConditionGroup("xor")
        with pytest.raises(EmptyGroupError):
            ConditionGroup("xor", [])

    @pytest.mark.parametrize("members,bad_type", [
        (([TRUE], TRUE), "list"),
        (("abc",), "str"),
        ((TRUE, 42), "int"),
        (([TRUE, None],), "NoneType"),
    ])
    def test_non_condition_member_rejected(self, members, bad_type):
        """Test members that are not conditions fail at construction."""
        with pytest.raises(InvalidConditionError) as exc_info:
            ConditionGroup(GroupOp.ALL, *members)
        assert exc_info.value.context["type"] == bad_type

    def test_single_non_iterable_member_rejected(self):
        """Test a lone non-condition member is not unpacked."""
        with pytest.raises(InvalidConditionError):
            ConditionGroup(GroupOp.ANY, 42)

    def test_unknown_operator(self):
        """Test an operator outside the enumeration."""
        with pytest.raises(UnknownOperatorError):
            ConditionGroup("xor", TRUE)

    def test_operator_by_name(self):
        """Test string operators are accepted case-insensitively."""
        assert ConditionGroup("any", TRUE).op is GroupOp.ANY
        assert ConditionGroup("NONE", TRUE).op is GroupOp.NONE

    def test_members_as_list(self, context):
        """Test members may be given as one iterable."""
        group = ConditionGroup(GroupOp.ALL, [TRUE, TRUE])
        assert len(group.conditions) == 2
        assert group.matches(context) is True


class TestGroupEvaluation:
    """Tests for group operators."""

    @pytest.mark.parametrize("a,b,expected", [
        (False, False, False),
        (True, False, True),
        (False, True, True),
        (True, True, True),
    ])
    def test_any(self, context, a, b, expected):
        """Test ANY needs one match."""
        assert ConditionGroup(GroupOp.ANY, Counting(a), Counting(b)).matches(context) is expected

    @pytest.mark.parametrize("a,b,expected", [
        (False, False, False),
        (True, False, False),
        (False, True, False),
        (True, True, True),
    ])
    def test_all(self, context, a, b, expected):
        """Test ALL needs every match."""
        assert ConditionGroup(GroupOp.ALL, Counting(a), Counting(b)).matches(context) is expected

    @pytest.mark.parametrize("a,b,expected", [
        (False, False, True),
        (True, False, False),
        (False, True, False),
        (True, True, False),
    ])
    def test_none(self, context, a, b, expected):
        """Test NONE needs no match."""
        assert ConditionGroup(GroupOp.NONE, Counting(a), Counting(b)).matches(context) is expected

    def test_all_stops_on_first_false(self, context):
        """Test ALL short-circuits."""
        second = Counting(True)
        assert ConditionGroup(GroupOp.ALL, Counting(False), second).matches(context) is False
        assert second.calls == 0

    def test_any_stops_on_first_true(self, context):
        """Test ANY short-circuits."""
        second = Counting(False)
        assert ConditionGroup(GroupOp.ANY, Counting(True), second).matches(context) is True
        assert second.calls == 0

    def test_unknown_operator_at_evaluation(self, context):
        """Test a corrupted operator is reported when evaluated."""
        group = ConditionGroup(GroupOp.ANY, TRUE)
        group.op = "xor"
        with pytest.raises(UnknownOperatorError):
            group.matches(context)

    def test_nested_group(self, context):
        """Test groups can contain groups."""
        inner = ConditionGroup(GroupOp.NONE, FALSE)
        assert ConditionGroup(GroupOp.ALL, inner, TRUE).matches(context) is True
