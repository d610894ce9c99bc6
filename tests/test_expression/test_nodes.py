"""Tests for graph parsing and node helpers."""

import pytest

from animatedexpr.errors import MalformedGraphError
from animatedexpr.expression import builders as E
from animatedexpr.expression.nodes import (
    ComparisonNode,
    CondNode,
    MultiOpNode,
    NumberNode,
    SingleOpNode,
    UnsupportedNode,
    ValueNode,
    collect_nodes,
    collect_references,
    count_nodes,
    get_depth,
    parse_node,
)
from animatedexpr.expression.types import (
    ExpressionType,
    OperatorCategory,
    OPERATOR_SIGNATURES,
    get_operators_in,
)


class TestParseNode:
    """Test parse_node."""

    def test_parse_shapes(self):
        root = parse_node(
            E.cond(
                E.less_than(E.value(1), 2),
                E.add(1, 2, 3),
                E.sqrt(4),
            )
        )
        assert isinstance(root, CondNode)
        assert isinstance(root.expr, ComparisonNode)
        assert isinstance(root.expr.left, ValueNode)
        assert isinstance(root.if_node, MultiOpNode)
        assert len(root.if_node.others) == 1
        assert isinstance(root.else_node, SingleOpNode)
        assert root.else_node.type == ExpressionType.SQRT

    def test_logical_ops_parse_as_multi(self):
        root = parse_node(E.and_(1, 0))
        assert isinstance(root, MultiOpNode)
        assert root.type == ExpressionType.AND

    def test_unknown_tag(self):
        root = parse_node({"type": "lerp", "x": 1})
        assert isinstance(root, UnsupportedNode)
        assert not root.reserved
        assert root.to_dict() == {"type": "lerp", "x": 1}

    def test_reserved_tag(self):
        root = parse_node({"type": "set", "target": 3})
        assert isinstance(root, UnsupportedNode)
        assert root.reserved

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {},
            {"type": 3},
            {"type": "number"},
            {"type": "number", "value": True},
            {"type": "number", "value": "1"},
            {"type": "value"},
            {"type": "value", "tag": 1.5},
            {"type": "value", "tag": False},
            {"type": "sqrt"},
            {"type": "sqrt", "v": 4},
            {"type": "eq", "left": {"type": "number", "value": 1}},
            {"type": "add", "a": E.number(1), "b": E.number(2), "others": E.number(3)},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(MalformedGraphError):
            parse_node(data)

    def test_whole_number_float_tag(self):
        assert parse_node({"type": "value", "tag": 3.0}) == ValueNode(tag=3)
        assert isinstance(parse_node({"type": "value", "tag": 3.0}).tag, int)

    @pytest.mark.parametrize(
        "op",
        [op for op, sig in OPERATOR_SIGNATURES.items() if sig.supported and sig.fields],
    )
    def test_required_fields_follow_signature(self, op):
        first = OPERATOR_SIGNATURES[op].fields[0]
        with pytest.raises(MalformedGraphError, match=f"'{first}'"):
            parse_node({"type": op.value})

    def test_to_dict_round_trip(self):
        graph = E.cond(E.or_(E.value(1), 0), E.pow_(2, 3), E.neq(1, 2))
        assert parse_node(graph).to_dict() == graph

    def test_nodes_are_immutable(self):
        node = parse_node(E.number(1))
        with pytest.raises(AttributeError):
            node.value = 2.0


class TestTreeHelpers:
    """Test traversal helpers."""

    def test_count_and_depth(self):
        root = parse_node(E.add(1, E.multiply(2, 3), 4))
        assert count_nodes(root) == 6
        assert get_depth(root) == 3

    def test_collect_nodes_preorder(self):
        root = parse_node(E.sub(E.value(1), 2))
        kinds = [type(n) for n in collect_nodes(root)]
        assert kinds == [MultiOpNode, ValueNode, NumberNode]

    def test_collect_references(self):
        root = parse_node(E.add(E.value(3), E.cond(E.value(1), E.value(3), 0)))
        assert collect_references(root) == [3, 1, 3]

    def test_formula(self):
        root = parse_node(E.add(1, E.value(2)))
        assert root.to_string() == "add(1.0, value#2)"
        assert str(parse_node({"type": "foo"})) == "foo?"


class TestOperatorTable:
    """Test the operator grammar."""

    def test_every_tag_has_signature(self):
        assert set(OPERATOR_SIGNATURES) == set(ExpressionType)

    def test_statements_unsupported(self):
        statements = get_operators_in(OperatorCategory.STATEMENT)
        assert statements == [ExpressionType.SET, ExpressionType.BLOCK]
        assert not any(OPERATOR_SIGNATURES[op].supported for op in statements)

    def test_lookup_is_case_sensitive(self):
        assert ExpressionType.lookup("lessThan") == ExpressionType.LESS_THAN
        assert ExpressionType.lookup("lessthan") is None
