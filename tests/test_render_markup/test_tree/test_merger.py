"""Tests for merging children into render nodes."""

import pytest

from render_markup.shared.errors import AmbiguousDeepEmbedError, ReservedKeyError
from render_markup.tree.merger import (
    ChildMerger,
    add_named,
    append_positional,
    child_slots,
    copy_structure,
    is_reserved_key,
    next_position,
    slot_key,
)


class TestSlotHelpers:
    """Test key classification and positional slots."""

    def test_reserved_keys(self) -> None:
        """Test only '#'-prefixed strings are metadata keys."""
        assert is_reserved_key("#type")
        assert not is_reserved_key("type")
        assert not is_reserved_key(0)

    def test_child_slots_skip_metadata(self) -> None:
        """Test child slots in insertion order."""
        node = {"#type": "x", "a": {}, 0: {}}

        assert child_slots(node) == ["a", 0]

    def test_next_position_follows_highest_index(self) -> None:
        """Test positional keys continue after the highest one."""
        assert next_position({"#type": "x"}) == 0
        assert next_position({0: {}, 5: {}, "a": {}}) == 6

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("0", 0), ("12", 12), ("-3", -3), ("07", "07"), ("+1", "+1"), ("-0", "-0"), ("a1", "a1")],
    )
    def test_slot_key(self, name, expected) -> None:
        """Test which names are treated as positional integers."""
        assert slot_key(name) == expected
        assert type(slot_key(name)) is type(expected)

    def test_copy_structure_copies_slots_and_shares_values(self) -> None:
        """Test child slots are new dicts while metadata values are shared."""
        payload = {"k": [1]}
        node = {"#type": "x", "#data": payload, "#attributes": {"id": "a"}, "body": {"#type": "y"}}

        copied = copy_structure(node)

        assert copied == node
        assert copied["body"] is not node["body"]
        assert copied["#attributes"] is not node["#attributes"]
        assert copied["#data"] is payload

    def test_append_positional(self) -> None:
        """Test appending children positionally."""
        node = {"#type": "x"}
        append_positional(node, {"#type": "a"})
        append_positional(node, {"#type": "b"})

        assert node == {"#type": "x", 0: {"#type": "a"}, 1: {"#type": "b"}}


class TestAddNamed:
    """Test the named collision rule."""

    def test_first_child_stored_directly(self) -> None:
        """Test a unique name holds the child itself."""
        node = {}
        add_named(node, "a", {"#type": "x"})

        assert node == {"a": {"#type": "x"}}

    def test_collisions_build_list_in_order(self) -> None:
        """Test second and third children with the same name."""
        node = {}
        add_named(node, "a", {"#type": 1})
        add_named(node, "a", {"#type": 2})
        add_named(node, "a", {"#type": 3})

        assert node == {"a": [{"#type": 1}, {"#type": 2}, {"#type": 3}]}

    def test_incoming_list_is_flattened(self) -> None:
        """Test merging an already collected list."""
        node = {"a": {"#type": 1}}
        add_named(node, "a", [{"#type": 2}, {"#type": 3}])

        assert node["a"] == [{"#type": 1}, {"#type": 2}, {"#type": 3}]

    def test_integer_like_name_collides_with_position(self) -> None:
        """Test a numeric name joins the positional child at that index."""
        node = {0: {"#type": 1}}
        add_named(node, "0", {"#type": 2})

        assert node == {0: [{"#type": 1}, {"#type": 2}]}
        assert next_position(node) == 1

    def test_reserved_name_rejected(self) -> None:
        """Test names that look like metadata keys."""
        with pytest.raises(ReservedKeyError, match="'#type'"):
            add_named({}, "#type", {}, "p")


class TestChildMerger:
    """Test direct and deep-embed merging."""

    def test_direct_merge_continues_positions(self) -> None:
        """Test positional children follow existing positional slots."""
        parent = {"#type": "x", 0: {"#type": "existing"}}
        children = {0: {"#type": "new"}, "a": {"#type": "named"}}

        result = ChildMerger().merge(parent, children)

        assert result is parent
        assert parent[1] == {"#type": "new"}
        assert parent["a"] == {"#type": "named"}

    def test_direct_merge_applies_collision_rule(self) -> None:
        """Test named children colliding with existing slots."""
        parent = {"#type": "x", "a": {"#type": 1}}

        ChildMerger().merge(parent, {"a": {"#type": 2}})

        assert parent["a"] == [{"#type": 1}, {"#type": 2}]

    def test_bubble_down_follows_single_slot_chain(self) -> None:
        """Test deep embedding lands at the single leaf."""
        parent = {"#type": "wrapper", "inner": {"#type": "panel", 0: {"#type": "body"}}}

        ChildMerger().merge(parent, {0: {"#type": "child"}}, bubble_down=True)

        assert parent["inner"][0] == {"#type": "body", 0: {"#type": "child"}}

    def test_bubble_down_into_leaf_parent(self) -> None:
        """Test deep embedding into a node without child slots."""
        parent = {"#type": "wrapper"}

        ChildMerger().merge(parent, {0: {"#type": "child"}}, bubble_down=True)

        assert parent[0] == {"#type": "child"}

    def test_bubble_down_with_two_slots_is_ambiguous(self) -> None:
        """Test several candidate slots."""
        parent = {"#type": "wrapper", "a": {}, "b": {}}

        with pytest.raises(AmbiguousDeepEmbedError) as exc_info:
            ChildMerger().merge(parent, {0: {}}, bubble_down=True, tag_name="x-panel")

        assert exc_info.value.slots == ["a", "b"]
        assert "x-panel" in str(exc_info.value)

    def test_bubble_down_through_list_is_ambiguous(self) -> None:
        """Test a single slot holding a list has no single leaf."""
        parent = {"#type": "wrapper", "a": [{}, {}]}

        with pytest.raises(AmbiguousDeepEmbedError):
            ChildMerger().merge(parent, {0: {}}, bubble_down=True)
