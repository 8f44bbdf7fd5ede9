"""Tests for boxed references."""

import pytest

from render_markup.registry.references import BoxedReference, ReferenceTable


class TestReferenceTable:
    """Test boxing and resolving values."""

    def test_box_returns_sequential_tokens(self) -> None:
        """Test tokens have the Ref/<id>/ form starting at 1."""
        table = ReferenceTable()

        assert table.box(["a"]) == "Ref/1/"
        assert table.box({"b": 1}) == "Ref/2/"
        assert len(table) == 2

    def test_resolve_known_token(self) -> None:
        """Test resolution yields the same object that was boxed."""
        table = ReferenceTable()
        value = ["a", "b"]
        token = table.box(value)

        reference = table.resolve(token)

        assert reference == BoxedReference(1, value)
        assert reference.value is value
        assert reference.token == token
        assert table.unbox(token) is value

    @pytest.mark.parametrize("token", ["Ref/1", "Ref/x/", "ref/1/", " Ref/1/", "plain"])
    def test_is_reference_requires_exact_shape(self, token: str) -> None:
        """Test malformed tokens are not references."""
        assert not ReferenceTable.is_reference(token)

    def test_is_reference_rejects_non_strings(self) -> None:
        """Test non-string values are not references."""
        assert not ReferenceTable.is_reference(1)
        assert ReferenceTable.is_reference("Ref/12/")

    def test_unknown_token_resolves_to_none(self) -> None:
        """Test well-formed but unknown tokens."""
        table = ReferenceTable()

        assert table.resolve("Ref/7/") is None
        with pytest.raises(KeyError):
            table.unbox("Ref/7/")

    def test_tables_are_independent(self) -> None:
        """Test that ids are scoped to one table."""
        first = ReferenceTable()
        second = ReferenceTable()
        token = first.box("value")

        assert second.resolve(token) is None
