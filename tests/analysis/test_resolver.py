"""Tests for type reference resolution."""

import pytest

from structdoc.analysis.resolver import display_type, reference_key, target_name
from structdoc.models.base import OpaqueKind
from structdoc.models.types import (
    IndirectionType,
    MapType,
    NamedType,
    OpaqueType,
    QualifiedName,
    SequenceType,
)


@pytest.mark.analysis
class TestReferenceKey:
    """Tests for reference_key()."""

    def test_named(self):
        """A plain name is its own key."""
        assert reference_key(NamedType("Server")) == "Server"

    def test_prefix_not_applied_by_value(self):
        """A by-value name never gets the module prefix."""
        assert reference_key(NamedType("Server"), "server") == "Server"

    def test_prefix_applied_below_indirection(self):
        """The prefix is applied one level below an indirection."""
        assert reference_key(IndirectionType(NamedType("Server")), "server") == "server.Server"

    def test_empty_prefix_below_indirection(self):
        """An empty prefix leaves the name bare."""
        assert reference_key(IndirectionType(NamedType("Server")), "") == "Server"

    def test_prefix_not_applied_two_levels_down(self):
        """A sequence under an indirection resets the prefix signal."""
        expr = IndirectionType(SequenceType(NamedType("Server")))
        assert reference_key(expr, "server") == "Server"

    def test_map_resolves_value(self):
        """Maps resolve through their value type only."""
        expr = MapType(NamedType("str"), NamedType("Listener"))
        assert reference_key(expr) == "Listener"

    def test_sequence_resolves_element(self):
        """Sequences resolve through their element type."""
        assert reference_key(SequenceType(NamedType("Listener"))) == "Listener"

    def test_qualified(self):
        """Imported names carry the module base."""
        expr = QualifiedName(module="app.server", name="ServerConfig")
        assert reference_key(expr) == "server.ServerConfig"

    def test_opaque_not_referenceable(self):
        """Opaque shapes have no reference key."""
        assert reference_key(OpaqueType(OpaqueKind.FUNC)) == ""
        assert reference_key(OpaqueType(OpaqueKind.INTERFACE)) == ""


@pytest.mark.analysis
class TestDisplayType:
    """Tests for display_type()."""

    def test_map(self):
        """Maps render both sides."""
        expr = MapType(NamedType("str"), SequenceType(NamedType("int")))
        assert display_type(expr) == "map[str][]int"

    def test_sequence_of_qualified(self):
        """Sequences prefix their element with []."""
        expr = SequenceType(QualifiedName(module="app.server", name="Listener"))
        assert display_type(expr) == "[]server.Listener"

    def test_indirection_is_transparent(self):
        """Indirections display as their target."""
        assert display_type(IndirectionType(NamedType("int"))) == "int"

    def test_indirection_applies_prefix(self):
        """The prefix is shown one level below an indirection."""
        assert display_type(IndirectionType(NamedType("Limits")), "server") == "server.Limits"
        assert display_type(NamedType("Limits"), "server") == "Limits"

    def test_opaque_struct_and_interface(self):
        """Anonymous structs and interfaces use fixed names."""
        assert display_type(OpaqueType(OpaqueKind.STRUCT)) == "struct"
        assert display_type(OpaqueType(OpaqueKind.INTERFACE, "Any")) == "interface{}"

    def test_unknown_shape_warns(self, caplog):
        """Other opaque shapes display empty and log a warning."""
        with caplog.at_level("WARNING", logger="structdoc.analysis.resolver"):
            assert display_type(OpaqueType(OpaqueKind.CHAN, "Queue")) == ""
        assert "unknown type shape" in caplog.text


@pytest.mark.analysis
class TestTargetName:
    """Tests for target_name()."""

    def test_innermost_name(self):
        """Containers resolve to the innermost name."""
        inner = QualifiedName(module="app.tls", name="TLSConfig")
        expr = MapType(NamedType("str"), IndirectionType(SequenceType(inner)))
        assert target_name(expr) is inner

    def test_opaque(self):
        """Opaque shapes have no target."""
        assert target_name(OpaqueType()) is None
