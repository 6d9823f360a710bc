"""Unit tests for domain enums."""

from alias_ioc.domain.enums import ConcreteKind


class TestConcreteKind:
    """Test cases for the ConcreteKind enum."""

    def test_values(self):
        """Test the string values of each kind."""
        assert ConcreteKind.TYPE.value == "type"
        assert ConcreteKind.FACTORY.value == "factory"
        assert ConcreteKind.INSTANCE.value == "instance"

    def test_str_returns_value(self):
        """Test that str() returns the plain value."""
        assert str(ConcreteKind.FACTORY) == "factory"

    def test_is_string_enum(self):
        """Test that kinds compare equal to their values."""
        assert ConcreteKind.TYPE == "type"
        assert ConcreteKind("instance") is ConcreteKind.INSTANCE

    def test_has_three_members(self):
        """Test that no other kinds exist."""
        assert len(ConcreteKind) == 3
