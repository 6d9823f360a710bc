"""Unit tests for domain interfaces."""

from abc import ABC

import pytest

from alias_ioc.domain.interfaces import IBuilder, IContainer, ISharedCache


class TestIContainerInterface:
    """Test cases for the IContainer interface."""

    def test_icontainer_is_abstract(self):
        """Test that IContainer is an abstract base class."""
        assert issubclass(IContainer, ABC)

    def test_icontainer_cannot_be_instantiated(self):
        """Test that IContainer cannot be instantiated directly."""
        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            IContainer()

    @pytest.mark.parametrize(
        "method",
        ["register", "unregister", "has", "resolve", "resolve_type", "can_resolve", "aliases", "clear"],
    )
    def test_icontainer_declares_method(self, method):
        """Test that IContainer declares the core operations as abstract."""
        assert method in IContainer.__abstractmethods__

    def test_partial_implementation_is_rejected(self):
        """Test that implementing IContainer requires all abstract methods."""

        class PartialContainer(IContainer):
            def register(self, alias, concrete=None, shared=False, dependencies=None):
                pass

        with pytest.raises(TypeError, match="Can't instantiate abstract class"):
            PartialContainer()


class TestIBuilderInterface:
    """Test cases for the IBuilder interface."""

    def test_ibuilder_cannot_be_instantiated(self):
        """Test that IBuilder cannot be instantiated directly."""
        with pytest.raises(TypeError):
            IBuilder()

    def test_ibuilder_can_be_implemented(self):
        """Test that a builder only needs build()."""

        class StaticBuilder(IBuilder):
            def build(self, target, alias, container, dependencies=None):
                return target()

        assert StaticBuilder().build(dict, "config", None) == {}


class TestISharedCacheInterface:
    """Test cases for the ISharedCache interface."""

    def test_ishared_cache_cannot_be_instantiated(self):
        """Test that ISharedCache cannot be instantiated directly."""
        with pytest.raises(TypeError):
            ISharedCache()

    def test_ishared_cache_declares_methods(self):
        """Test the abstract cache operations."""
        assert ISharedCache.__abstractmethods__ == frozenset({"contains", "get", "store", "evict", "clear"})
