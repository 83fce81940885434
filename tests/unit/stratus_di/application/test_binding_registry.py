"""Unit tests for BindingRegistry."""

import pytest

from stratus_di.application.binding_registry import BindingRegistry
from stratus_di.application.descriptors import describe_component
from stratus_di.domain import BeanCreationError, IBindingRegistry


class Repository:
    pass


class SqlRepository(Repository):
    pass


class TestBindingRegistry:
    """Test cases for binding storage and lookup."""

    def test_registry_implements_interface(self):
        """Test that BindingRegistry implements IBindingRegistry."""
        assert isinstance(BindingRegistry(), IBindingRegistry)

    def test_capability_lookup_returns_registered_descriptor(self):
        """Test that a registered capability maps to its descriptor."""
        registry = BindingRegistry()
        descriptor = describe_component(SqlRepository)

        registry.register_type(Repository, descriptor)

        assert registry.lookup_by_capability(Repository) is descriptor
        assert registry.type_binding_count == 1

    def test_unregistered_capability_falls_back_to_self_binding(self):
        """Test that an unknown concrete class is described on demand and memoized."""
        registry = BindingRegistry()

        first = registry.lookup_by_capability(SqlRepository)
        second = registry.lookup_by_capability(SqlRepository)

        assert first.component_type is SqlRepository
        assert first is second
        assert registry.type_binding_count == 0

    def test_fallback_for_non_class_raises(self):
        """Test that the fallback fails for something that is not a class."""
        registry = BindingRegistry()

        with pytest.raises(BeanCreationError):
            registry.lookup_by_capability("Repository")

    def test_named_lookup_prefers_instances(self):
        """Test that a named instance shadows a named descriptor."""
        registry = BindingRegistry()
        descriptor = describe_component(SqlRepository)
        instance = SqlRepository()

        registry.register_named("repo", descriptor)
        assert registry.lookup_by_name("repo") is descriptor

        registry.register_named_instance("repo", instance)
        assert registry.lookup_by_name("repo") is instance
        assert registry.lookup_named_descriptor("repo") is descriptor
        assert registry.lookup_by_name("missing") is None

    def test_cache_named_instance_keeps_first(self):
        """Test that caching a named instance never replaces an existing one."""
        registry = BindingRegistry()
        first = SqlRepository()
        second = SqlRepository()

        assert registry.cache_named_instance("repo", first) is first
        assert registry.cache_named_instance("repo", second) is first
        assert registry.lookup_named_instance("repo") is first

    def test_typed_instances(self):
        """Test typed pre-built instance storage."""
        registry = BindingRegistry()
        instance = SqlRepository()

        registry.register_typed_instance(Repository, instance)

        assert registry.lookup_typed_instance(Repository) is instance
        assert registry.lookup_typed_instance(SqlRepository) is None
        assert registry.typed_instance_count == 1

    def test_copy_from_and_clear(self):
        """Test merging another registry and clearing."""
        parent = BindingRegistry()
        parent.register_type(Repository, describe_component(SqlRepository))
        parent.register_named_instance("repo", SqlRepository())

        child = BindingRegistry()
        child.copy_from(parent)

        assert child.type_binding_count == 1
        assert child.named_instance_count == 1

        child.clear()

        assert child.type_binding_count == 0
        assert child.named_instance_count == 0
        assert parent.type_binding_count == 1
