"""Unit tests for domain models."""

import pytest
from pydantic import ValidationError

from stratus_di.domain import (
    CircularDependencyError,
    ComponentDescriptor,
    ComponentKind,
    ContainerSettings,
    ContainerStats,
    InjectionPoint,
    ResolutionStack,
    Scope,
)


class TestComponentDescriptor:
    """Test cases for ComponentDescriptor model."""

    def test_defaults(self):
        """Test that a bare descriptor is a singleton component without injection points."""

        class Service:
            pass

        descriptor = ComponentDescriptor(component_type=Service)

        assert descriptor.kind == ComponentKind.COMPONENT
        assert descriptor.scope == Scope.SINGLETON
        assert descriptor.name is None
        assert descriptor.constructor is None
        assert descriptor.default_constructible is True
        assert descriptor.fields == ()
        assert descriptor.factories == ()

    def test_descriptor_is_immutable(self):
        """Test that descriptors cannot be modified after creation."""

        class Service:
            pass

        descriptor = ComponentDescriptor(component_type=Service)

        with pytest.raises(ValidationError):
            descriptor.scope = Scope.PROTOTYPE

    def test_identity_uses_module_and_qualname(self):
        """Test the canonical identity string."""

        class Service:
            pass

        descriptor = ComponentDescriptor(component_type=Service)

        assert descriptor.identity == f"{__name__}.{Service.__qualname__}"
        assert descriptor.simple_name == "Service"

    def test_equal_descriptors_hash_alike(self):
        """Test that descriptors of the same class deduplicate in sets."""

        class Service:
            pass

        first = ComponentDescriptor(component_type=Service, scope=Scope.PROTOTYPE)
        second = ComponentDescriptor(component_type=Service, scope=Scope.PROTOTYPE)

        assert len({first, second}) == 1

    def test_scope_accepts_string_tag(self):
        """Test that the scope field validates plain tags."""

        class Service:
            pass

        descriptor = ComponentDescriptor(component_type=Service, scope="thread")

        assert descriptor.scope == Scope.THREAD


class TestInjectionPoint:
    """Test cases for InjectionPoint model."""

    def test_injection_point_fields(self):
        """Test creating an injection point."""

        class Repository:
            pass

        point = InjectionPoint(attribute="repository", target=Repository, name="primary", lazy=True)

        assert point.attribute == "repository"
        assert point.target is Repository
        assert point.name == "primary"
        assert point.lazy is True


class TestResolutionStack:
    """Test cases for ResolutionStack model."""

    def test_push_and_pop(self):
        """Test pushing and popping types."""

        class ServiceA:
            pass

        stack = ResolutionStack()
        stack.push(ServiceA)

        assert ServiceA in stack
        assert len(stack) == 1

        stack.pop()

        assert ServiceA not in stack
        assert len(stack) == 0

    def test_pop_on_empty_stack(self):
        """Test that popping an empty stack does nothing."""
        stack = ResolutionStack()
        stack.pop()
        assert len(stack) == 0

    def test_push_duplicate_raises_circular_dependency(self):
        """Test that pushing a type already on the stack reports the cycle."""

        class ServiceA:
            pass

        class ServiceB:
            pass

        class ServiceC:
            pass

        stack = ResolutionStack()
        stack.push(ServiceC)
        stack.push(ServiceA)
        stack.push(ServiceB)

        with pytest.raises(CircularDependencyError) as exc_info:
            stack.push(ServiceA)

        assert exc_info.value.dependency_chain == [ServiceA, ServiceB, ServiceA]
        assert len(stack) == 3


class TestContainerStats:
    """Test cases for ContainerStats model."""

    def test_as_dict(self):
        """Test that stats export every counter."""
        stats = ContainerStats(
            bindings=3,
            beans=1,
            singletons=2,
            named_bindings=1,
            named_beans=0,
            managed=2,
            properties=4,
            processors=0,
            memory_used_mb=12.5,
        )

        data = stats.as_dict()

        assert data["bindings"] == 3
        assert data["singletons"] == 2
        assert data["memory_used_mb"] == 12.5
        assert set(data) == {
            "bindings",
            "beans",
            "singletons",
            "named_bindings",
            "named_beans",
            "managed",
            "properties",
            "processors",
            "memory_used_mb",
        }


class TestContainerSettings:
    """Test cases for ContainerSettings model."""

    def test_defaults(self):
        """Test the default settings."""
        settings = ContainerSettings()

        assert settings.scan_packages == ()
        assert settings.properties_file is None
        assert settings.cache_path == ".stratus.cache"
        assert settings.use_metadata_cache is True

    def test_scan_packages_from_list(self):
        """Test that a list of packages is accepted."""
        settings = ContainerSettings(scan_packages=["app.services", "app.repositories"])
        assert settings.scan_packages == ("app.services", "app.repositories")
