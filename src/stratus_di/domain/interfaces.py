from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, Set, Type, TypeVar

from stratus_di.domain.enums import Scope
from stratus_di.domain.models import ComponentDescriptor, ContainerStats

T = TypeVar("T")


class ILogger(ABC):
    """Leveled sink the container reports to.

    Templates use ``%s`` placeholders filled from the positional arguments.
    """

    @abstractmethod
    def trace(self, template: str, *args: Any) -> None:
        """Log fine-grained construction detail."""

    @abstractmethod
    def info(self, template: str, *args: Any) -> None:
        """Log a lifecycle milestone."""

    @abstractmethod
    def warn(self, template: str, *args: Any) -> None:
        """Log a recoverable problem."""

    @abstractmethod
    def error(self, template: str, *args: Any) -> None:
        """Log a swallowed failure."""


class IBeanProcessor(ABC):
    """Collaborator invoked around the initialization of every bean.

    Either hook may return a different object (for example a wrapper); the
    returned object replaces the bean from then on.
    """

    @abstractmethod
    def before_initialization(self, bean: Any) -> Any:
        """Called after injection, before post-construct hooks."""

    @abstractmethod
    def after_initialization(self, bean: Any) -> Any:
        """Called after post-construct hooks."""


class IComponentDiscovery(ABC):
    """Produces component descriptors for a set of package filters."""

    @abstractmethod
    def discover(self, packages: Sequence[str]) -> Set[ComponentDescriptor]:
        """Return descriptors of every declared component under ``packages``.

        The result is unordered and may be empty.
        """


class IMetadataCache(ABC):
    """Best-effort store of discovered components. Failures are never raised."""

    @abstractmethod
    def save(self, descriptors: Iterable[ComponentDescriptor]) -> None:
        """Persist the discovered descriptors."""

    @abstractmethod
    def load(self, packages: Sequence[str]) -> Set[ComponentDescriptor]:
        """Reload descriptors whose identity starts with any of ``packages``."""


class IBindingRegistry(ABC):
    """Abstract interface for binding storage and lookup."""

    @abstractmethod
    def register_type(self, capability: Any, descriptor: ComponentDescriptor) -> None:
        """Bind a capability to a descriptor. Later registrations win."""

    @abstractmethod
    def register_named(self, name: str, descriptor: ComponentDescriptor) -> None:
        """Bind an alias to a descriptor."""

    @abstractmethod
    def register_named_instance(self, name: str, instance: Any) -> None:
        """Bind an alias to a pre-built instance."""

    @abstractmethod
    def register_typed_instance(self, capability: Any, instance: Any) -> None:
        """Bind a capability to a pre-built instance."""

    @abstractmethod
    def lookup_by_capability(self, capability: Any) -> ComponentDescriptor:
        """Return the bound descriptor, or a descriptor of the capability itself."""

    @abstractmethod
    def lookup_by_name(self, name: str) -> Optional[Any]:
        """Return the named instance, else the named descriptor, else None."""


class IScopeManager(ABC):
    """Abstract interface for scope-governed instance caching."""

    @abstractmethod
    def get_or_create(self, scope: Scope, component_type: Type, builder: Callable[[], Any]) -> Any:
        """Return the instance cached for ``component_type`` in ``scope``, building it once.

        Args:
            scope: Lifetime policy of the component.
            component_type: Cache key within the scope.
            builder: Callable producing a new instance.
        """

    @abstractmethod
    def singleton_count(self) -> int:
        """Return how many singleton instances are currently cached."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every cached instance."""


class IPropertyBinder(ABC):
    """Abstract interface for configuration-holder binding."""

    @abstractmethod
    def bind(self, descriptor: ComponentDescriptor, config: Mapping[str, str]) -> Any:
        """Instantiate the holder and assign every ``prefix.<field>`` entry present."""


class IContainer(ABC):
    """Abstract interface for dependency injection container operations."""

    @abstractmethod
    def get(self, dependency_type: Type[T]) -> T:
        """Resolve and return an instance of the requested type.

        Args:
            dependency_type: The type to resolve.
        """

    @abstractmethod
    def get_by_name(self, name: str) -> Any:
        """Resolve and return the bean registered under ``name``."""

    @abstractmethod
    def create(self, dependency_type: Type[T]) -> T:
        """Build a fresh, managed instance bypassing bindings and scopes."""

    @abstractmethod
    def stats(self) -> ContainerStats:
        """Return an introspection snapshot."""

    @abstractmethod
    def shutdown(self) -> None:
        """Run pre-destroy hooks on every managed instance."""
