from typing import Any, Callable, Dict, Iterable, Optional, Type

from stratus_di.application.descriptors import describe_component
from stratus_di.domain import ComponentDescriptor, IBindingRegistry


class BindingRegistry(IBindingRegistry):
    """Stores capability, name and pre-built instance bindings.

    Each map is a plain dict; single-key reads and writes are atomic, so
    concurrent callers need no external lock.

    Attributes:
        _type_bindings: Capability to descriptor.
        _named_bindings: Alias to descriptor.
        _named_instances: Alias to pre-built instance.
        _typed_instances: Capability to pre-built instance.
        _implicit: Memoized self-binding descriptors for unregistered classes.
    """

    def __init__(self, describer: Callable[[Type], ComponentDescriptor] = describe_component) -> None:
        """Initialize the registry with empty binding maps.

        Args:
            describer: Produces the self-binding descriptor of an unregistered class.
        """
        self._type_bindings: Dict[Any, ComponentDescriptor] = {}
        self._named_bindings: Dict[str, ComponentDescriptor] = {}
        self._named_instances: Dict[str, Any] = {}
        self._typed_instances: Dict[Any, Any] = {}
        self._implicit: Dict[Any, ComponentDescriptor] = {}
        self._describer = describer

    def register_type(self, capability: Any, descriptor: ComponentDescriptor) -> None:
        self._type_bindings[capability] = descriptor

    def register_named(self, name: str, descriptor: ComponentDescriptor) -> None:
        self._named_bindings[name] = descriptor

    def register_named_instance(self, name: str, instance: Any) -> None:
        self._named_instances[name] = instance

    def register_typed_instance(self, capability: Any, instance: Any) -> None:
        self._typed_instances[capability] = instance

    def cache_named_instance(self, name: str, instance: Any) -> Any:
        """Store a built singleton under its alias unless one is already there.

        Returns:
            The instance that ends up bound to ``name``.
        """
        return self._named_instances.setdefault(name, instance)

    def lookup_by_capability(self, capability: Any) -> ComponentDescriptor:
        """Return the descriptor bound to ``capability``.

        Falls back to treating the capability as a concrete, directly
        instantiable component.

        Raises:
            BeanCreationError: If the fallback cannot describe ``capability``.
        """
        descriptor = self._type_bindings.get(capability)
        if descriptor is not None:
            return descriptor
        descriptor = self._implicit.get(capability)
        if descriptor is None:
            descriptor = self._implicit.setdefault(capability, self._describer(capability))
        return descriptor

    def lookup_by_name(self, name: str) -> Optional[Any]:
        instance = self._named_instances.get(name)
        if instance is not None:
            return instance
        return self._named_bindings.get(name)

    def lookup_named_instance(self, name: str) -> Optional[Any]:
        return self._named_instances.get(name)

    def lookup_named_descriptor(self, name: str) -> Optional[ComponentDescriptor]:
        return self._named_bindings.get(name)

    def lookup_typed_instance(self, capability: Any) -> Optional[Any]:
        return self._typed_instances.get(capability)

    def evict_named_instances(self, names: Iterable[str]) -> None:
        """Forget the instances bound to ``names``; descriptor bindings stay."""
        for name in names:
            self._named_instances.pop(name, None)

    def copy_from(self, other: "BindingRegistry", skip_named: Iterable[str] = ()) -> None:
        """Merge every binding of ``other`` into this registry.

        Args:
            other: Registry to inherit bindings from.
            skip_named: Aliases whose instances are not copied.
        """
        skipped = set(skip_named)
        self._type_bindings.update(other._type_bindings)
        self._named_bindings.update(other._named_bindings)
        self._named_instances.update(
            (name, instance) for name, instance in other._named_instances.items() if name not in skipped
        )
        self._typed_instances.update(other._typed_instances)

    def clear(self) -> None:
        """Remove all bindings."""
        self._type_bindings.clear()
        self._named_bindings.clear()
        self._named_instances.clear()
        self._typed_instances.clear()
        self._implicit.clear()

    @property
    def type_binding_count(self) -> int:
        return len(self._type_bindings)

    @property
    def named_binding_count(self) -> int:
        return len(self._named_bindings)

    @property
    def named_instance_count(self) -> int:
        return len(self._named_instances)

    @property
    def typed_instance_count(self) -> int:
        return len(self._typed_instances)
