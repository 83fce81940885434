from contextlib import contextmanager
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Iterator, List, Mapping, Optional, Set, Tuple, Type

import psutil

from stratus_di.application.binding_registry import BindingRegistry
from stratus_di.application.descriptors import config_prefix_of, describe_component
from stratus_di.application.lazy_proxy import LazyProxy
from stratus_di.application.property_binder import coerce_value, lookup_resource
from stratus_di.domain import (
    BeanCreationError,
    ComponentDescriptor,
    ContainerStats,
    DIException,
    IBeanProcessor,
    ILogger,
    InjectionPoint,
    IPropertyBinder,
    IScopeManager,
    ResolutionStack,
    ResourceMissingError,
    Scope,
)


class InstantiationEngine:
    """Resolves dependency graphs and builds, injects and tracks beans.

    Resolution precedence for ``resolve(target, name)``:

    1. ``target`` is a configuration holder: bind it from flat configuration.
    2. ``name`` maps to a pre-built instance: return it.
    3. ``name`` maps to a descriptor: build it under its scope.
    4. ``target`` maps to a pre-built instance: return it.
    5. Build the descriptor bound to ``target`` under its scope.

    Attributes:
        _registry: Binding storage.
        _scopes: Scope-governed instance caches.
        _binder: Configuration-holder binder.
        _processors: Bean processors in registration order.
        _managed: Every fully built instance with its pre-destroy hooks.
        _cached_names: Aliases under which built singletons were cached.
    """

    def __init__(
        self,
        registry: BindingRegistry,
        scopes: IScopeManager,
        binder: IPropertyBinder,
        logger: ILogger,
        properties: Optional[Mapping[str, str]] = None,
        describer: Callable[[Type], ComponentDescriptor] = describe_component,
    ) -> None:
        self._registry = registry
        self._scopes = scopes
        self._binder = binder
        self._log = logger
        self._properties: Mapping[str, str] = MappingProxyType(dict(properties or {}))
        self._describer = describer
        self._processors: List[IBeanProcessor] = []
        self._managed: Dict[int, Tuple[Any, Tuple[str, ...]]] = {}
        self._cached_names: Set[str] = set()

    @property
    def properties(self) -> Mapping[str, str]:
        return self._properties

    def add_processor(self, processor: IBeanProcessor) -> None:
        self._processors.append(processor)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_component(self, descriptor: ComponentDescriptor) -> None:
        """Bind a component under its alias, its capabilities and its own type."""
        if descriptor.name:
            self._registry.register_named(descriptor.name, descriptor)
        for capability in descriptor.capabilities:
            self._registry.register_type(capability, descriptor)
        self._registry.register_type(descriptor.component_type, descriptor)
        self._log.trace("Registered component: %s", descriptor.simple_name)

    def register_named_instance(self, name: str, instance: Any) -> None:
        """Bind a pre-built instance to an alias, replacing any cached singleton."""
        self._cached_names.discard(name)
        self._registry.register_named_instance(name, instance)

    def register_configuration(self, descriptor: ComponentDescriptor) -> None:
        """Run every ``@bean`` factory of a configuration and bind the results.

        Raises:
            BeanCreationError: If the configuration or a factory fails, or a
                factory returns None.
        """
        config_type = descriptor.component_type
        self._log.trace("Processing configuration: %s", descriptor.simple_name)
        with self._wrapping(config_type, "Failed to instantiate configuration"):
            config = config_type()

        for factory in descriptor.factories:
            args = [self._dependency(point, ResolutionStack()) for point in factory.parameters]
            with self._wrapping(config_type, f"@bean {factory.method}() failed"):
                bean = getattr(config, factory.method)(*args)
            if bean is None:
                raise BeanCreationError(config_type, f"@bean {factory.method}() returned None")

            if factory.name:
                self.register_named_instance(factory.name, bean)
            else:
                self._registry.register_typed_instance(factory.provides or type(bean), bean)
            self._log.trace("Registered @bean %s -> %s", factory.method, type(bean).__name__)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, target: Any, name: Optional[str] = None, stack: Optional[ResolutionStack] = None) -> Any:
        """Resolve ``target`` (optionally by alias) to an instance.

        Args:
            target: The requested type.
            name: Optional alias taking precedence over typed bindings.
            stack: Resolution stack of the current top-level request.

        Returns:
            The resolved instance.

        Raises:
            CircularDependencyError: If ``target`` is already being resolved in ``stack``.
        """
        if stack is None:
            stack = ResolutionStack()

        stack.push(target)
        try:
            if config_prefix_of(target) is not None:
                return self._binder.bind(self._registry.lookup_by_capability(target), self._properties)

            if name is not None:
                named = self._registry.lookup_named_instance(name)
                if named is not None:
                    return named

                descriptor = self._registry.lookup_named_descriptor(name)
                if descriptor is not None:
                    instance = self._instantiate(descriptor, stack)
                    if descriptor.scope == Scope.SINGLETON:
                        instance = self._registry.cache_named_instance(name, instance)
                        self._cached_names.add(name)
                    return instance

            typed = self._registry.lookup_typed_instance(target)
            if typed is not None:
                return typed

            return self._instantiate(self._registry.lookup_by_capability(target), stack)
        finally:
            stack.pop()

    def resolve_name(self, name: str, stack: Optional[ResolutionStack] = None) -> Any:
        """Resolve the bean registered under ``name``.

        Raises:
            ResourceMissingError: If nothing is registered under ``name``.
        """
        named = self._registry.lookup_named_instance(name)
        if named is not None:
            return named

        descriptor = self._registry.lookup_named_descriptor(name)
        if descriptor is not None:
            return self.resolve(descriptor.component_type, name, stack)

        raise ResourceMissingError(name, f"No bean named: {name}")

    def create(self, component_type: Type) -> Any:
        """Build a managed instance, bypassing bindings and scope caches."""
        stack = ResolutionStack()
        stack.push(component_type)
        try:
            return self.build(self._describer(component_type), stack)
        finally:
            stack.pop()

    def _instantiate(self, descriptor: ComponentDescriptor, stack: ResolutionStack) -> Any:
        return self._scopes.get_or_create(
            descriptor.scope,
            descriptor.component_type,
            lambda: self.build(descriptor, stack),
        )

    def _dependency(self, point: InjectionPoint, stack: ResolutionStack) -> Any:
        if point.lazy:
            self._log.trace("Created lazy proxy for %s", getattr(point.target, "__name__", point.target))
            return LazyProxy(lambda: self.resolve(point.target, point.name, ResolutionStack()), point.target)
        return self.resolve(point.target, point.name, stack)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def build(self, descriptor: ComponentDescriptor, stack: ResolutionStack) -> Any:
        """Construct, inject and initialize one bean.

        Order: constructor, fields, setters, resources, processors'
        ``before_initialization``, post-construct hooks, processors'
        ``after_initialization``.

        Raises:
            BeanCreationError: If construction or injection fails.
            ResourceMissingError: If a resource key is absent from configuration.
        """
        component_type = descriptor.component_type
        if descriptor.constructor is None and not descriptor.default_constructible:
            raise BeanCreationError(
                component_type,
                "No constructor is marked with @inject and no zero-argument constructor exists",
            )

        args = [self._dependency(point, stack) for point in descriptor.constructor or ()]
        with self._wrapping(component_type, "Constructor failed"):
            instance = component_type(*args)

        for point in descriptor.fields:
            dependency = self._dependency(point, stack)
            with self._wrapping(component_type, f"Cannot inject field '{point.attribute}'"):
                setattr(instance, point.attribute, dependency)
            self._log.trace("Injected field %s.%s", descriptor.simple_name, point.attribute)

        for setter in descriptor.setters:
            dependencies = [self._dependency(point, stack) for point in setter.parameters]
            with self._wrapping(component_type, f"Setter {setter.method}() failed"):
                getattr(instance, setter.method)(*dependencies)
            self._log.trace("Injected setter %s.%s()", descriptor.simple_name, setter.method)

        for resource in descriptor.resources:
            raw = lookup_resource(self._properties, resource.key)
            with self._wrapping(component_type, f"Cannot inject resource '{resource.key}'"):
                setattr(instance, resource.attribute, coerce_value(resource.value_type, raw))
            self._log.trace("Injected resource %s=%s", resource.key, raw)

        for processor in self._processors:
            with self._wrapping(component_type, f"{type(processor).__name__} failed before initialization"):
                processed = processor.before_initialization(instance)
            if processed is not None:
                instance = processed

        self._invoke_hooks(instance, descriptor.post_construct, "PostConstruct")

        for processor in self._processors:
            with self._wrapping(component_type, f"{type(processor).__name__} failed after initialization"):
                processed = processor.after_initialization(instance)
            if processed is not None:
                instance = processed

        self._managed[id(instance)] = (instance, descriptor.pre_destroy)
        self._log.trace("Created bean: %s", descriptor.simple_name)
        return instance

    @contextmanager
    def _wrapping(self, component_type: Type, action: str) -> Iterator[None]:
        """Wrap non-DI failures in ``BeanCreationError``; DI errors pass through."""
        try:
            yield
        except DIException:
            raise
        except Exception as e:
            raise BeanCreationError(component_type, f"{action}: {e}") from e

    def _invoke_hooks(self, instance: Any, method_names: Tuple[str, ...], label: str) -> None:
        """Run lifecycle hooks, logging and swallowing their failures."""
        for method_name in method_names:
            try:
                getattr(instance, method_name)()
                self._log.trace("%s executed: %s.%s()", label, type(instance).__name__, method_name)
            except Exception as e:
                self._log.error("%s failed for %s: %s", label, type(instance).__name__, e)

    # ------------------------------------------------------------------
    # Teardown and introspection
    # ------------------------------------------------------------------

    def shutdown(self) -> None:
        """Run pre-destroy hooks on every managed instance, newest first.

        Managed instances and cached singletons are released afterwards, so
        a second call does nothing and later lookups rebuild.
        """
        entries = list(self._managed.values())
        self._managed.clear()
        self._log.info("Container shutting down (%s managed beans)...", len(entries))
        for instance, hooks in reversed(entries):
            self._invoke_hooks(instance, hooks, "PreDestroy")
        self.reset_caches()

    def reset_caches(self) -> None:
        """Drop scope caches and the singletons cached under their aliases.

        Instances registered by name or produced by ``@bean`` factories stay.
        """
        names = frozenset(self._cached_names)
        self._cached_names.difference_update(names)
        self._registry.evict_named_instances(names)
        self._scopes.clear()

    @property
    def cached_names(self) -> FrozenSet[str]:
        return frozenset(self._cached_names)

    @property
    def managed_count(self) -> int:
        return len(self._managed)

    def stats(self) -> ContainerStats:
        return ContainerStats(
            bindings=self._registry.type_binding_count,
            beans=self._registry.typed_instance_count,
            singletons=self._scopes.singleton_count(),
            named_bindings=self._registry.named_binding_count,
            named_beans=self._registry.named_instance_count,
            managed=len(self._managed),
            properties=len(self._properties),
            processors=len(self._processors),
            memory_used_mb=round(psutil.Process().memory_info().rss / (1024 * 1024), 2),
        )
