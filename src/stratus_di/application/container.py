from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Type, TypeVar, Union

from stratus_di.application.binding_registry import BindingRegistry
from stratus_di.application.descriptors import describe_component
from stratus_di.application.engine import InstantiationEngine
from stratus_di.application.property_binder import PropertyBinder
from stratus_di.application.scope_manager import ScopeManager
from stratus_di.domain import (
    ComponentDescriptor,
    ComponentKind,
    ContainerSettings,
    ContainerStats,
    IBeanProcessor,
    IComponentDiscovery,
    IContainer,
    ILogger,
    IMetadataCache,
    ResolutionStack,
)
from stratus_di.infrastructure.discovery import PackageScanner
from stratus_di.infrastructure.metadata_cache import FileMetadataCache
from stratus_di.infrastructure.properties import load_properties
from stratus_di.infrastructure.stdlib_logging import StdlibLogger

T = TypeVar("T")


class DIContainer(IContainer):
    """Main dependency injection container.

    Orchestrates registration and resolution of components using the binding
    registry, the scope manager and the instantiation engine. Supports
    singleton, prototype and thread scopes with constructor, field, setter
    and resource injection.

    Attributes:
        _registry: Capability, name and instance bindings.
        _scope_manager: Scope-governed instance caches.
        _engine: Component resolving and building beans.
        _log: Logger the container reports to.
    """

    def __init__(
        self,
        logger: Optional[ILogger] = None,
        properties: Optional[Mapping[str, str]] = None,
        processors: Iterable[IBeanProcessor] = (),
    ) -> None:
        """Initialize the container with empty bindings.

        Args:
            logger: Logger to report to. Defaults to a ``StdlibLogger``.
            properties: Flat configuration, read-only from here on.
            processors: Bean processors, invoked in the given order.
        """
        self._log: ILogger = logger or StdlibLogger()
        self._registry = BindingRegistry()
        self._scope_manager = ScopeManager()
        self._engine = InstantiationEngine(
            self._registry,
            self._scope_manager,
            PropertyBinder(),
            self._log,
            properties,
        )
        for processor in processors:
            self.add_processor(processor)

    @classmethod
    def builder(cls) -> "ContainerBuilder":
        """Start a fluent container configuration.

        Example:
            >>> container = (
            ...     DIContainer.builder()
            ...     .load_properties("app.properties")
            ...     .scan("myapp.services")
            ...     .add_processor(TimingProcessor())
            ...     .build()
            ... )
        """
        return ContainerBuilder()

    @classmethod
    def from_settings(cls, settings: ContainerSettings, logger: Optional[ILogger] = None) -> "DIContainer":
        """Build a container from a ``ContainerSettings`` model."""
        builder = cls.builder()
        if logger is not None:
            builder.logger(logger)
        if settings.properties_file:
            builder.load_properties(settings.properties_file)
        builder.metadata_cache(FileMetadataCache(settings.cache_path, logger) if settings.use_metadata_cache else None)
        return builder.scan(*settings.scan_packages).build()

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def add_processor(self, processor: IBeanProcessor) -> None:
        self._engine.add_processor(processor)
        self._log.info("Registered BeanProcessor: %s", type(processor).__name__)

    def register(self, *component_types: Type) -> None:
        """Describe and register classes declared with the decorator API."""
        self.register_descriptors(describe_component(component_type) for component_type in component_types)

    def register_descriptors(self, descriptors: Iterable[ComponentDescriptor]) -> None:
        """Register descriptors, components before configurations.

        Descriptors are processed in identity order so the outcome of
        overlapping capability bindings does not depend on discovery order.
        """
        ordered = sorted(set(descriptors), key=lambda descriptor: descriptor.identity)
        for descriptor in ordered:
            if descriptor.kind == ComponentKind.COMPONENT:
                self._engine.register_component(descriptor)
        for descriptor in ordered:
            if descriptor.kind == ComponentKind.CONFIGURATION:
                self._engine.register_configuration(descriptor)

    def register_instance(self, capability: Any, instance: Any) -> None:
        """Bind a pre-built instance to a capability."""
        self._registry.register_typed_instance(capability, instance)

    def register_named_instance(self, name: str, instance: Any) -> None:
        """Bind a pre-built instance to an alias."""
        self._engine.register_named_instance(name, instance)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def get(self, dependency_type: Type[T]) -> T:
        """Resolve and return an instance of the specified type.

        Args:
            dependency_type: The type to resolve.

        Returns:
            Instance of the requested type with all dependencies injected.

        Raises:
            CircularDependencyError: If a circular dependency is detected.
            BeanCreationError: If a bean in the graph cannot be built.
            ResourceMissingError: If a resource key is absent from configuration.

        Example:
            >>> user_service = container.get(UserService)
        """
        return self._engine.resolve(dependency_type, None, ResolutionStack())

    def get_by_name(self, name: str) -> Any:
        """Resolve the bean registered under ``name``.

        Raises:
            ResourceMissingError: If nothing is registered under ``name``.
        """
        return self._engine.resolve_name(name, ResolutionStack())

    def create(self, dependency_type: Type[T]) -> T:
        """Build a fresh instance outside the managed graph's bindings and scopes.

        The instance is still injected, initialized and shut down with the
        container.
        """
        return self._engine.create(dependency_type)

    @property
    def properties(self) -> Mapping[str, str]:
        return self._engine.properties

    def stats(self) -> ContainerStats:
        return self._engine.stats()

    def shutdown(self) -> None:
        """Run pre-destroy hooks on every managed instance.

        Hook failures are logged and do not stop the sweep.
        """
        self._engine.shutdown()

    def __enter__(self) -> "DIContainer":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> bool:
        self.shutdown()
        return False


class ContainerBuilder:
    """Collects container configuration and assembles a ``DIContainer``.

    Registration happens in ``build()``: properties are fixed first, then
    components are registered, then configuration factories run.
    """

    def __init__(self) -> None:
        self._logger: Optional[ILogger] = None
        self._properties: Dict[str, str] = {}
        self._packages: List[str] = []
        self._component_types: List[Type] = []
        self._processors: List[IBeanProcessor] = []
        self._discovery: Optional[IComponentDiscovery] = None
        self._cache: Optional[IMetadataCache] = None
        self._cache_configured = False

    def _log(self) -> ILogger:
        if self._logger is None:
            self._logger = StdlibLogger()
        return self._logger

    def logger(self, logger: ILogger) -> "ContainerBuilder":
        self._logger = logger
        self._logger.info("Using custom logger: %s", type(logger).__name__)
        return self

    def properties(self, properties: Mapping[str, str]) -> "ContainerBuilder":
        self._properties.update(properties)
        return self

    def load_properties(self, path: Union[str, Path]) -> "ContainerBuilder":
        """Merge a ``.properties`` file; a missing file is logged, not raised."""
        try:
            loaded = load_properties(path)
        except OSError:
            self._log().warn("No properties file found: %s", path)
            return self
        self._properties.update(loaded)
        self._log().info("Loaded properties: %s (%s entries)", path, len(loaded))
        return self

    def scan(self, *packages: str) -> "ContainerBuilder":
        self._packages.extend(packages)
        return self

    def register(self, *component_types: Type) -> "ContainerBuilder":
        self._component_types.extend(component_types)
        return self

    def add_processor(self, processor: IBeanProcessor) -> "ContainerBuilder":
        self._processors.append(processor)
        return self

    def discovery(self, discovery: IComponentDiscovery) -> "ContainerBuilder":
        self._discovery = discovery
        return self

    def metadata_cache(self, cache: Optional[IMetadataCache]) -> "ContainerBuilder":
        """Replace the metadata cache; ``None`` disables caching."""
        self._cache = cache
        self._cache_configured = True
        return self

    def build(self) -> DIContainer:
        log = self._log()
        container = DIContainer(logger=log, properties=self._properties, processors=self._processors)

        descriptors = {describe_component(component_type) for component_type in self._component_types}
        if self._packages:
            descriptors |= self._discover(log)
        container.register_descriptors(descriptors)

        stats = container.stats()
        log.info(
            "Container initialized with %s bindings, %s named beans",
            stats.bindings,
            stats.named_beans,
        )
        return container

    def _discover(self, log: ILogger) -> Set[ComponentDescriptor]:
        discovery = self._discovery or PackageScanner(log)
        cache = self._cache if self._cache_configured else FileMetadataCache(logger=log)

        found = discovery.discover(self._packages)
        if found:
            if cache is not None:
                cache.save(found)
            log.info("Scanned packages %s -> %s components", self._packages, len(found))
            return found

        found = cache.load(self._packages) if cache is not None else set()
        if found:
            log.info("Loaded %s components from cache", len(found))
        else:
            log.warn("No components discovered for %s", self._packages)
        return found
