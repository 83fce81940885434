from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from stratus_di.domain.enums import ComponentKind, Scope
from stratus_di.domain.exceptions import CircularDependencyError


class InjectionPoint(BaseModel):
    """Value object describing one dependency to inject.

    Attributes:
        attribute: Field name, or parameter name for constructor and setter points.
        target: The type to resolve.
        name: Optional alias to resolve by.
        lazy: Whether a deferred handle is injected instead of the instance.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    attribute: str = Field(..., description="Field or parameter the dependency fills.")
    target: Any = Field(..., description="The type to resolve.")
    name: Optional[str] = Field(default=None, description="Alias to resolve by.")
    lazy: bool = Field(default=False, description="Inject a deferred handle.")


class SetterPoint(BaseModel):
    """Value object describing a method called with resolved dependencies."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(..., description="Name of the setter method.")
    parameters: Tuple[InjectionPoint, ...] = Field(default=(), description="Resolved in order.")


class ResourcePoint(BaseModel):
    """Value object describing a field filled from a flat configuration key."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    attribute: str = Field(..., description="Field to assign.")
    key: str = Field(..., description="Configuration key to read.")
    value_type: Any = Field(default=str, description="Declared type used for coercion.")


class ConfigField(BaseModel):
    """A field of a configuration holder bound from ``prefix.<name>``."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    value_type: Any = str


class FactoryMethod(BaseModel):
    """A ``@bean`` method of a configuration class."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = Field(..., description="Name of the factory method.")
    provides: Optional[Any] = Field(default=None, description="Declared return type.")
    name: Optional[str] = Field(default=None, description="Alias the bean is registered under.")
    parameters: Tuple[InjectionPoint, ...] = Field(default=())


class ComponentDescriptor(BaseModel):
    """Immutable metadata for an injectable type.

    The engine works purely on descriptors; it never introspects live classes.

    Attributes:
        component_type: The concrete class.
        kind: Whether this is a component or a factory configuration.
        capabilities: Contracts the component is bound to.
        scope: Lifetime policy.
        name: Optional alias.
        constructor: Constructor injection points, or None when the
            constructor is not marked for injection.
        default_constructible: Whether an unmarked constructor can be called
            without arguments.
        fields: Field injection points.
        setters: Setter injection points.
        resources: Flat-configuration injection points.
        post_construct: Methods run after injection.
        pre_destroy: Methods run on shutdown.
        config_prefix: Prefix for configuration-holder binding.
        config_fields: Fields bound from configuration.
        factories: Bean factory methods of a configuration class.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    component_type: Type = Field(..., description="The concrete component class.")
    kind: ComponentKind = Field(default=ComponentKind.COMPONENT)
    capabilities: Tuple[Any, ...] = Field(default=())
    scope: Scope = Field(default=Scope.SINGLETON)
    name: Optional[str] = Field(default=None)
    constructor: Optional[Tuple[InjectionPoint, ...]] = Field(default=None)
    default_constructible: bool = Field(default=True)
    fields: Tuple[InjectionPoint, ...] = Field(default=())
    setters: Tuple[SetterPoint, ...] = Field(default=())
    resources: Tuple[ResourcePoint, ...] = Field(default=())
    post_construct: Tuple[str, ...] = Field(default=())
    pre_destroy: Tuple[str, ...] = Field(default=())
    config_prefix: Optional[str] = Field(default=None)
    config_fields: Tuple[ConfigField, ...] = Field(default=())
    factories: Tuple[FactoryMethod, ...] = Field(default=())

    @property
    def identity(self) -> str:
        """Canonical type name, ``module.qualname``."""
        return f"{self.component_type.__module__}.{self.component_type.__qualname__}"

    @property
    def simple_name(self) -> str:
        return self.component_type.__name__


class ResolutionStack(BaseModel):
    """Tracks the types under construction for one top-level request.

    Used for circular dependency detection. A fresh stack is allocated per
    external ``get``/``get_by_name``/``create`` call and never shared
    between threads.

    Attributes:
        stack: Types currently being resolved, outermost first.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stack: List[Any] = Field(
        default_factory=list,
        description="Stack of dependency types currently being resolved.",
    )

    def push(self, dependency_type: Any) -> None:
        """Add a dependency to the resolution stack.

        Args:
            dependency_type: The type being resolved.

        Raises:
            CircularDependencyError: If the type is already in the stack.
        """
        if dependency_type in self.stack:
            cycle = self.stack[self.stack.index(dependency_type) :] + [dependency_type]
            raise CircularDependencyError(cycle)
        self.stack.append(dependency_type)

    def pop(self) -> None:
        """Remove the last (most recent) dependency from the stack."""
        if self.stack:
            self.stack.pop()

    def __contains__(self, dependency_type: Any) -> bool:
        return dependency_type in self.stack

    def __len__(self) -> int:
        return len(self.stack)


class ContainerStats(BaseModel):
    """Observational snapshot of a container."""

    model_config = ConfigDict(frozen=True)

    bindings: int = Field(..., description="Capability bindings.")
    beans: int = Field(..., description="Typed pre-built beans.")
    singletons: int = Field(..., description="Instances cached at singleton scope.")
    named_bindings: int = Field(..., description="Name to descriptor bindings.")
    named_beans: int = Field(..., description="Name to instance bindings.")
    managed: int = Field(..., description="Instances awaiting teardown.")
    properties: int = Field(..., description="Flat configuration entries.")
    processors: int = Field(..., description="Registered bean processors.")
    memory_used_mb: float = Field(..., description="Resident memory of the process.")

    def as_dict(self) -> Dict[str, Any]:
        return self.model_dump()


class ContainerSettings(BaseModel):
    """Settings used by ``DIContainer.from_settings``.

    Attributes:
        scan_packages: Packages searched for components.
        properties_file: Optional ``.properties`` file loaded before registration.
        cache_path: File used by the metadata cache.
        use_metadata_cache: Whether discovery results are cached and reloaded.
    """

    model_config = ConfigDict(frozen=True)

    scan_packages: Tuple[str, ...] = Field(default=())
    properties_file: Optional[str] = Field(default=None)
    cache_path: str = Field(default=".stratus.cache")
    use_metadata_cache: bool = Field(default=True)
