"""
Domain layer - Core models, declarations and contracts.

This layer contains the descriptor model, the declaration markers and the
abstract collaborator interfaces. It has no dependencies on other layers.
"""

from .enums import CellState, ComponentKind, Scope
from .exceptions import (
    BeanCreationError,
    BindingError,
    CircularDependencyError,
    DIException,
    RecursionDetectedError,
    ResourceMissingError,
    ScopeError,
)
from .interfaces import (
    IBeanProcessor,
    IBindingRegistry,
    IComponentDiscovery,
    IContainer,
    ILogger,
    IMetadataCache,
    IPropertyBinder,
    IScopeManager,
)
from .markers import (
    Inject,
    Lazy,
    Named,
    Resource,
    bean,
    component,
    config_properties,
    configuration,
    inject,
    post_construct,
    pre_destroy,
)
from .models import (
    ComponentDescriptor,
    ConfigField,
    ContainerSettings,
    ContainerStats,
    FactoryMethod,
    InjectionPoint,
    ResolutionStack,
    ResourcePoint,
    SetterPoint,
)

__all__ = [
    # Enums
    "Scope",
    "CellState",
    "ComponentKind",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "BeanCreationError",
    "ResourceMissingError",
    "RecursionDetectedError",
    "BindingError",
    "ScopeError",
    # Interfaces
    "IContainer",
    "IBindingRegistry",
    "IScopeManager",
    "IPropertyBinder",
    "IBeanProcessor",
    "IComponentDiscovery",
    "IMetadataCache",
    "ILogger",
    # Markers
    "Inject",
    "Named",
    "Lazy",
    "Resource",
    "component",
    "configuration",
    "bean",
    "config_properties",
    "inject",
    "post_construct",
    "pre_destroy",
    # Models
    "ComponentDescriptor",
    "InjectionPoint",
    "SetterPoint",
    "ResourcePoint",
    "ConfigField",
    "FactoryMethod",
    "ResolutionStack",
    "ContainerStats",
    "ContainerSettings",
]
