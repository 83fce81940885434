"""
stratus-di: Descriptor-driven dependency injection container with scopes,
lifecycle hooks and bean processors.

Public API exports for the stratus-di package.
"""

import logging

# Application exports
from stratus_di.application.container import ContainerBuilder, DIContainer
from stratus_di.application.lazy_proxy import LazyProxy

# Domain exports
from stratus_di.domain.enums import Scope
from stratus_di.domain.exceptions import (
    BeanCreationError,
    BindingError,
    CircularDependencyError,
    DIException,
    RecursionDetectedError,
    ResourceMissingError,
    ScopeError,
)
from stratus_di.domain.interfaces import IBeanProcessor, ILogger
from stratus_di.domain.markers import (
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
from stratus_di.domain.models import ComponentDescriptor, ContainerSettings, ContainerStats

# Infrastructure exports
from stratus_di.infrastructure.stdlib_logging import StdlibLogger

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Container
    "DIContainer",
    "ContainerBuilder",
    "LazyProxy",
    # Enums
    "Scope",
    # Declarations
    "component",
    "configuration",
    "bean",
    "config_properties",
    "inject",
    "post_construct",
    "pre_destroy",
    "Inject",
    "Named",
    "Lazy",
    "Resource",
    # Models
    "ComponentDescriptor",
    "ContainerSettings",
    "ContainerStats",
    # Collaborators
    "IBeanProcessor",
    "ILogger",
    "StdlibLogger",
    # Exceptions
    "DIException",
    "CircularDependencyError",
    "BeanCreationError",
    "ResourceMissingError",
    "RecursionDetectedError",
    "BindingError",
    "ScopeError",
]
