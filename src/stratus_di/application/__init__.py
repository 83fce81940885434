"""
Application layer - Use cases and orchestration.

This layer contains the registry, the scope manager, the instantiation
engine and the container facade. It depends on the Domain layer and on the
infrastructure defaults the container builder wires in.
"""

from .binding_registry import BindingRegistry
from .container import ContainerBuilder, DIContainer
from .descriptors import describe_component, is_declared
from .engine import InstantiationEngine
from .lazy_proxy import LazyProxy
from .property_binder import PropertyBinder, coerce_value
from .scope_manager import ScopeManager

__all__ = [
    "DIContainer",
    "ContainerBuilder",
    "BindingRegistry",
    "ScopeManager",
    "InstantiationEngine",
    "PropertyBinder",
    "LazyProxy",
    "describe_component",
    "is_declared",
    "coerce_value",
]
