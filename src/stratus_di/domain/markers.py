"""Declaration API: decorators and ``Annotated`` markers.

Decorators only record metadata on the decorated class or function. The
metadata is turned into a ``ComponentDescriptor`` when the component is
registered with a container, so forward references between components are
free to point at classes defined later in the module.
"""

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Type, TypeVar, Union

from stratus_di.domain.enums import Scope

T = TypeVar("T")

COMPONENT_ATTR = "__stratus_component__"
CONFIGURATION_ATTR = "__stratus_configuration__"
CONFIG_PREFIX_ATTR = "__stratus_config_prefix__"
INJECT_ATTR = "__stratus_inject__"
LIFECYCLE_ATTR = "__stratus_lifecycle__"
BEAN_ATTR = "__stratus_bean__"

POST_CONSTRUCT = "post_construct"
PRE_DESTROY = "pre_destroy"


@dataclass(frozen=True)
class Inject:
    """Marks a class annotation for field injection, or refines a parameter.

    Example:
        >>> class ReportService:
        ...     repository: Annotated[Repository, Inject()]
        ...     cache: Annotated[Cache, Inject(name="redis", lazy=True)]
    """

    name: Optional[str] = None
    lazy: bool = False


@dataclass(frozen=True)
class Resource:
    """Marks a class annotation to be filled from a flat configuration key."""

    key: str


def Named(name: str) -> Inject:
    """Shorthand for ``Inject(name=name)``."""
    return Inject(name=name)


def Lazy(name: Optional[str] = None) -> Inject:
    """Shorthand for ``Inject(name=name, lazy=True)``."""
    return Inject(name=name, lazy=True)


def component(
    cls: Optional[Type[T]] = None,
    *,
    scope: Union[Scope, str] = Scope.SINGLETON,
    name: Optional[str] = None,
    provides: Iterable[Type] = (),
) -> Any:
    """Declare a class as an injectable component.

    Args:
        cls: The decorated class when used without arguments.
        scope: Lifetime policy of the component.
        name: Optional alias the component can be looked up by.
        provides: Capabilities the component is bound to. Defaults to the
            direct abstract base classes of the component.

    Example:
        >>> @component(scope=Scope.PROTOTYPE, name="mailer")
        ... class SmtpMailer(Mailer):
        ...     pass
    """

    def decorator(target: Type[T]) -> Type[T]:
        setattr(
            target,
            COMPONENT_ATTR,
            {"scope": Scope(scope), "name": name, "provides": tuple(provides)},
        )
        return target

    if cls is not None:
        return decorator(cls)
    return decorator


def configuration(cls: Type[T]) -> Type[T]:
    """Declare a class whose ``@bean`` methods produce pre-built beans."""
    setattr(cls, CONFIGURATION_ATTR, True)
    return cls


def bean(func: Optional[Callable] = None, *, name: Optional[str] = None) -> Any:
    """Declare a factory method on a ``@configuration`` class.

    Named beans are registered under their name; the others under the
    method's return annotation.
    """

    def decorator(target: Callable) -> Callable:
        setattr(target, BEAN_ATTR, {"name": name})
        return target

    if func is not None:
        return decorator(func)
    return decorator


def config_properties(prefix: str) -> Callable[[Type[T]], Type[T]]:
    """Declare a plain data holder bound from ``prefix.<field>`` config keys.

    Example:
        >>> @config_properties("db")
        ... class DbConfig:
        ...     url: str
        ...     pool_size: int = 4
    """

    def decorator(cls: Type[T]) -> Type[T]:
        setattr(cls, CONFIG_PREFIX_ATTR, prefix)
        return cls

    return decorator


def inject(func: Callable) -> Callable:
    """Mark ``__init__`` for constructor injection or a method for setter injection."""
    setattr(func, INJECT_ATTR, True)
    return func


def post_construct(func: Callable) -> Callable:
    """Mark a zero-argument method to run after all injection completes."""
    setattr(func, LIFECYCLE_ATTR, POST_CONSTRUCT)
    return func


def pre_destroy(func: Callable) -> Callable:
    """Mark a zero-argument method to run on container shutdown."""
    setattr(func, LIFECYCLE_ATTR, PRE_DESTROY)
    return func
