"""Turns decorated classes into ``ComponentDescriptor`` objects.

This is the only place that introspects live classes. The engine consumes
the descriptors produced here.
"""

import inspect
from abc import ABC, ABCMeta
from typing import (
    Annotated,
    Any,
    Callable,
    ClassVar,
    Dict,
    Generic,
    List,
    Optional,
    Protocol,
    Tuple,
    Type,
    get_args,
    get_origin,
    get_type_hints,
)

from stratus_di.domain import (
    BeanCreationError,
    ComponentDescriptor,
    ComponentKind,
    ConfigField,
    FactoryMethod,
    Inject,
    InjectionPoint,
    Resource,
    ResourcePoint,
    Scope,
    SetterPoint,
)
from stratus_di.domain.markers import (
    BEAN_ATTR,
    COMPONENT_ATTR,
    CONFIG_PREFIX_ATTR,
    CONFIGURATION_ATTR,
    INJECT_ATTR,
    LIFECYCLE_ATTR,
    POST_CONSTRUCT,
    PRE_DESTROY,
)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_NOT_CAPABILITIES = (object, ABC, Generic, Protocol)


def is_declared(cls: Any) -> bool:
    """Whether ``cls`` itself carries ``@component`` or ``@configuration``."""
    if not inspect.isclass(cls):
        return False
    own = vars(cls)
    return COMPONENT_ATTR in own or CONFIGURATION_ATTR in own


def config_prefix_of(target: Any) -> Optional[str]:
    """Return the ``@config_properties`` prefix declared on ``target``, if any."""
    if not inspect.isclass(target):
        return None
    return getattr(target, CONFIG_PREFIX_ATTR, None)


def describe_component(cls: Type) -> ComponentDescriptor:
    """Build the descriptor of a class from its declaration markers.

    Undecorated classes are described with defaults (singleton scope, no
    alias), which is what the self-binding fallback relies on.

    Args:
        cls: The class to describe.

    Returns:
        The immutable descriptor.

    Raises:
        BeanCreationError: If ``cls`` is not a class or its injection points
            cannot be read.

    Example:
        >>> @component(scope=Scope.PROTOTYPE)
        ... class Worker:
        ...     @inject
        ...     def __init__(self, queue: Queue):
        ...         self.queue = queue
        >>> describe_component(Worker).constructor[0].target is Queue
        True
    """
    if not inspect.isclass(cls):
        raise BeanCreationError(cls, "Only classes can be described as components")

    declaration: Dict[str, Any] = vars(cls).get(COMPONENT_ATTR) or {}
    methods = _own_methods(cls)
    hints = _type_hints(cls, cls)

    constructor: Optional[Tuple[InjectionPoint, ...]] = None
    init = methods.get("__init__")
    if init is not None and getattr(init, INJECT_ATTR, False):
        constructor = tuple(_parameters(cls, init))

    fields: List[InjectionPoint] = []
    resources: List[ResourcePoint] = []
    for attribute, hint in hints.items():
        base, metadata = _split_annotation(hint)
        for marker in metadata:
            if isinstance(marker, Inject):
                fields.append(InjectionPoint(attribute=attribute, target=base, name=marker.name, lazy=marker.lazy))
                break
            if isinstance(marker, Resource):
                resources.append(ResourcePoint(attribute=attribute, key=marker.key, value_type=base))
                break

    setters: List[SetterPoint] = []
    post_construct: List[str] = []
    pre_destroy: List[str] = []
    factories: List[FactoryMethod] = []
    for method_name, func in methods.items():
        if method_name != "__init__" and getattr(func, INJECT_ATTR, False):
            setters.append(SetterPoint(method=method_name, parameters=tuple(_parameters(cls, func))))
        lifecycle = getattr(func, LIFECYCLE_ATTR, None)
        if lifecycle == POST_CONSTRUCT:
            post_construct.append(method_name)
        elif lifecycle == PRE_DESTROY:
            pre_destroy.append(method_name)
        bean_declaration = getattr(func, BEAN_ATTR, None)
        if bean_declaration is not None:
            factories.append(_factory(cls, method_name, func, bean_declaration))

    config_prefix = config_prefix_of(cls)
    config_fields: Tuple[ConfigField, ...] = ()
    if config_prefix is not None:
        config_fields = tuple(
            ConfigField(name=attribute, value_type=_split_annotation(hint)[0])
            for attribute, hint in hints.items()
            if not attribute.startswith("_") and get_origin(_split_annotation(hint)[0]) is not ClassVar
        )

    provides = declaration.get("provides") or _abstract_bases(cls)

    return ComponentDescriptor(
        component_type=cls,
        kind=ComponentKind.CONFIGURATION if vars(cls).get(CONFIGURATION_ATTR) else ComponentKind.COMPONENT,
        capabilities=tuple(provides),
        scope=declaration.get("scope", Scope.SINGLETON),
        name=declaration.get("name"),
        constructor=constructor,
        default_constructible=constructor is not None or _default_constructible(cls),
        fields=tuple(fields),
        setters=tuple(setters),
        resources=tuple(resources),
        post_construct=tuple(post_construct),
        pre_destroy=tuple(pre_destroy),
        config_prefix=config_prefix,
        config_fields=config_fields,
        factories=tuple(factories),
    )


def _split_annotation(hint: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if get_origin(hint) is Annotated:
        base, *metadata = get_args(hint)
        return base, tuple(metadata)
    return hint, ()


def _type_hints(obj: Any, owner: Type) -> Dict[str, Any]:
    try:
        return get_type_hints(obj, include_extras=True)
    except Exception as e:
        raise BeanCreationError(owner, f"Cannot evaluate type hints of {obj!r}: {e}") from e


def _own_methods(cls: Type) -> Dict[str, Callable]:
    """Plain functions of ``cls`` and its bases, subclass definitions winning."""
    methods: Dict[str, Callable] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for attr_name, member in vars(klass).items():
            if inspect.isfunction(member):
                methods[attr_name] = member
    return methods


def _parameters(owner: Type, func: Callable) -> List[InjectionPoint]:
    """Injection points of a method's parameters, ``self`` excluded."""
    signature = inspect.signature(func)
    hints = _type_hints(func, owner)
    points = []
    for param in list(signature.parameters.values())[1:]:
        # Skip *args and **kwargs parameters (VAR_POSITIONAL and VAR_KEYWORD)
        if param.kind in _VARIADIC:
            continue

        # Skip parameters with defaults (let them use default values)
        if param.default is not inspect.Parameter.empty:
            continue

        if param.name not in hints:
            raise BeanCreationError(
                owner,
                f"Parameter '{param.name}' of {func.__name__}() lacks type hint and has no default value.",
            )

        base, metadata = _split_annotation(hints[param.name])
        marker = next((m for m in metadata if isinstance(m, Inject)), Inject())
        points.append(InjectionPoint(attribute=param.name, target=base, name=marker.name, lazy=marker.lazy))
    return points


def _factory(owner: Type, method_name: str, func: Callable, declaration: Dict[str, Any]) -> FactoryMethod:
    return_hint = _type_hints(func, owner).get("return")
    provides = _split_annotation(return_hint)[0] if return_hint is not None else None
    return FactoryMethod(
        method=method_name,
        provides=provides,
        name=declaration.get("name"),
        parameters=tuple(_parameters(owner, func)),
    )


def _default_constructible(cls: Type) -> bool:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        return True
    return all(
        param.default is not inspect.Parameter.empty or param.kind in _VARIADIC
        for param in signature.parameters.values()
    )


def _abstract_bases(cls: Type) -> Tuple[Type, ...]:
    return tuple(
        base for base in cls.__bases__ if base not in _NOT_CAPABILITIES and isinstance(base, ABCMeta)
    )
