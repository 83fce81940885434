import types
from typing import Any, Mapping, Union, get_args, get_origin

from stratus_di.domain import BindingError, ComponentDescriptor, IPropertyBinder, ResourceMissingError

_MISSING = object()
_ZERO_VALUES = {int: 0, float: 0.0, bool: False}
_UNION_ORIGINS = (Union, getattr(types, "UnionType", Union))


def coerce_value(value_type: Any, raw: str) -> Any:
    """Convert a raw configuration string to ``value_type``.

    ``bool`` is true only for ``"true"`` (case-insensitive). ``Optional[X]``
    coerces as ``X``. Unrecognized types receive the raw string.

    Raises:
        ValueError: If the string is not a valid literal of ``value_type``.
    """
    if get_origin(value_type) in _UNION_ORIGINS:
        members = [arg for arg in get_args(value_type) if arg is not type(None)]
        if len(members) == 1:
            value_type = members[0]
    if value_type is str:
        return raw
    if value_type is bool:
        return raw.strip().lower() == "true"
    if value_type is int:
        return int(raw.strip())
    if value_type is float:
        return float(raw.strip())
    return raw


class PropertyBinder(IPropertyBinder):
    """Populates configuration holders from a flat string map.

    Example:
        >>> @config_properties("db")
        ... class DbConfig:
        ...     url: str
        ...     port: int = 5432
        >>> binder = PropertyBinder()
        >>> config = binder.bind(describe_component(DbConfig), {"db.url": "jdbc:x", "db.port": "6543"})
        >>> (config.url, config.port)
        ('jdbc:x', 6543)
    """

    def bind(self, descriptor: ComponentDescriptor, config: Mapping[str, str]) -> Any:
        """Instantiate the holder and assign every configured field.

        Fields without a key keep their class default. When the class
        declares none they get the zero value of their type: ``0``, ``0.0``
        or ``False`` for numbers and flags, ``None`` for everything else
        (strings and ``Optional`` fields included).

        Args:
            descriptor: Descriptor carrying the prefix and the declared fields.
            config: Flat configuration.

        Returns:
            The populated holder.

        Raises:
            BindingError: If construction or coercion fails.
        """
        holder_type = descriptor.component_type
        try:
            instance = holder_type()
            for config_field in descriptor.config_fields:
                key = f"{descriptor.config_prefix}.{config_field.name}"
                raw = config.get(key, _MISSING)
                if raw is not _MISSING:
                    setattr(instance, config_field.name, coerce_value(config_field.value_type, raw))
                elif not hasattr(instance, config_field.name):
                    setattr(instance, config_field.name, _ZERO_VALUES.get(config_field.value_type))
            return instance
        except Exception as e:
            raise BindingError(holder_type, str(e)) from e


def lookup_resource(config: Mapping[str, str], key: str) -> str:
    """Return ``config[key]``.

    Raises:
        ResourceMissingError: If the key is absent.
    """
    raw = config.get(key, _MISSING)
    if raw is _MISSING:
        raise ResourceMissingError(key, f"Missing resource key: {key}")
    return raw
