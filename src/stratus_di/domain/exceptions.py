from typing import Any, List, Optional


def _type_name(cls: Any) -> str:
    return getattr(cls, "__name__", repr(cls))


class DIException(Exception):
    """Base exception for DI-related errors."""


class CircularDependencyError(DIException):
    """Raised when a type reappears in the active resolution stack.

    Attributes:
        dependency_chain: List of types involved in the circular dependency.
    """

    def __init__(self, dependency_chain: List[Any]) -> None:
        self.dependency_chain = dependency_chain
        message = f"Circular dependency detected: {' -> '.join([_type_name(cls) for cls in dependency_chain])}"
        super().__init__(message)


class BeanCreationError(DIException):
    """Raised when a bean cannot be constructed or injected.

    This occurs when:
    - No constructor is marked for injection and no zero-argument constructor exists.
    - The constructor, a setter or a processor raises.
    - A field cannot be assigned.

    Attributes:
        cls: The component type that could not be built.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot create bean of type: {_type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ResourceMissingError(DIException):
    """Raised when a configuration key or bean name has no entry.

    Attributes:
        key: The missing configuration key or bean name.
    """

    def __init__(self, key: str, message: Optional[str] = None) -> None:
        self.key = key
        super().__init__(message or f"Missing resource key: {key}")


class RecursionDetectedError(DIException):
    """Raised when a thread re-enters a scope cell it is still creating.

    Attributes:
        cls: The component type whose cell was re-entered.
    """

    def __init__(self, cls: Any) -> None:
        self.cls = cls
        super().__init__(f"Recursive creation detected for {_type_name(cls)}")


class BindingError(DIException):
    """Raised when flat configuration cannot be bound onto a data holder.

    Attributes:
        cls: The configuration holder type.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Any, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Failed to bind config for {_type_name(cls)}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ScopeError(DIException):
    """Raised for an unknown scope tag."""
