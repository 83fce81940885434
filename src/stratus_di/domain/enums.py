from enum import Enum


class Scope(str, Enum):
    """Defines how many instances of a component exist and who shares them.

    Attributes:
        SINGLETON: Single instance shared across the whole process.
        PROTOTYPE: New instance created on each resolution.
        THREAD: Single instance per calling thread.
    """

    SINGLETON = "singleton"
    PROTOTYPE = "prototype"
    THREAD = "thread"

    def __str__(self) -> str:
        return self.value


class CellState(str, Enum):
    """State of a scope cache cell for one (scope, type) pair."""

    ABSENT = "absent"
    CREATING = "creating"
    PRESENT = "present"

    def __str__(self) -> str:
        return self.value


class ComponentKind(str, Enum):
    """Kind of declaration a descriptor was produced from."""

    COMPONENT = "component"
    CONFIGURATION = "configuration"

    def __str__(self) -> str:
        return self.value
