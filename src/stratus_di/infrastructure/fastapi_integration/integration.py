from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Type, TypeVar

from fastapi import FastAPI

from stratus_di.domain import IContainer

T = TypeVar("T")


def create_fastapi_dependency(container: IContainer, dependency_type: Type[T]) -> Callable[[], T]:
    """Create a FastAPI Depends() callable that resolves from the DI container.

    This function generates a dependency function compatible with FastAPI's
    Depends() system. The resolved instance follows the component's declared
    scope (singleton, prototype, or thread).

    Args:
        container: The DI container to resolve dependencies from.
        dependency_type: The type to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = DIContainer.builder().scan("myapp.services").build()
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> T:
        """Resolve the dependency from the container."""
        return container.get(dependency_type)

    return dependency


def create_named_dependency(container: IContainer, name: str) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves a bean by alias.

    Example:
        >>> get_primary_db = create_named_dependency(container, "primaryDb")
        >>>
        >>> @app.get("/health")
        >>> def health(db=Depends(get_primary_db)):
        ...     return {"db": db.ping()}
    """

    def named_dependency() -> Any:
        """Resolve the named bean from the container."""
        return container.get_by_name(name)

    return named_dependency


def container_lifespan(container: IContainer) -> Callable[[FastAPI], Any]:
    """Build a FastAPI ``lifespan`` that shuts the container down on exit.

    Pre-destroy hooks of every managed bean run when the application stops.

    Example:
        >>> container = DIContainer.builder().scan("myapp").build()
        >>> app = FastAPI(lifespan=container_lifespan(container))
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        try:
            yield
        finally:
            container.shutdown()

    return lifespan
