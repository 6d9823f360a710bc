import functools
import inspect
from typing import Any, Callable

from fastapi import Depends

from alias_ioc.domain import IContainer


def create_fastapi_dependency(container: IContainer, alias: str) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves an alias.

    Whether endpoints share an instance follows the alias registration.

    Args:
        container: The container to resolve from.
        alias: The alias to resolve when the dependency is called.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = Container()
        >>> container.register("users", UserRepository, shared=True)
        >>>
        >>> get_users = create_fastapi_dependency(container, "users")
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_users)):
        ...     return await repo.get_all()
    """

    def dependency() -> Any:
        return container.resolve(alias)

    dependency.__name__ = f"resolve_{alias.replace('.', '_')}"
    return dependency


def inject_dependencies(container: IContainer, **aliases: str) -> Callable:
    """Decorator injecting resolved aliases into an async endpoint's keyword arguments.

    The injected parameters are exposed to FastAPI as keyword-only
    ``Depends()`` parameters; when the endpoint is called directly, missing
    ones are resolved from the container and supplied ones are left untouched.

    Args:
        container: The container to resolve from.
        **aliases: Parameter name -> alias to resolve for it.

    Returns:
        A decorator function.

    Example:
        >>> @app.get("/users")
        >>> @inject_dependencies(container, service="users.service")
        >>> async def list_users(service):
        ...     return await service.get_all()
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)
        dependencies = {name: Depends(create_fastapi_dependency(container, alias)) for name, alias in aliases.items()}

        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            for param_name, dependency in dependencies.items():
                if param_name not in kwargs:
                    kwargs[param_name] = dependency.dependency()

            return await func(*args, **kwargs)

        kept = [param for name, param in signature.parameters.items() if name not in aliases]
        var_keyword = [param for param in kept if param.kind is inspect.Parameter.VAR_KEYWORD]
        injected = [
            inspect.Parameter(name, inspect.Parameter.KEYWORD_ONLY, default=dependency)
            for name, dependency in dependencies.items()
        ]
        wrapper.__signature__ = signature.replace(
            parameters=[param for param in kept if param not in var_keyword] + injected + var_keyword
        )
        return wrapper

    return decorator
