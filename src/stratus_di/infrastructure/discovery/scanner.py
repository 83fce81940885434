import importlib
import inspect
import pkgutil
from types import ModuleType
from typing import Callable, Iterator, Optional, Sequence, Set, Type

from stratus_di.application.descriptors import describe_component, is_declared
from stratus_di.domain import ComponentDescriptor, IComponentDiscovery, ILogger
from stratus_di.infrastructure.stdlib_logging import StdlibLogger


class PackageScanner(IComponentDiscovery):
    """Discovers ``@component`` and ``@configuration`` classes in packages.

    Each package is imported together with every submodule beneath it.
    Only classes defined in the scanned module itself are collected, so a
    component re-exported from another module is reported once.

    Example:
        >>> scanner = PackageScanner()
        >>> descriptors = scanner.discover(["myapp.services"])
    """

    def __init__(
        self,
        logger: Optional[ILogger] = None,
        describer: Callable[[Type], ComponentDescriptor] = describe_component,
    ) -> None:
        self._log = logger or StdlibLogger()
        self._describer = describer

    def discover(self, packages: Sequence[str]) -> Set[ComponentDescriptor]:
        descriptors: Set[ComponentDescriptor] = set()
        for package_name in packages:
            for module in self._modules(package_name):
                for _, member in inspect.getmembers(module, inspect.isclass):
                    if member.__module__ == module.__name__ and is_declared(member):
                        descriptors.add(self._describer(member))
        return descriptors

    def _modules(self, package_name: str) -> Iterator[ModuleType]:
        try:
            package = importlib.import_module(package_name)
        except ImportError as e:
            self._log.warn("Cannot import package %s: %s", package_name, e)
            return

        yield package
        path = getattr(package, "__path__", None)
        if path is None:
            return

        def on_error(name: str) -> None:
            self._log.warn("Skipping package %s: import failed", name)

        for module_info in pkgutil.walk_packages(path, prefix=f"{package.__name__}.", onerror=on_error):
            try:
                yield importlib.import_module(module_info.name)
            except Exception as e:
                self._log.warn("Skipping module %s: %s", module_info.name, e)
