import pydoc
from pathlib import Path
from typing import Callable, Iterable, Optional, Sequence, Set, Type, Union

from stratus_di.application.descriptors import describe_component, is_declared
from stratus_di.domain import ComponentDescriptor, ILogger, IMetadataCache
from stratus_di.infrastructure.stdlib_logging import StdlibLogger

DEFAULT_CACHE_PATH = ".stratus.cache"


class FileMetadataCache(IMetadataCache):
    """Stores component identities in a text file, one per line.

    Both operations are best-effort: I/O failures are logged and the cache
    behaves as empty.

    Attributes:
        path: Location of the cache file.
    """

    def __init__(
        self,
        path: Union[str, Path] = DEFAULT_CACHE_PATH,
        logger: Optional[ILogger] = None,
        describer: Callable[[Type], ComponentDescriptor] = describe_component,
    ) -> None:
        self.path = Path(path)
        self._log = logger or StdlibLogger()
        self._describer = describer

    def save(self, descriptors: Iterable[ComponentDescriptor]) -> None:
        identities = sorted({descriptor.identity for descriptor in descriptors})
        if not identities:
            return
        try:
            self.path.write_text("".join(f"{identity}\n" for identity in identities), encoding="utf-8")
        except OSError as e:
            self._log.error("Failed to write metadata cache %s: %s", self.path, e)

    def load(self, packages: Sequence[str]) -> Set[ComponentDescriptor]:
        """Reload cached components whose identity starts with any package filter.

        Blank filters are ignored; with no filter every entry is kept.
        Entries that no longer import, or are no longer declared, are skipped.
        """
        filters = [package.strip() for package in packages or () if package and package.strip()]
        try:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        except FileNotFoundError:
            return set()
        except OSError as e:
            self._log.error("Failed to read metadata cache %s: %s", self.path, e)
            return set()

        descriptors: Set[ComponentDescriptor] = set()
        for line in lines:
            identity = line.strip()
            if not identity:
                continue
            if filters and not any(identity.startswith(prefix) for prefix in filters):
                continue
            try:
                cls = pydoc.locate(identity)
            except pydoc.ErrorDuringImport as e:
                self._log.warn("Skipping cached component %s: %s", identity, e)
                continue
            if not is_declared(cls):
                self._log.trace("Skipping stale cache entry %s", identity)
                continue
            descriptors.add(self._describer(cls))
        return descriptors
