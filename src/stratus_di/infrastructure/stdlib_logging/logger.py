import logging
from typing import Any, Optional

from stratus_di.domain import ILogger

TRACE = 5
logging.addLevelName(TRACE, "TRACE")


class StdlibLogger(ILogger):
    """``ILogger`` backed by a standard library logger.

    ``trace`` maps to the custom ``TRACE`` level (below ``DEBUG``) and
    ``warn`` to ``WARNING``. Formatting is left to the logging framework, so
    arguments are only interpolated when the record is emitted.

    Example:
        >>> logging.basicConfig(level=TRACE)
        >>> container = DIContainer.builder().logger(StdlibLogger("app.di")).build()
    """

    def __init__(self, name: str = "stratus_di", logger: Optional[logging.Logger] = None) -> None:
        self._logger = logger or logging.getLogger(name)

    @property
    def name(self) -> str:
        return self._logger.name

    def trace(self, template: str, *args: Any) -> None:
        self._logger.log(TRACE, template, *args)

    def info(self, template: str, *args: Any) -> None:
        self._logger.info(template, *args)

    def warn(self, template: str, *args: Any) -> None:
        self._logger.warning(template, *args)

    def error(self, template: str, *args: Any) -> None:
        self._logger.error(template, *args)
