"""Report renderers: Rich tables for terminals, JSON for pipelines."""

from .base import BaseFormatter, PathResolver, lenient_path
from .json_formatter import JsonFormatter
from .rich_formatter import RichFormatter

_REGISTRY: dict[str, type[BaseFormatter]] = {
    "rich": RichFormatter,
    "json": JsonFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Instantiate the renderer registered under name.

    Raises:
        ValueError: For a name with no registered renderer
    """
    try:
        return _REGISTRY[name]()
    except KeyError:
        known = ", ".join(sorted(_REGISTRY))
        raise ValueError(f"No report renderer named {name!r} (known: {known})") from None


__all__ = [
    "BaseFormatter",
    "PathResolver",
    "RichFormatter",
    "JsonFormatter",
    "get_formatter",
    "lenient_path",
]
