"""Base formatter interface for report rendering."""

from abc import ABC, abstractmethod
from typing import Callable

from ..models import AnalysisReport

# Maps an asset identity to the path shown to the user
PathResolver = Callable[[str], str]


def lenient_path(display_path: PathResolver) -> PathResolver:
    """Wrap a resolver so unknown identities render as themselves."""

    def resolve(asset_id: str) -> str:
        try:
            return display_path(asset_id)
        except LookupError:
            return asset_id

    return resolve


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, report: AnalysisReport, display_path: PathResolver) -> None:
        """Render the report to stdout."""

    @abstractmethod
    def format(self, report: AnalysisReport, display_path: PathResolver) -> str:
        """Return formatted string representation of the report."""
