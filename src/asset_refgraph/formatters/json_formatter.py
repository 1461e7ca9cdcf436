"""JSON formatter for Asset RefGraph."""

import json

from ..models import AnalysisReport
from .base import BaseFormatter, PathResolver, lenient_path


class JsonFormatter(BaseFormatter):
    """Render reports as JSON."""

    def render(self, report: AnalysisReport, display_path: PathResolver) -> None:
        print(self.format(report, display_path))

    def format(self, report: AnalysisReport, display_path: PathResolver) -> str:
        display_path = lenient_path(display_path)
        data = {
            "timestamp": report.timestamp.isoformat(),
            "scanned_count": report.scanned_count,
            "total_count": report.total_count,
            "edge_count": report.edge_count,
            "warning_count": report.warning_count,
            "most_referenced": [
                {"id": asset_id, "path": display_path(asset_id), "references": count}
                for asset_id, count in report.most_referenced
            ],
            "orphaned": [
                {"id": asset_id, "path": display_path(asset_id)} for asset_id in report.orphaned
            ],
            "cycles": [list(pair) for pair in report.cycles],
            "cycle_groups": [list(group) for group in report.cycle_groups],
            "warnings": [{"id": w.asset_id, "reason": w.reason} for w in report.warnings],
        }
        return json.dumps(data, indent=2)
