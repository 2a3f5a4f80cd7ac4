"""
JSON payload for ChartView, shared by the chart route and the WebSocket feed.

Non-finite floats become null and datetimes ISO-8601 strings so the result
is safe for json.dumps (WebSocket.send_json does not run FastAPI encoders).
"""

import dataclasses
import math
from datetime import datetime
from typing import Any

from nexis_feed.application.services.chart_view import ChartView


def _json_safe(value: Any) -> Any:
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _json_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(v) for v in value]
    return value


def chart_view_payload(view: ChartView) -> dict[str, Any]:
    return _json_safe(dataclasses.asdict(view))
