"""JSON formatting of fix snapshots for the monitor endpoints."""

import json
from typing import Any

from tracksense.gnss import Fix

__all__ = ["fix_to_dict", "format_fix_message"]


def fix_to_dict(fix: Fix) -> dict[str, Any]:
    """Map a fix onto the monitor's field names; unreported fields are None."""
    return {
        "utc_time": fix.time_utc,
        "lat": fix.latitude_deg,
        "lon": fix.longitude_deg,
        "alt": fix.altitude_m,
        "speed_ms": fix.speed_mps,
        "num_satellites": fix.satellites,
        "hdop": fix.hdop,
    }


def format_fix_message(fix: Fix) -> str:
    """Serialize a fix into a ``type="fix"`` WebSocket message."""
    return json.dumps({"type": "fix", **fix_to_dict(fix)})
