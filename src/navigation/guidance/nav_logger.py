# nav_logger.py
# Handles session file I/O for the navigation system.
# Appends ETA snapshots and rejected route selections as JSON lines.

import json
import os
import logging
from datetime import datetime
from typing import Optional

from .models import EtaSnapshot, LocationFix
from .nav_config import NavConfig
from .route_catalog import SelectionResult

# Standard Python logger — configure at app entry point if needed
logger = logging.getLogger(__name__)


class NavLogger:
    """
    Persists navigation events to a JSONL session file.

    Args:
        config: NavConfig instance for file paths and directories.
    """

    def __init__(self, config: Optional[NavConfig] = None) -> None:
        self.config = config or NavConfig()
        os.makedirs(self.config.log_dir, exist_ok=True)

    def _append(self, entry: dict) -> None:
        entry = {"logged_at": datetime.now().isoformat(), **entry}
        try:
            with open(self.config.session_filepath, "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False) + "\n")
        except IOError as e:
            logger.error(f"Failed to write event log: {e}")

    def log_snapshot(self, snapshot: EtaSnapshot, fix: Optional[LocationFix] = None,
                     announced: Optional[str] = None) -> None:
        """
        Append one ETA cycle.

        Args:
            snapshot:  The snapshot produced this cycle.
            fix:       Position it was computed from.
            announced: Spoken text, if the cycle produced an announcement.
        """
        entry = {"event": "eta", **snapshot.to_dict()}
        if fix is not None:
            entry["lat"] = fix.lat
            entry["lon"] = fix.lon
            entry["speed_mps"] = fix.speed_mps
        if announced:
            entry["announcement"] = announced
        self._append(entry)

    def log_rejection(self, result: SelectionResult) -> None:
        """Append a rejected route selection with its reason."""
        self._append({
            "event": "route_selection_rejected",
            "index": repr(result.index),
            "reason": result.reason.value if result.reason else None,
            "message": result.message,
        })
