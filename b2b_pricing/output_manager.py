"""
Output Manager — Timestamped run folders and retention cleanup.

Each enrichment run writes into its own folder under the base output
directory, named YYYYMMDD_HHMM_{run_label} (e.g. "20261019_1430_B2B_Pricing").

Inside each folder the orchestrator saves:
  - enriched_records.json:   The records with b2b_pricing attached
  - enrichment_results.json: Run metadata, counts, per-record failures

Folders older than retention_days are removed at the start of a run, before
the new folder is created. retention_days=0 keeps everything.
"""

import json
import os
import re
import shutil
from datetime import datetime, timedelta
from typing import Any, Optional


FOLDER_PATTERN = re.compile(r"^(\d{8})_(\d{4})_.*$")


class OutputManager:
    """Creates the per-run output folder and prunes old ones.

    Attributes:
        base_dir: Root output directory (default: ./output).
        run_label: Suffix for folder names (sanitized to alphanumerics, "-" and "_").
        retention_days: Delete folders older than this many days (0 = keep forever).
        current_dir: This run's folder, or None until create_run_dir() is called.
    """

    def __init__(self, base_dir: str, run_label: str, retention_days: int = 30):
        self.base_dir = base_dir
        self.run_label = run_label
        self.retention_days = retention_days
        self.current_dir: Optional[str] = None
        self._started = datetime.now()

    def create_run_dir(self) -> str:
        """Create (if needed) and return this run's output folder."""
        label = "".join(c if c.isalnum() or c in "-_" else "_" for c in self.run_label)
        folder = f"{self._started.strftime('%Y%m%d_%H%M')}_{label}"
        self.current_dir = os.path.join(self.base_dir, folder)
        os.makedirs(self.current_dir, exist_ok=True)
        return self.current_dir

    def cleanup_old_folders(self, debug: bool = False) -> int:
        """Delete run folders whose timestamp is older than the retention window.

        Only folders matching the YYYYMMDD_HHMM_* naming are considered.

        Returns:
            The number of folders deleted.
        """
        if self.retention_days <= 0 or not os.path.isdir(self.base_dir):
            return 0

        cutoff = datetime.now() - timedelta(days=self.retention_days)
        deleted = 0

        for name in sorted(os.listdir(self.base_dir)):
            path = os.path.join(self.base_dir, name)
            match = FOLDER_PATTERN.match(name)
            if not match or not os.path.isdir(path):
                continue

            try:
                stamp = datetime.strptime(f"{match.group(1)}_{match.group(2)}", "%Y%m%d_%H%M")
                if stamp < cutoff:
                    shutil.rmtree(path)
                    deleted += 1
                    if debug:
                        print(f"  Deleted old output folder: {name}")
            except (ValueError, OSError) as e:
                if debug:
                    print(f"  Warning: Could not process folder {name}: {e}")

        return deleted

    def get_output_path(self, filename: str) -> str:
        """Full path of a file inside the current run folder.

        Raises:
            RuntimeError: If create_run_dir() has not been called yet.
        """
        if not self.current_dir:
            raise RuntimeError("Output directory not created. Call create_run_dir() first.")
        return os.path.join(self.current_dir, filename)

    def write_json(self, filename: str, payload: Any) -> str:
        """Serialize payload into the current run folder and return its path."""
        path = self.get_output_path(filename)
        with open(path, "w") as f:
            json.dump(payload, f, indent=2, default=str)
        return path
