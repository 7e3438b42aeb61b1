"""
Run recorder that saves game events and finished match history to files.

Layout of one run:

    runs/<match_id>/events.jsonl   structured events, appended as they happen
    runs/<match_id>/replay.jsonl   one {text, snapshot} record per log entry, written at game over
    runs/<match_id>/metadata.json  players, winner, seed, timestamps
"""

import json
import shutil
from datetime import datetime
from pathlib import Path
from typing import Dict, Any, Optional, List, Iterable
from threading import Lock


class RunRecorder:
    """Records game events to files in a run directory."""

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.runs_dir.mkdir(parents=True, exist_ok=True)
        self.current_run_dir: Optional[Path] = None
        self.events_file: Optional[Path] = None
        self.metadata_file: Optional[Path] = None
        self.replay_file: Optional[Path] = None
        self._lock = Lock()
        self._event_count = 0

    def create_run(self, run_name: Optional[str] = None) -> str:
        """
        Create a new run directory.

        Args:
            run_name: Optional custom run name, usually the match id. If None, generates timestamp-based name.

        Returns:
            The run name (directory name)
        """
        if run_name is None:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            run_name = f"run_{timestamp}"

        self.current_run_dir = self.runs_dir / run_name
        self.current_run_dir.mkdir(exist_ok=True)

        self.events_file = self.current_run_dir / "events.jsonl"
        self.metadata_file = self.current_run_dir / "metadata.json"
        self.replay_file = self.current_run_dir / "replay.jsonl"
        self._event_count = 0

        return run_name

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """
        Record an event to the events file (JSONL format).

        Args:
            event_type: Type of event
            data: Event data
        """
        if not self.events_file:
            return

        with self._lock:
            self._ensure_run_dir()
            event = {
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "data": data,
                "sequence": self._event_count
            }
            self._event_count += 1

            with open(self.events_file, 'a') as f:
                f.write(json.dumps(event) + '\n')

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        """
        Save run metadata to metadata.json.

        Args:
            metadata: Metadata dictionary
        """
        if not self.metadata_file:
            return

        with self._lock:
            self._ensure_run_dir()
            with open(self.metadata_file, 'w') as f:
                json.dump(metadata, f, indent=2)

    def save_replay(self, entries: Iterable[Dict[str, Any]]) -> None:
        """
        Write the finished match log, one {text, snapshot} record per line, in order.

        Args:
            entries: Serialized log entries
        """
        if not self.replay_file:
            return

        with self._lock:
            self._ensure_run_dir()
            with open(self.replay_file, 'w') as f:
                for entry in entries:
                    f.write(json.dumps({"text": entry["text"], "snapshot": entry["snapshot"]}) + '\n')

    def _ensure_run_dir(self) -> None:
        """Recreate the run directory if something removed it mid-match."""
        self.current_run_dir.mkdir(parents=True, exist_ok=True)

    def get_run_path(self) -> Optional[Path]:
        """Get the current run directory path."""
        return self.current_run_dir

    def prune(self, max_runs: int) -> List[str]:
        """
        Delete the oldest finished runs beyond `max_runs`.
        Runs without a replay are still being played and are never deleted.

        Returns:
            Names of the deleted runs
        """
        finished = [
            d for d in self.runs_dir.iterdir()
            if d.is_dir() and (d / "replay.jsonl").exists() and d != self.current_run_dir
        ]
        # The current run always survives
        keep = max_runs - 1 if self.current_run_dir is not None else max_runs
        finished.sort(key=lambda d: d.stat().st_mtime, reverse=True)
        removed = []
        for run_dir in finished[max(keep, 0):]:
            shutil.rmtree(run_dir)
            removed.append(run_dir.name)
        return removed

    def load_metadata(self, run_name: str) -> Optional[Dict[str, Any]]:
        metadata_file = self.runs_dir / run_name / "metadata.json"
        if not metadata_file.exists():
            return None
        with open(metadata_file, 'r') as f:
            return json.load(f)

    def load_replay(self, run_name: str) -> List[Dict[str, Any]]:
        """
        Load a saved replay.

        Raises:
            FileNotFoundError: the run has no replay
        """
        replay_file = self.runs_dir / run_name / "replay.jsonl"
        if not replay_file.exists():
            raise FileNotFoundError(f"No replay for run: {run_name}")
        entries = []
        with open(replay_file, 'r') as f:
            for line in f:
                if line.strip():
                    entries.append(json.loads(line))
        return entries

    def list_runs(self) -> List[Dict[str, Any]]:
        """
        List all available runs, newest first.

        Returns:
            List of run info dictionaries
        """
        runs = []
        if not self.runs_dir.exists():
            return runs

        run_dirs = [d for d in self.runs_dir.iterdir() if d.is_dir()]
        run_dirs.sort(key=lambda d: d.stat().st_mtime, reverse=True)
        for run_dir in run_dirs:
            metadata_file = run_dir / "metadata.json"
            replay_file = run_dir / "replay.jsonl"

            run_info = {
                "name": run_dir.name,
                "path": str(run_dir),
                "has_metadata": metadata_file.exists(),
                "has_replay": replay_file.exists(),
                "in_progress": not replay_file.exists(),
            }

            if metadata_file.exists():
                try:
                    with open(metadata_file, 'r') as f:
                        metadata = json.load(f)
                    run_info["metadata"] = metadata
                    if metadata.get("winner"):
                        run_info["game_outcome"] = f"{metadata['winner']} wins"
                except (OSError, json.JSONDecodeError):
                    run_info["has_metadata"] = False

            if replay_file.exists():
                with open(replay_file, 'r') as f:
                    run_info["step_count"] = sum(1 for line in f if line.strip())

            runs.append(run_info)

        return runs
