"""
Web server for browsing saved matches and stepping through their replays.
"""

import json
from pathlib import Path
from flask import Flask, jsonify, request

from .run_recorder import RunRecorder
from ..core.history import ReplayCursor


class ViewerServer:
    """JSON API over the saved match history."""

    def __init__(self, port: int = 5000, host: str = '127.0.0.1', runs_dir: str = "runs"):
        self.port = port
        self.host = host
        self.runs_dir = Path(runs_dir)
        self.run_recorder = RunRecorder(runs_dir=runs_dir)

        self.app = Flask(__name__)

        # Setup routes
        self._setup_routes()

    def _setup_routes(self):
        """Setup Flask routes."""
        @self.app.route('/')
        def index():
            return jsonify({
                "matches": "/api/matches",
                "replay_step": "/api/matches/<match_id>/replay/<step>",
            })

        @self.app.route('/api/matches')
        def list_matches():
            """List finished matches, newest first. `?all=1` adds matches still in progress."""
            runs = self.run_recorder.list_runs()
            if not request.args.get('all', 0, type=int):
                runs = [r for r in runs if not r["in_progress"]]
            return jsonify(runs)

        @self.app.route('/api/matches/<match_id>')
        def get_metadata(match_id: str):
            """Get metadata for a specific match."""
            metadata = self.run_recorder.load_metadata(match_id)
            if metadata is None:
                return jsonify({"error": "Match not found"}), 404
            return jsonify(metadata)

        @self.app.route('/api/matches/<match_id>/replay')
        def get_replay(match_id: str):
            """Log lines of the whole match."""
            try:
                entries = self.run_recorder.load_replay(match_id)
            except FileNotFoundError:
                return jsonify({"error": "Replay not found"}), 404
            return jsonify({
                "match_id": match_id,
                "steps": len(entries),
                "log": [e["text"] for e in entries],
            })

        @self.app.route('/api/matches/<match_id>/replay/<int:step>')
        def get_replay_step(match_id: str, step: int):
            """State at one step; steps past the end clamp to the final entry."""
            try:
                entries = self.run_recorder.load_replay(match_id)
            except FileNotFoundError:
                return jsonify({"error": "Replay not found"}), 404
            cursor = ReplayCursor(entries)
            entry = cursor.seek(step)
            if entry is None:
                return jsonify({"error": "Replay is empty"}), 404
            return jsonify({
                "match_id": match_id,
                "step": cursor.position,
                "steps": len(cursor),
                "text": entry["text"],
                "snapshot": entry["snapshot"],
                "log": cursor.visible_log(),
            })

        @self.app.route('/api/matches/<match_id>/events')
        def get_events(match_id: str):
            """Structured events, optionally from a position onward."""
            events_file = self.runs_dir / match_id / "events.jsonl"
            if not events_file.exists():
                return jsonify({"error": "Match not found"}), 404

            last_position = request.args.get('last_position', 0, type=int)
            events = []
            current_position = 0
            with open(events_file, 'r') as f:
                for line in f:
                    current_position += 1
                    if current_position > last_position and line.strip():
                        events.append(json.loads(line))

            return jsonify({
                "events": events,
                "position": current_position,
            })

    def start(self) -> None:
        """Start the web server."""
        print(f"\n{'='*60}")
        print(f"Starting viewer server on http://{self.host}:{self.port}")
        print(f"Runs directory: {self.runs_dir}")
        print(f"{'='*60}\n")
        self.app.run(host=self.host, port=self.port, debug=False, use_reloader=False)
