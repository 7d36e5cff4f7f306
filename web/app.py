"""
Todo Digest - Web Interface

A small Flask app over the shared StateStore: a todo list driven by htmx
fragments, plus weather and image cards and a few JSON endpoints.

Run with: python main.py
Or: python -m web.app (no scheduler)
"""

import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from flask import Flask, render_template, request, jsonify

from src.config import DEBUG, WEB_HOST, WEB_PORT
from src.scheduler import DigestScheduler
from src.store import StateStore, TodoValidationError

logger = logging.getLogger(__name__)

app = Flask(__name__)


# =============================================================================
# Shared State
# =============================================================================

# Process-wide store; main.py replaces it via init_app() before serving
store = StateStore()

# Set by init_app() when a scheduler is running in this process
_scheduler: Optional[DigestScheduler] = None


def init_app(state_store: StateStore, scheduler: DigestScheduler = None) -> Flask:
    """Bind the app to a store (and optionally a scheduler)."""
    global store, _scheduler
    store = state_store
    _scheduler = scheduler
    return app


def _render_todo_list(todos):
    return render_template("_todo_list.html", todos=todos)


# =============================================================================
# Pages and Fragments
# =============================================================================

@app.route("/")
def index():
    """Main page: todos, weather, image."""
    state = store.read()
    return render_template(
        "index.html",
        todos=state.todos,
        weather=state.weather,
        image=state.image,
    )


@app.route("/todos", methods=["POST"])
def add_todo():
    """Add a todo from form field "text"; returns the list fragment."""
    text = request.form.get("text", "")

    try:
        _, todos = store.add_todo_and_list(text)
    except TodoValidationError:
        return "Missing todo text", 400

    return _render_todo_list(todos)


@app.route("/todos/toggle/<int:todo_id>", methods=["POST"])
def toggle_todo(todo_id):
    """Toggle a todo; unknown ids leave the list unchanged."""
    return _render_todo_list(store.toggle_todo(todo_id))


@app.route("/todos/<int:todo_id>", methods=["DELETE"])
def delete_todo(todo_id):
    """Delete a todo; unknown ids leave the list unchanged."""
    return _render_todo_list(store.delete_todo(todo_id))


# =============================================================================
# JSON API
# =============================================================================

@app.route("/api/state")
def api_state():
    """Current state snapshot as JSON."""
    return jsonify(store.read().to_dict())


@app.route("/api/scheduler/status")
def api_scheduler_status():
    """Scheduler state machine status."""
    if _scheduler is None:
        return jsonify({"error": "Scheduler not running"}), 503
    return jsonify(_scheduler.status().to_dict())


@app.route("/api/digest/send", methods=["POST"])
def api_digest_send():
    """Trigger a digest run in the background."""
    if _scheduler is None:
        return jsonify({"error": "Scheduler not running"}), 503

    if not _scheduler.trigger_in_background("manual"):
        return jsonify({
            "success": False,
            "error": "Digest is already running",
            "status": _scheduler.status().to_dict(),
        }), 409

    return jsonify({
        "success": True,
        "message": "Digest started",
    })


@app.template_filter("temperature")
def temperature(value):
    """Format a temperature for display."""
    if value is None:
        return "n/a"
    return f"{value:.1f}°C"


if __name__ == "__main__":
    print("=" * 50)
    print("Todo Digest (web only, no scheduler)")
    print("=" * 50)
    print(f"Open http://{WEB_HOST}:{WEB_PORT} in your browser")
    print("Press Ctrl+C to stop")
    print("=" * 50)
    app.run(debug=DEBUG, host=WEB_HOST, port=WEB_PORT, threaded=True)
