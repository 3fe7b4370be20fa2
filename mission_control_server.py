#!/usr/bin/env python3
"""
Mission Control Server
----------------------
Serves the dashboard navigation shell and a JSON API over the Kanban
board store. State lives in a local SQLite key/value file.

Usage:
    python mission_control_server.py
    python mission_control_server.py --port 3000 --db ~/board.db
    python mission_control_server.py --config config.yaml

Access:
    Local:  http://localhost:3000

API:
    GET  /api/nav                    → JSON: { routes }
    GET  /api/board?scope=...        → JSON: { scope, title, columns }
    POST /api/projects               → JSON body: { title, description?, techStack?, repoUrl? }
    POST /api/projects/<id>/tasks    → JSON body: { title }
    GET  /api/projects/<id>/progress → JSON: { progress }
    POST /api/items/move             → JSON body: { scope, id, column }
    POST /api/items/update           → JSON body: { scope, id, title?, description?, ... }
    POST /api/items/delete           → JSON body: { scope, id }
    POST /api/select                 → JSON body: { projectId | null }
    GET  /api/office                 → JSON: { agents, statusCounts }
    POST /api/office/all-working     → everyone back to work
    POST /api/office/gather          → everyone walks to the conference area
"""

import logging
import os
import sys
import threading
from functools import wraps

from flask import Blueprint, Flask, current_app, jsonify, request

from mission_control import (
    BoardStore,
    BoardView,
    Config,
    InvalidScope,
    KeyValueStorage,
    Office,
    ProjectPersistence,
)

logger = logging.getLogger("mission_control_server")

# ── Navigation ───────────────────────────────────────────────────────────────

NAV_ROUTES = [
    {"name": "Tasks",     "path": "/tasks",     "implemented": False},
    {"name": "Content",   "path": "/content",   "implemented": False},
    {"name": "Approvals", "path": "/approvals", "implemented": False},
    {"name": "Council",   "path": "/council",   "implemented": False},
    {"name": "Calendar",  "path": "/calendar",  "implemented": False},
    {"name": "Projects",  "path": "/projects",  "implemented": True},
    {"name": "Memory",    "path": "/memory",    "implemented": False},
    {"name": "Docs",      "path": "/docs",      "implemented": False},
    {"name": "People",    "path": "/people",    "implemented": False},
    {"name": "Office",    "path": "/",          "implemented": True},
    {"name": "Team",      "path": "/team",      "implemented": False},
]

PLACEHOLDER_PAGES = {r["path"].strip("/"): r["name"] for r in NAV_ROUTES if not r["implemented"]}

bp = Blueprint("mission_control", __name__)


# ── Board access ─────────────────────────────────────────────────────────────

def _board() -> BoardStore:
    return current_app.config["BOARD"]


def _office() -> Office:
    return current_app.config["OFFICE"]


def locked(f):
    """Decorator: serialize board access so each request is one discrete action."""
    @wraps(f)
    def decorated(*args, **kwargs):
        with current_app.config["BOARD_LOCK"]:
            return f(*args, **kwargs)
    return decorated


def _body() -> dict:
    data = request.get_json(force=True, silent=True)
    return data if isinstance(data, dict) else {}


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


# ── Pages ────────────────────────────────────────────────────────────────────

@bp.route("/")
@locked
def index():
    return jsonify({
        "app": "Mission Control",
        "page": "Office",
        "routes": NAV_ROUTES,
        "office": _office().to_dict(),
    })


@bp.route("/projects")
@locked
def projects_page():
    board = _board()
    view = BoardView.build(board)
    return jsonify({"page": "Projects", "implemented": True, "board": view.to_dict()})


@bp.route("/<page>")
def placeholder_page(page):
    if page not in PLACEHOLDER_PAGES:
        return jsonify({"error": f"Unknown page: {page}"}), 404
    return jsonify({"page": PLACEHOLDER_PAGES[page], "implemented": False})


# ── API ──────────────────────────────────────────────────────────────────────

@bp.route("/api/nav")
def api_nav():
    return jsonify({"routes": NAV_ROUTES})


@bp.route("/api/board")
@locked
def api_board():
    try:
        view = BoardView.build(_board(), request.args.get("scope"))
    except InvalidScope as e:
        return jsonify({"error": str(e)}), 400
    if view is None:
        return jsonify({"error": "Scope not found"}), 404
    return jsonify(view.to_dict())


@bp.route("/api/projects", methods=["POST"])
@locked
def api_create_project():
    data = _body()
    project = _board().create_project(
        _text(data, "title"),
        description=data.get("description"),
        tech_stack=data.get("techStack"),
        repo_url=data.get("repoUrl"),
    )
    if project is None:
        return jsonify({"created": False})
    return jsonify({"created": True, "project": project.to_dict()}), 201


@bp.route("/api/projects/<project_id>/tasks", methods=["POST"])
@locked
def api_create_task(project_id):
    data = _body()
    task = _board().create_task(project_id, _text(data, "title"))
    if task is None:
        return jsonify({"created": False})
    return jsonify({"created": True, "task": task.to_dict()}), 201


@bp.route("/api/projects/<project_id>/progress")
@locked
def api_progress(project_id):
    board = _board()
    project = board.get_project(project_id)
    if project is None:
        return jsonify({"error": "Project not found"}), 404
    return jsonify({"id": project.id, "progress": board.progress(project)})


@bp.route("/api/items/move", methods=["POST"])
@locked
def api_move_item():
    data = _body()
    moved = _board().move_item(data.get("scope"), _text(data, "id"), data.get("column"))
    return jsonify({"moved": moved})


@bp.route("/api/items/update", methods=["POST"])
@locked
def api_update_item():
    data = _body()
    edits = {}
    for key, field_name in (("title", "title"), ("description", "description"),
                            ("techStack", "tech_stack"), ("repoUrl", "repo_url")):
        if key in data:
            edits[field_name] = data[key]
    updated = _board().update_item(data.get("scope"), _text(data, "id"), **edits)
    return jsonify({"updated": updated})


@bp.route("/api/items/delete", methods=["POST"])
@locked
def api_delete_item():
    data = _body()
    deleted = _board().delete_item(data.get("scope"), _text(data, "id"))
    return jsonify({"deleted": deleted})


@bp.route("/api/select", methods=["POST"])
@locked
def api_select():
    data = _body()
    project_id = data.get("projectId")
    scope = _board().select_project(None if project_id is None else str(project_id))
    return jsonify({"selected": _board().selected_project_id, "scope": str(scope)})


@bp.route("/api/office")
@locked
def api_office():
    return jsonify(_office().to_dict())


@bp.route("/api/office/all-working", methods=["POST"])
@locked
def api_office_all_working():
    _office().all_working()
    return jsonify(_office().to_dict())


@bp.route("/api/office/gather", methods=["POST"])
@locked
def api_office_gather():
    _office().gather()
    return jsonify(_office().to_dict())


@bp.route("/health")
def health():
    return jsonify({"status": "ok", "db": current_app.config["DB_PATH"]})


# ── App factory ──────────────────────────────────────────────────────────────

def create_app(cfg: Config = None) -> Flask:
    """Build the Flask app with a loaded board store."""
    if cfg is None:
        cfg = Config.load(os.environ.get("MISSION_CONTROL_CONFIG"))
        env_db = os.environ.get("MISSION_CONTROL_DB")
        if env_db:
            cfg.db_path = env_db
            cfg.resolve_paths()

    persistence = ProjectPersistence(
        KeyValueStorage(cfg.db_path),
        key=cfg.storage_key,
        seed_on_first_run=cfg.seed_on_first_run,
    )
    board = BoardStore(persistence).load()

    app = Flask(__name__)
    app.config["BOARD"] = board
    app.config["BOARD_LOCK"] = threading.Lock()
    app.config["OFFICE"] = Office()
    app.config["DB_PATH"] = cfg.db_path
    app.register_blueprint(bp)
    logger.info(f"Board loaded: {len(board.projects)} projects from {cfg.db_path}")
    return app


# ── Main ─────────────────────────────────────────────────────────────────────

def main(argv=None):
    import argparse

    parser = argparse.ArgumentParser(description="Mission Control Server")
    parser.add_argument("--config", help="Path to config.yaml (overrides MISSION_CONTROL_CONFIG)")
    parser.add_argument("--host", help="Bind address (default from config: 127.0.0.1)")
    parser.add_argument("--port", type=int)
    parser.add_argument("--db", help="Path to board.db (overrides MISSION_CONTROL_DB)")
    args = parser.parse_args(argv)

    cfg = Config.load(args.config or os.environ.get("MISSION_CONTROL_CONFIG"))
    db = args.db or os.environ.get("MISSION_CONTROL_DB")
    if db:
        cfg.db_path = db
    if args.host:
        cfg.host = args.host
    if args.port:
        cfg.port = args.port
    cfg.validate()
    cfg.resolve_paths()

    logging.basicConfig(
        level=cfg.logging_level,
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    app = create_app(cfg)

    print(f"""
╔═══════════════════════════════════════╗
║  Mission Control                      ║
╠═══════════════════════════════════════╣
║  URL:  http://{cfg.host}:{cfg.port:<20}║
║  DB:   {cfg.db_path:<31}║
╚═══════════════════════════════════════╝
""")

    app.run(host=cfg.host, port=cfg.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
