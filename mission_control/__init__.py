# Mission Control: per-project Kanban board with durable local state
#
# Components:
#   schema.py      - Data model (Item, Column, ItemKind, Scope)
#   storage.py     - SQLite key/value store
#   persistence.py - Whole-collection JSON load/save with seed fallback
#   board.py       - BoardStore: mutations, selection, progress
#   view.py        - Read-only column projection (BoardView)
#   office.py      - Simulated team roster for the Office page
#   config.py      - YAML configuration

from .schema import Item, Column, ItemKind, Scope, InvalidScope
from .storage import KeyValueStorage, StorageUnavailable
from .persistence import ProjectPersistence, STORAGE_KEY, seed_projects
from .board import BoardStore, progress
from .view import BoardView, project_columns
from .office import Office, Agent, AgentStatus
from .config import Config, ConfigError

__all__ = [
    "Item", "Column", "ItemKind", "Scope", "InvalidScope",
    "KeyValueStorage", "StorageUnavailable",
    "ProjectPersistence", "STORAGE_KEY", "seed_projects",
    "BoardStore", "progress",
    "BoardView", "project_columns",
    "Office", "Agent", "AgentStatus",
    "Config", "ConfigError",
]
