"""
Project persistence adapter.

The whole project collection is stored as one JSON array under a single
key. Reads never raise: a missing, corrupt, or wrongly-shaped blob falls
back to the seed dataset. Writes never raise either; a failed write is
logged and the in-memory board stays authoritative.
"""
import json
import logging
from typing import List, Optional

from .schema import Item, ItemKind, Column, items_from_list
from .storage import KeyValueStorage, StorageUnavailable

logger = logging.getLogger(__name__)

STORAGE_KEY = "mission-control-projects"


def seed_projects() -> List[Item]:
    """Fresh copy of the demo dataset installed on first run."""
    project = Item(
        id="1",
        title="Mission Control Command Center",
        column=Column.DOING,
        kind=ItemKind.PROJECT,
        description="AI team dashboard with office view and project management",
    )
    project.tasks = [
        Item(id="t1", title="Fix navigation", column=Column.DONE),
        Item(id="t2", title="Build kanban board", column=Column.DOING),
        Item(id="t3", title="Add Team page", column=Column.BACKLOG),
        Item(id="t4", title="Office visual upgrades", column=Column.BACKLOG),
    ]
    return [project]


def dumps_projects(projects: List[Item]) -> str:
    return json.dumps([p.to_dict() for p in projects])


def loads_projects(blob: str) -> Optional[List[Item]]:
    """Parse a stored blob. None means the blob is unusable."""
    try:
        data = json.loads(blob)
    except (ValueError, TypeError, RecursionError) as e:
        logger.warning(f"Stored projects are not valid JSON: {e}")
        return None
    if not isinstance(data, list):
        logger.warning(f"Stored projects are a {type(data).__name__}, expected a list")
        return None
    return items_from_list(data, kind=ItemKind.PROJECT)


class ProjectPersistence:
    """Reads and writes the full project collection under one storage key."""

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        seed_on_first_run: bool = True,
    ):
        self.storage = storage
        self.key = key
        self.seed_on_first_run = seed_on_first_run

    def _seed(self) -> List[Item]:
        return seed_projects() if self.seed_on_first_run else []

    def load(self) -> List[Item]:
        """Load projects, installing (and persisting) the seed if nothing usable is stored."""
        try:
            blob = self.storage.get(self.key)
        except StorageUnavailable as e:
            logger.error(f"Cannot read projects, using seed data: {e}")
            return self._seed()

        if blob is not None:
            projects = loads_projects(blob)
            if projects is not None:
                logger.debug(f"Loaded {len(projects)} projects from {self.key!r}")
                return projects

        projects = self._seed()
        logger.info(f"No usable projects under {self.key!r}, installing seed dataset")
        self.save(projects)
        return projects

    def save(self, projects: List[Item]) -> bool:
        """Overwrite the stored blob with the full collection. Returns False on failure."""
        try:
            self.storage.set(self.key, dumps_projects(projects))
            return True
        except StorageUnavailable as e:
            logger.error(f"Failed to save {len(projects)} projects: {e}")
            return False
