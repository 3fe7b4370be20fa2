"""
Board store: the authoritative in-memory project/task state.

Every successful mutation writes the full collection through the
persistence adapter. Invalid input (blank title, unknown id, unknown
scope, unknown column) is a silent no-op.
"""
import logging
from typing import List, Optional, Any

from .schema import Item, Column, Scope, InvalidScope, TERMINAL_COLUMN, make_item_id
from .persistence import ProjectPersistence

logger = logging.getLogger(__name__)

EDITABLE_PROJECT_FIELDS = ("description", "tech_stack", "repo_url")


def progress(project: Item) -> int:
    """Percentage of the project's tasks in the terminal column, 0 when it has none."""
    if not project.tasks:
        return 0
    done = sum(1 for t in project.tasks if t.column is TERMINAL_COLUMN)
    # Half rounds up, so 1 of 8 done reads as 13%
    return int(100 * done / len(project.tasks) + 0.5)


class BoardStore:
    """Owns the project list and the current selection."""

    def __init__(self, persistence: ProjectPersistence):
        self.persistence = persistence
        self.projects: List[Item] = []
        self.selected_project_id: Optional[str] = None

    def load(self) -> "BoardStore":
        """Seed in-memory state from persistence. Call once at startup."""
        self.projects = self.persistence.load()
        self.selected_project_id = None
        return self

    def _persist(self) -> None:
        # A failed save leaves memory as the source of truth until the next write
        self.persistence.save(self.projects)

    # ── Lookups ──────────────────────────────────────────────────────────

    def get_project(self, project_id: Optional[str]) -> Optional[Item]:
        if project_id is None:
            return None
        for project in self.projects:
            if project.id == project_id:
                return project
        return None

    @property
    def current_project(self) -> Optional[Item]:
        return self.get_project(self.selected_project_id)

    @property
    def active_scope(self) -> Scope:
        if self.current_project is None:
            return Scope.project_list()
        return Scope.for_project(self.selected_project_id)

    def items_in(self, scope: Any) -> Optional[List[Item]]:
        """The live collection a scope refers to, or None if it does not resolve."""
        try:
            scope = Scope.parse(scope)
        except InvalidScope:
            return None
        if scope.is_project_list:
            return self.projects
        project = self.get_project(scope.project_id)
        return project.tasks if project is not None else None

    def _find(self, scope: Any, item_id: str) -> Optional[Item]:
        items = self.items_in(scope)
        if items is None:
            return None
        for item in items:
            if item.id == item_id:
                return item
        return None

    # ── Mutations ────────────────────────────────────────────────────────

    def create_project(
        self,
        title: Optional[str],
        description: Optional[str] = None,
        tech_stack: Optional[str] = None,
        repo_url: Optional[str] = None,
    ) -> Optional[Item]:
        """Append a project to the backlog. Blank title is a no-op."""
        title = (title or "").strip()
        if not title:
            return None
        project = Item.new_project(
            make_item_id(p.id for p in self.projects),
            title,
            description=description,
            tech_stack=tech_stack,
            repo_url=repo_url,
        )
        self.projects.append(project)
        logger.info(f"Created project {project.id}: {title}")
        self._persist()
        return project

    def create_task(self, project_id: str, title: Optional[str]) -> Optional[Item]:
        """Append a task to a project's backlog. Blank title or unknown project is a no-op."""
        title = (title or "").strip()
        project = self.get_project(project_id)
        if not title or project is None:
            return None
        task = Item.new_task(make_item_id(t.id for t in project.tasks), title)
        project.tasks.append(task)
        logger.info(f"Created task {task.id} in project {project.id}: {title}")
        self._persist()
        return task

    def move_item(self, scope: Any, item_id: str, new_column: Any) -> bool:
        """Set an item's column. Moving to the current column still succeeds."""
        column = Column.parse(new_column)
        if column is None:
            return False
        item = self._find(scope, item_id)
        if item is None:
            return False
        item.column = column
        logger.info(f"Moved {scope}/{item_id} to {column.value}")
        self._persist()
        return True

    def delete_item(self, scope: Any, item_id: str) -> bool:
        """Remove an item. On the project list this discards the project with all its tasks."""
        items = self.items_in(scope)
        if items is None:
            return False
        for index, item in enumerate(items):
            if item.id == item_id:
                break
        else:
            return False
        del items[index]
        if items is self.projects:
            logger.info(f"Deleted project {item_id} and {len(item.tasks)} tasks")
            if self.selected_project_id == item_id:
                self.selected_project_id = None
        else:
            logger.info(f"Deleted task {scope}/{item_id}")
        self._persist()
        return True

    def update_item(self, scope: Any, item_id: str, **fields: Any) -> bool:
        """Edit display fields. A blank title is ignored; project-only fields are ignored on tasks."""
        item = self._find(scope, item_id)
        if item is None:
            return False
        changed = False
        title = str(fields.get("title") or "").strip()
        if title and title != item.title:
            item.title = title
            changed = True
        if item.is_project:
            for name in EDITABLE_PROJECT_FIELDS:
                if name not in fields:
                    continue
                value = str(fields[name] or "").strip() or None
                if value != getattr(item, name):
                    setattr(item, name, value)
                    changed = True
        if changed:
            self._persist()
        return changed

    def select_project(self, project_id: Optional[str]) -> Scope:
        """Switch the active scope. None returns to the project list; unknown ids are ignored."""
        if project_id is None:
            self.selected_project_id = None
        elif self.get_project(project_id) is not None:
            self.selected_project_id = project_id
        return self.active_scope

    # ── Queries ──────────────────────────────────────────────────────────

    def progress(self, project: Any) -> int:
        """progress() for an Item or a project id (unknown id → 0)."""
        if not isinstance(project, Item):
            project = self.get_project(project)
            if project is None:
                return 0
        return progress(project)
