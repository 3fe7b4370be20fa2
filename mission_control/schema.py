"""
Board item schema.

Projects and tasks share one record shape (Item), discriminated by `kind`.
A project owns an ordered list of tasks; a task never has children.

Columns:
  Backlog → Doing → Review → Done
"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any, Iterable
import time
import uuid


class Column(Enum):
    """Fixed workflow columns, in display order."""
    BACKLOG = "backlog"
    DOING = "doing"
    REVIEW = "review"
    DONE = "done"            # Terminal column, counted by progress()

    @property
    def title(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_str(cls, value: Any) -> "Column":
        """Lenient parse for stored data: anything unknown lands in backlog."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.BACKLOG

    @classmethod
    def parse(cls, value: Any) -> Optional["Column"]:
        """Strict parse for user input: None if not a known column."""
        if isinstance(value, Column):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


TERMINAL_COLUMN = Column.DONE


class ItemKind(Enum):
    PROJECT = "project"
    TASK = "task"


def make_item_id(taken: Iterable[str] = ()) -> str:
    """Generate a sortable item ID (ms-precision timestamp + random hex) not in `taken`."""
    taken = set(taken)
    while True:
        item_id = f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
        if item_id not in taken:
            return item_id


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class Item:
    """A board card: either a project or one of a project's tasks."""

    id: str
    title: str
    column: Column = Column.BACKLOG
    kind: ItemKind = ItemKind.TASK

    # Project-only display fields
    description: Optional[str] = None
    tech_stack: Optional[str] = None
    repo_url: Optional[str] = None

    tasks: List["Item"] = field(default_factory=list)

    def __post_init__(self):
        # Blank display fields are stored as absent; tasks carry none of them
        if self.kind is ItemKind.PROJECT:
            self.description = _optional_text(self.description)
            self.tech_stack = _optional_text(self.tech_stack)
            self.repo_url = _optional_text(self.repo_url)
        else:
            self.description = self.tech_stack = self.repo_url = None

    @property
    def is_project(self) -> bool:
        return self.kind is ItemKind.PROJECT

    @classmethod
    def new_project(
        cls,
        item_id: str,
        title: str,
        description: Optional[str] = None,
        tech_stack: Optional[str] = None,
        repo_url: Optional[str] = None,
    ) -> "Item":
        return cls(
            id=item_id,
            title=title,
            kind=ItemKind.PROJECT,
            description=description,
            tech_stack=tech_stack,
            repo_url=repo_url,
        )

    @classmethod
    def new_task(cls, item_id: str, title: str) -> "Item":
        return cls(id=item_id, title=title, kind=ItemKind.TASK)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored JSON shape (camelCase, optional fields omitted)."""
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "column": self.column.value,
        }
        if self.is_project:
            if self.description is not None:
                data["description"] = self.description
            if self.tech_stack is not None:
                data["techStack"] = self.tech_stack
            if self.repo_url is not None:
                data["repoUrl"] = self.repo_url
            data["tasks"] = [t.to_dict() for t in self.tasks]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any], kind: ItemKind = ItemKind.PROJECT) -> Optional["Item"]:
        """Deserialize one stored record. Returns None if the record is unusable."""
        if not isinstance(data, dict):
            return None
        item_id = data.get("id")
        title = data.get("title")
        if item_id is None or title is None:
            return None
        item_id = str(item_id)
        if not item_id:
            return None

        # Older project records carry the column under "status"
        raw_column = data.get("column")
        if raw_column is None and kind is ItemKind.PROJECT:
            raw_column = data.get("status")

        item = cls(
            id=item_id,
            title=str(title),
            column=Column.from_str(raw_column),
            kind=kind,
        )
        if kind is ItemKind.PROJECT:
            item.description = _optional_text(data.get("description"))
            item.tech_stack = _optional_text(data.get("techStack"))
            item.repo_url = _optional_text(data.get("repoUrl"))
            raw_tasks = data.get("tasks")
            if isinstance(raw_tasks, list):
                item.tasks = items_from_list(raw_tasks, kind=ItemKind.TASK)
        return item


def items_from_list(records: List[Any], kind: ItemKind = ItemKind.PROJECT) -> List[Item]:
    """Deserialize a list of records, dropping unusable ones and duplicate ids."""
    items: List[Item] = []
    seen = set()
    for raw in records:
        item = Item.from_dict(raw, kind=kind)
        if item is None or item.id in seen:
            continue
        seen.add(item.id)
        items.append(item)
    return items


class InvalidScope(ValueError):
    """Raised when a scope string is neither the project list nor project:<id>."""
    pass


@dataclass(frozen=True)
class Scope:
    """The collection a mutation applies to: the project list or one project's tasks."""

    project_id: Optional[str] = None

    PROJECT_LIST = "project-list"
    PROJECT_PREFIX = "project:"

    @classmethod
    def project_list(cls) -> "Scope":
        return cls(None)

    @classmethod
    def for_project(cls, project_id: str) -> "Scope":
        return cls(str(project_id))

    @classmethod
    def parse(cls, value: Any) -> "Scope":
        if isinstance(value, Scope):
            return value
        if value is None:
            raise InvalidScope("scope is required")
        text = str(value).strip()
        if text == cls.PROJECT_LIST:
            return cls.project_list()
        if text.startswith(cls.PROJECT_PREFIX) and len(text) > len(cls.PROJECT_PREFIX):
            return cls.for_project(text[len(cls.PROJECT_PREFIX):])
        raise InvalidScope(f"Invalid scope: {value!r}")

    @property
    def is_project_list(self) -> bool:
        return self.project_id is None

    def __str__(self) -> str:
        if self.project_id is None:
            return self.PROJECT_LIST
        return f"{self.PROJECT_PREFIX}{self.project_id}"
