"""
Read-only column projection of a board scope.

Nothing here mutates the store; views are rebuilt on every request.
"""
from typing import Dict, List, Any, Iterable, Optional

from .schema import Item, Column, Scope
from .board import BoardStore, progress


def project_columns(items: Iterable[Item]) -> Dict[Column, List[Item]]:
    """Bucket items by column, in display order, keeping insertion order inside each bucket."""
    columns: Dict[Column, List[Item]] = {column: [] for column in Column}
    for item in items:
        columns[item.column].append(item)
    return columns


def _card(item: Item) -> Dict[str, Any]:
    card = item.to_dict()
    if item.is_project:
        # Cards in the project list show summary counts instead of nested tasks
        card.pop("tasks", None)
        card["taskCount"] = len(item.tasks)
        card["progress"] = progress(item)
    return card


class BoardView:
    """Serializable snapshot of one scope's four columns."""

    def __init__(self, scope: Scope, title: str, items: List[Item]):
        self.scope = scope
        self.title = title
        self.columns = project_columns(items)

    @classmethod
    def build(cls, store: BoardStore, scope: Optional[Any] = None) -> Optional["BoardView"]:
        """View of `scope` (default: the active scope). None if the scope does not resolve."""
        scope = store.active_scope if scope is None else Scope.parse(scope)
        items = store.items_in(scope)
        if items is None:
            return None
        if scope.is_project_list:
            title = "Projects"
        else:
            title = store.get_project(scope.project_id).title
        return cls(scope, title, items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scope": str(self.scope),
            "title": self.title,
            "columns": [
                {
                    "id": column.value,
                    "title": column.title,
                    "items": [_card(item) for item in items],
                }
                for column, items in self.columns.items()
            ],
        }
