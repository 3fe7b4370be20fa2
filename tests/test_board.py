"""
Tests for the board store: creation, moves, cascading delete, selection, progress.
"""
import copy

import pytest

from mission_control.board import BoardStore, progress
from mission_control.persistence import ProjectPersistence
from mission_control.schema import Column, Item, ItemKind, Scope


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Creation
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_create_project_defaults(empty_board):
    """New projects land in backlog with no tasks"""
    project = empty_board.create_project("  Alpha  ", description="First one")
    assert project is not None
    assert project.title == "Alpha"
    assert project.column == Column.BACKLOG
    assert project.kind == ItemKind.PROJECT
    assert project.tasks == []
    assert project.description == "First one"
    assert project.tech_stack is None
    assert empty_board.projects == [project]


@pytest.mark.parametrize("title", ["", "   ", "\t\n", None])
def test_create_project_blank_title_is_noop(empty_board, title):
    """Blank titles never create a project"""
    assert empty_board.create_project(title) is None
    assert empty_board.projects == []


def test_create_project_blank_optional_fields_become_none(empty_board):
    project = empty_board.create_project("Alpha", tech_stack="  ", repo_url="")
    assert project.tech_stack is None
    assert project.repo_url is None


def test_create_task(empty_board):
    """Tasks are appended to the owning project's backlog"""
    alpha = empty_board.create_project("Alpha")
    first = empty_board.create_task(alpha.id, "Write spec")
    second = empty_board.create_task(alpha.id, "Review spec")
    assert [t.title for t in alpha.tasks] == ["Write spec", "Review spec"]
    assert first.column == Column.BACKLOG
    assert first.kind == ItemKind.TASK
    assert second.id != first.id


def test_create_task_noops(empty_board):
    """Blank title or unknown project leaves state unchanged"""
    alpha = empty_board.create_project("Alpha")
    assert empty_board.create_task(alpha.id, "  ") is None
    assert empty_board.create_task("no-such-project", "Task") is None
    assert alpha.tasks == []


def test_ids_unique_per_scope(empty_board):
    """Rapid creation still yields distinct ids in every collection"""
    projects = [empty_board.create_project(f"P{i}") for i in range(50)]
    assert len({p.id for p in empty_board.projects}) == 50
    for project in projects[:3]:
        for i in range(30):
            empty_board.create_task(project.id, f"T{i}")
        assert len({t.id for t in project.tasks}) == 30


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Moves
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_move_task(board):
    """Seed task t3 moves from backlog to review"""
    assert board.move_item("project:1", "t3", "review")
    task = next(t for t in board.get_project("1").tasks if t.id == "t3")
    assert task.column == Column.REVIEW


def test_move_project_accepts_enum_and_scope_object(board):
    assert board.move_item(Scope.project_list(), "1", Column.DONE)
    assert board.get_project("1").column == Column.DONE


def test_move_same_column_is_idempotent(board):
    before = copy.deepcopy(board.projects)
    assert board.move_item("project:1", "t1", "done")
    assert board.projects == before


@pytest.mark.parametrize("scope, item_id, column", [
    ("project:1", "missing", "done"),
    ("project-list", "missing", "done"),
    ("project:missing", "t1", "done"),
    ("bogus-scope", "t1", "done"),
    ("project:1", "t1", "archived"),
])
def test_move_unknown_is_pure_noop(board, scope, item_id, column):
    """Unknown ids, scopes or columns leave the collection deeply equal"""
    before = copy.deepcopy(board.projects)
    assert not board.move_item(scope, item_id, column)
    assert board.projects == before


def test_move_does_not_reorder_within_column(empty_board):
    alpha = empty_board.create_project("Alpha")
    a = empty_board.create_task(alpha.id, "A")
    b = empty_board.create_task(alpha.id, "B")
    empty_board.move_item(f"project:{alpha.id}", a.id, "doing")
    empty_board.move_item(f"project:{alpha.id}", a.id, "backlog")
    assert [t.id for t in alpha.tasks] == [a.id, b.id]


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Deletes
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_delete_project_cascades(empty_board):
    """Deleting a project removes exactly it and its own tasks"""
    alpha = empty_board.create_project("Alpha")
    beta = empty_board.create_project("Beta")
    for i in range(3):
        empty_board.create_task(alpha.id, f"A{i}")
    for i in range(2):
        empty_board.create_task(beta.id, f"B{i}")
    beta_tasks = copy.deepcopy(beta.tasks)

    assert empty_board.delete_item("project-list", alpha.id)

    assert [p.id for p in empty_board.projects] == [beta.id]
    assert empty_board.get_project(beta.id).tasks == beta_tasks
    assert empty_board.items_in(f"project:{alpha.id}") is None


def test_delete_task(board):
    assert board.delete_item("project:1", "t2")
    assert [t.id for t in board.get_project("1").tasks] == ["t1", "t3", "t4"]


def test_delete_unknown_is_noop(board):
    before = copy.deepcopy(board.projects)
    assert not board.delete_item("project-list", "missing")
    assert not board.delete_item("project:1", "missing")
    assert not board.delete_item("project:missing", "t1")
    assert board.projects == before


def test_delete_selected_project_returns_to_project_list(board):
    board.select_project("1")
    assert board.delete_item("project-list", "1")
    assert board.selected_project_id is None
    assert board.active_scope.is_project_list


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Edits & selection
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_update_project_fields(board):
    assert board.update_item("project-list", "1", title="Renamed", tech_stack="Flask")
    project = board.get_project("1")
    assert project.title == "Renamed"
    assert project.tech_stack == "Flask"


def test_update_blank_title_ignored(board):
    assert not board.update_item("project:1", "t1", title="   ")
    assert board.get_project("1").tasks[0].title == "Fix navigation"


def test_update_task_ignores_project_fields(board):
    assert not board.update_item("project:1", "t1", description="nope")
    assert board.get_project("1").tasks[0].description is None


def test_select_project(board):
    scope = board.select_project("1")
    assert str(scope) == "project:1"
    assert board.current_project.id == "1"

    # Unknown ids leave the selection alone
    board.select_project("missing")
    assert board.selected_project_id == "1"

    assert board.select_project(None).is_project_list
    assert board.current_project is None


def test_selection_is_not_persisted(storage):
    persistence = ProjectPersistence(storage)
    board = BoardStore(persistence).load()
    board.select_project("1")
    reloaded = BoardStore(persistence).load()
    assert reloaded.selected_project_id is None


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Progress
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def _project_with(columns):
    project = Item(id="p", title="P", kind=ItemKind.PROJECT)
    project.tasks = [Item(id=str(i), title=str(i), column=c) for i, c in enumerate(columns)]
    return project


def test_progress_empty_is_zero():
    assert progress(_project_with([])) == 0


def test_progress_half_done():
    cols = [Column.DONE, Column.DONE, Column.BACKLOG, Column.DOING]
    assert progress(_project_with(cols)) == 50


def test_progress_rounds_half_up():
    cols = [Column.DONE] + [Column.BACKLOG] * 7
    assert progress(_project_with(cols)) == 13
    assert progress(_project_with([Column.DONE, Column.BACKLOG, Column.BACKLOG])) == 33


def test_progress_by_id(board):
    assert board.progress("1") == 25
    assert board.progress("missing") == 0


def test_alpha_scenario(empty_board):
    """Create → add task → finish it → 100%"""
    alpha = empty_board.create_project("Alpha")
    task = empty_board.create_task(alpha.id, "Write spec")
    assert empty_board.move_item("project:" + alpha.id, task.id, "done")
    assert empty_board.progress(alpha) == 100


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# Persistence side effects
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━


def test_mutations_are_persisted(storage):
    persistence = ProjectPersistence(storage, seed_on_first_run=False)
    board = BoardStore(persistence).load()
    alpha = board.create_project("Alpha", repo_url="https://example.com/alpha")
    task = board.create_task(alpha.id, "Write spec")
    board.move_item(f"project:{alpha.id}", task.id, "review")

    reloaded = BoardStore(persistence).load()
    assert reloaded.projects == board.projects


def test_delete_of_last_project_is_persisted(storage):
    persistence = ProjectPersistence(storage)
    board = BoardStore(persistence).load()
    board.delete_item("project-list", "1")
    assert BoardStore(persistence).load().projects == []


def test_failed_save_keeps_memory_state(broken_storage):
    """Storage failures never crash or roll back in-memory state"""
    board = BoardStore(ProjectPersistence(broken_storage)).load()
    assert [p.id for p in board.projects] == ["1"]

    alpha = board.create_project("Alpha")
    assert alpha is not None
    assert board.move_item("project-list", alpha.id, "doing")
    assert board.get_project(alpha.id).column == Column.DOING
    assert board.delete_item("project-list", "1")
    assert [p.id for p in board.projects] == [alpha.id]
    assert broken_storage.write_attempts == 3
