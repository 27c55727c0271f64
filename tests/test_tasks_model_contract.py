"""Contract tests for task data models and their JSON shape."""

from __future__ import annotations

from dataclasses import fields

from spectrack.tasks.model import Task, TaskList


def test_hierarchy_fields_are_not_stored() -> None:
    names = {f.name for f in fields(Task)}
    assert "parent_id" not in names
    assert "level" not in names


def test_to_dict_minimal_task_uses_camel_case() -> None:
    assert Task(id="1", description="A").to_dict() == {
        "id": "1",
        "description": "A",
        "completed": False,
        "details": [],
        "dependsOn": [],
        "canRunParallel": False,
        "level": 0,
    }


def test_to_dict_includes_optional_fields_when_set() -> None:
    task = Task(
        id="2.1",
        description="B",
        requirements="1.1",
        leverage="utils",
        depends_on=["1"],
        can_run_parallel=True,
        blocked_by=["1"],
    )
    data = task.to_dict()
    assert data["requirements"] == "1.1"
    assert data["leverage"] == "utils"
    assert data["blockedBy"] == ["1"]
    assert data["parentId"] == "2"
    assert data["level"] == 1


def test_to_dict_omits_empty_blocked_by() -> None:
    assert "blockedBy" not in Task(id="1", blocked_by=[]).to_dict()


def test_tasklist_lookup_prefers_last_duplicate() -> None:
    tl = TaskList(tasks=[Task(id="1", description="first"), Task(id="1", description="second")])
    assert tl.get_task("1").description == "second"
    assert tl.get_task("9") is None


def test_tasklist_next_pending_in_document_order() -> None:
    tl = TaskList(tasks=[
        Task(id="1", completed=True),
        Task(id="3"),
        Task(id="2"),
    ])
    assert tl.next_pending().id == "3"
    assert tl.pending_ids() == ["3", "2"]


def test_tasklist_next_pending_none_when_all_done() -> None:
    tl = TaskList(tasks=[Task(id="1", completed=True)])
    assert tl.next_pending() is None


def test_tasklist_children_of() -> None:
    tl = TaskList(tasks=[Task(id="1"), Task(id="1.1"), Task(id="1.2"), Task(id="1.2.1"), Task(id="2")])
    assert [t.id for t in tl.children_of("1")] == ["1.1", "1.2"]
    assert [t.id for t in tl.children_of("1.2")] == ["1.2.1"]
    assert len(tl) == 5
