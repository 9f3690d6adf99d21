"""Tests for utils/hierarchy.py: WBS indexing, depth and cycle guards."""

from __future__ import annotations

from worklog_cli.models import Task
from worklog_cli.utils.hierarchy import (
    can_add_child,
    descendant_ids,
    find_roots,
    index_tasks,
    parent_candidates,
    subtree_ids,
    task_depth,
    would_create_cycle,
)


def _chain(length: int) -> list[Task]:
    """t1 <- t2 <- ... <- tN, each the child of the previous one."""
    tasks = []
    parent = None
    for i in range(1, length + 1):
        tasks.append(Task(id=f"t{i}", title=f"T{i}", parent_id=parent))
        parent = f"t{i}"
    return tasks


def _forest() -> list[Task]:
    return [
        Task(id="a", title="A"),
        Task(id="a1", title="A1", parent_id="a"),
        Task(id="b", title="B"),
        Task(id="a2", title="A2", parent_id="a"),
        Task(id="a1x", title="A1x", parent_id="a1"),
    ]


class TestIndexTasks:
    def test_dotted_indices_in_preorder(self):
        result = [(n.task.id, n.index, n.depth) for n in index_tasks(_forest())]
        assert result == [
            ("a", "1", 1),
            ("a1", "1.1", 2),
            ("a1x", "1.1.1", 3),
            ("a2", "1.2", 2),
            ("b", "2", 1),
        ]

    def test_has_children_flag(self):
        flags = {n.task.id: n.has_children for n in index_tasks(_forest())}
        assert flags["a"] is True
        assert flags["a1x"] is False
        assert flags["b"] is False

    def test_filtered_out_parent_promotes_child_to_root(self):
        tasks = [t for t in _forest() if t.id != "a"]
        roots = [n.task.id for n in index_tasks(tasks) if n.depth == 1]
        assert roots == ["a1", "b", "a2"]

    def test_depth_cap_hides_deeper_tasks(self):
        ids = [n.task.id for n in index_tasks(_chain(7))]
        assert ids == ["t1", "t2", "t3", "t4", "t5"]

    def test_custom_depth_cap(self):
        assert len(index_tasks(_chain(4), max_depth=2)) == 2

    def test_cycle_does_not_loop(self):
        tasks = [
            Task(id="x", title="X", parent_id="y"),
            Task(id="y", title="Y", parent_id="x"),
            Task(id="r", title="R"),
        ]
        assert [n.task.id for n in index_tasks(tasks)] == ["r"]

    def test_self_parent_is_not_a_root_child_of_itself(self):
        tasks = [Task(id="s", title="S", parent_id="s"), Task(id="r", title="R")]
        assert [n.task.id for n in index_tasks(tasks)] == ["r"]

    def test_input_not_modified(self):
        tasks = _forest()
        before = [t.model_copy() for t in tasks]
        index_tasks(tasks)
        assert tasks == before

    def test_empty(self):
        assert index_tasks([]) == []


class TestRoots:
    def test_dangling_parent_counts_as_root(self):
        tasks = [Task(id="o", title="orphan", parent_id="gone"), Task(id="r", title="R")]
        assert [t.id for t in find_roots(tasks)] == ["o", "r"]


class TestDepth:
    def test_depth_of_chain(self):
        tasks = _chain(4)
        assert [task_depth(t, tasks) for t in tasks] == [1, 2, 3, 4]

    def test_depth_stops_on_cycle(self):
        tasks = [
            Task(id="x", title="X", parent_id="y"),
            Task(id="y", title="Y", parent_id="x"),
        ]
        assert task_depth(tasks[0], tasks) == 2

    def test_can_add_child_below_cap(self):
        tasks = _chain(5)
        assert can_add_child(tasks[3], tasks) is True
        assert can_add_child(tasks[4], tasks) is False


class TestSubtrees:
    def test_descendants(self):
        assert descendant_ids("a", _forest()) == {"a1", "a2", "a1x"}

    def test_subtree_includes_self(self):
        assert subtree_ids("a1", _forest()) == {"a1", "a1x"}

    def test_leaf_has_no_descendants(self):
        assert descendant_ids("b", _forest()) == set()


class TestCycleGuards:
    def test_self_parent_is_a_cycle(self):
        assert would_create_cycle("a", "a", _forest()) is True

    def test_descendant_parent_is_a_cycle(self):
        assert would_create_cycle("a", "a1x", _forest()) is True

    def test_sibling_parent_is_fine(self):
        assert would_create_cycle("a1", "b", _forest()) is False

    def test_detach_is_fine(self):
        assert would_create_cycle("a1", None, _forest()) is False

    def test_candidates_exclude_subtree(self):
        ids = {t.id for t in parent_candidates("a1", _forest())}
        assert ids == {"a", "b", "a2"}

    def test_candidates_exclude_tasks_at_max_depth(self):
        tasks = _chain(5)
        ids = {t.id for t in parent_candidates(None, tasks)}
        assert "t5" not in ids
        assert "t4" in ids
