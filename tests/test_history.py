"""
Tests for the checkpoint based undo/redo log.
"""
import pytest
from hypothesis import given, settings, strategies as st, HealthCheck

from dsmanalysis.model.commands import SetMetadata
from dsmanalysis.model.matrix import MatrixEngine


def _titles(matrix, *titles, checkpoints=()):
    for title in titles:
        matrix.set_title(title)
        if title in checkpoints:
            matrix.history.mark_current_as_checkpoint()


class TestCheckpointBoundary:
    def test_undo_stops_before_checkpoint(self, asymmetric_matrix):
        m = asymmetric_matrix
        _titles(m, "A", "B", "C", "D", checkpoints=("B",))

        reverted = m.history.undo_to_checkpoint()

        assert reverted == 2
        assert m.title == "B"
        assert [e.command.new_value for e in m.history.undo_entries] == ["A", "B"]
        assert m.history.undo_entries[-1].checkpoint

    def test_first_pop_always_happens(self, asymmetric_matrix):
        m = asymmetric_matrix
        _titles(m, "A", "B", "C", "D", checkpoints=("B", "D"))

        assert m.history.undo_to_checkpoint() == 2
        assert m.title == "B"
        # top entry is now the checkpoint B; it is reverted together with A
        assert m.history.undo_to_checkpoint() == 2
        assert m.title == ""
        assert not m.history.can_undo()

    def test_redo_is_inclusive_of_checkpoint(self, asymmetric_matrix):
        m = asymmetric_matrix
        _titles(m, "A", "B", "C", "D", checkpoints=("B", "D"))
        m.history.undo_to_checkpoint()
        m.history.undo_to_checkpoint()

        assert m.history.redo_to_checkpoint() == 2
        assert m.title == "B"
        assert m.history.redo_to_checkpoint() == 2
        assert m.title == "D"
        assert not m.history.can_redo()

    def test_redo_without_checkpoint_applies_everything(self, asymmetric_matrix):
        m = asymmetric_matrix
        _titles(m, "A", "B", "C", "D", checkpoints=("B",))
        m.history.undo_to_checkpoint()

        assert m.history.redo_to_checkpoint() == 2
        assert m.title == "D"


class TestEdgeCases:
    def test_empty_stacks_are_noops(self, asymmetric_matrix):
        m = asymmetric_matrix
        assert m.history.undo_to_checkpoint() == 0
        assert m.history.redo_to_checkpoint() == 0

    def test_checkpoint_on_empty_stack_raises(self, asymmetric_matrix):
        with pytest.raises(RuntimeError):
            asymmetric_matrix.history.mark_current_as_checkpoint()

    def test_checkpoint_clears_redo(self, asymmetric_matrix):
        m = asymmetric_matrix
        _titles(m, "A", "B")
        m.history.undo_to_checkpoint()
        assert m.history.can_redo()

        m.set_title("C")
        m.history.mark_current_as_checkpoint()
        assert not m.history.can_redo()

    def test_modified_flag(self, asymmetric_matrix):
        m = asymmetric_matrix
        assert m.modified
        m.clear_modified_flag()
        m.set_title("A")
        assert m.modified

        m.clear_modified_flag()
        m.history.undo_to_checkpoint()
        assert m.modified

        m.clear_modified_flag()
        m.history.undo_to_checkpoint()  # nothing left
        assert not m.modified

    def test_discard_since_leaves_redo_untouched(self, asymmetric_matrix):
        m = asymmetric_matrix
        _titles(m, "A", "B")
        m.history.undo_to_checkpoint()
        m.set_title("X")
        m.set_title("Y")

        assert m.history.discard_since(0) == 2
        assert m.title == ""
        assert len(m.history) == 0
        assert m.history.can_redo()

    def test_entries_are_commands(self, asymmetric_matrix):
        asymmetric_matrix.set_title("A")
        entry = asymmetric_matrix.history.undo_entries[0]
        assert isinstance(entry.command, SetMetadata)
        assert entry.command.old_value == ""


# =============================================================================
# Property: undo round trip
# =============================================================================

def snapshot(matrix: MatrixEngine):
    def item_state(item):
        return item.uid, item.name, item.sort_index, item.group, item.alias_uid

    return (
        [item_state(row) for row in matrix.items.rows],
        [item_state(col) for col in matrix.items.cols],
        sorted((c.row_uid, c.col_uid, c.name, c.weight) for c in matrix.connections),
        sorted((g.name, tuple(g.color)) for g in matrix.groupings),
        (matrix.title, matrix.project_name, matrix.customer, matrix.version_number),
    )


OPERATIONS = (
    "add", "delete", "rename", "group", "connect", "disconnect", "invert", "sort_by_group",
    "redistribute", "title", "clear_groups", "recolor", "remove_group", "rename_group",
)

operation_strategy = st.lists(
    st.tuples(st.sampled_from(OPERATIONS), st.integers(min_value=0, max_value=20)),
    min_size=1,
    max_size=15,
)


def apply_operation(matrix: MatrixEngine, name: str, k: int) -> None:
    rows = matrix.rows
    cols = matrix.cols
    row = rows[k % len(rows)] if rows else None

    if name == "add":
        matrix.add_symmetric_item(f"N{k}")
    elif name == "delete" and row is not None:
        matrix.delete_symmetric_item(row)
    elif name == "rename" and row is not None:
        matrix.set_item_name_symmetric(row, f"R{k}")
    elif name == "group" and row is not None:
        matrix.set_item_group_symmetric(row, f"G{k % 3}")
    elif name == "connect" and row is not None:
        col = cols[(k + 1) % len(cols)]
        matrix.modify_connection_symmetric(row.uid, col.uid, f"c{k}", float(k + 1))
    elif name == "disconnect" and row is not None:
        matrix.delete_row_connections(row.uid)
    elif name == "invert":
        matrix.invert_matrix()
    elif name == "sort_by_group":
        matrix.redistribute_sort_index_by_group()
    elif name == "redistribute":
        matrix.redistribute_sort_indices()
    elif name == "title":
        matrix.set_title(f"T{k}")
    elif name == "clear_groups":
        matrix.clear_groupings()
    elif name == "recolor":
        matrix.update_grouping_color("(None)", (k / 20.0, 0.5, 0.5))
    elif name == "remove_group":
        matrix.remove_grouping(f"G{k % 3}")
    elif name == "rename_group":
        matrix.rename_grouping(f"G{k % 3}", f"H{k}")


@given(operation_strategy)
@settings(max_examples=60, deadline=None, suppress_health_check=[HealthCheck.function_scoped_fixture])
def test_undo_restores_snapshot(operations):
    matrix = MatrixEngine(symmetric=True)
    a, _ = matrix.add_symmetric_item("A")
    b, col_b = matrix.add_symmetric_item("B")
    matrix.add_symmetric_item("C")
    matrix.modify_connection_symmetric(a.uid, col_b.uid, "ab", 2.0)
    matrix.set_item_group_symmetric(a, "G0")
    matrix.history.mark_current_as_checkpoint()
    before = snapshot(matrix)
    depth = len(matrix.history)

    for name, k in operations:
        apply_operation(matrix, name, k)

    if len(matrix.history) > depth:
        matrix.history.undo_to_checkpoint()

    assert len(matrix.history) == depth
    assert snapshot(matrix) == before
