# file: tests/test_composite_command.py

import pytest

from core.commands.base_command import CommandState
from core.commands.callable_command import CallableCommand
from core.commands.composite_command import CompositeCommand
from core.commands.file_commands import CopyFile, CreateFile, DeleteFile
from core.exceptions import FileOperationError, InvalidStateError, RollbackError


def snapshot(directory):
    return {p.name: p.read_bytes() for p in sorted(directory.iterdir())}


def test_children_execute_in_order_and_undo_in_reverse():
    calls = []

    def step(name):
        return CallableCommand(
            lambda: calls.append(f"do {name}"),
            lambda: calls.append(f"undo {name}"),
            description=name,
        )

    composite = CompositeCommand([step("a"), step("b"), step("c")])
    composite.execute()
    composite.undo()

    assert calls == ["do a", "do b", "do c", "undo c", "undo b", "undo a"]
    assert composite.state is CommandState.UNDONE

def test_execute_then_undo_restores_filesystem(work_dir):
    (work_dir / "keep.txt").write_text("untouched")
    before = snapshot(work_dir)

    composite = CompositeCommand([
        CreateFile(work_dir / "file.txt", "Hello World"),
        CopyFile(work_dir / "file.txt", work_dir / "file2.txt"),
        DeleteFile(work_dir / "file.txt"),
        DeleteFile(work_dir / "keep.txt"),
    ])
    composite.execute()
    assert snapshot(work_dir) == {"file2.txt": b"Hello World"}

    composite.undo()
    assert snapshot(work_dir) == before

def test_create_then_delete_round_trip(work_dir):
    path = work_dir / "a.txt"
    composite = CompositeCommand([CreateFile(path, "x"), DeleteFile(path)])

    composite.execute()
    assert not path.exists()

    composite.undo()
    # DeleteFile is undone first (restoring "x"), then CreateFile removes it again
    assert not path.exists()

def test_describe_joins_children_in_order(work_dir):
    composite = CompositeCommand()
    composite.add_command(CreateFile(work_dir / "a.txt", "x"))
    composite.add_command(DeleteFile(work_dir / "a.txt"))

    assert composite.describe() == (
        f"Create file {work_dir / 'a.txt'}; Delete file {work_dir / 'a.txt'}"
    )

def test_explicit_description_wins(work_dir):
    composite = CompositeCommand([CreateFile(work_dir / "a.txt", "x")], description="Install")
    assert composite.describe() == "Install"

def test_add_command_after_execute_raises(work_dir):
    composite = CompositeCommand([CreateFile(work_dir / "a.txt", "x")])
    composite.execute()

    with pytest.raises(InvalidStateError):
        composite.add_command(CreateFile(work_dir / "b.txt", "y"))

def test_child_failure_propagates_without_rollback(work_dir):
    composite = CompositeCommand([
        CreateFile(work_dir / "a.txt", "x"),
        DeleteFile(work_dir / "missing.txt"),
        CreateFile(work_dir / "b.txt", "y"),
    ])

    with pytest.raises(FileOperationError):
        composite.execute()

    assert composite.state is CommandState.UNEXECUTED
    assert (work_dir / "a.txt").read_text() == "x"
    assert not (work_dir / "b.txt").exists()
    assert composite.executed_children() == [composite.commands[0]]

def test_rollback_undoes_executed_children_in_reverse(work_dir):
    calls = []
    first = CallableCommand(lambda: calls.append("do 1"), lambda: calls.append("undo 1"))
    second = CallableCommand(lambda: calls.append("do 2"), lambda: calls.append("undo 2"))

    def fail():
        raise RuntimeError("boom")

    composite = CompositeCommand([first, second, CallableCommand(fail)])
    with pytest.raises(RuntimeError):
        composite.execute()

    assert composite.rollback() == 2
    assert calls == ["do 1", "do 2", "undo 2", "undo 1"]
    assert composite.executed_children() == []

def test_rolled_back_composite_cannot_run_again(work_dir):
    composite = CompositeCommand([
        CreateFile(work_dir / "a.txt", "x"),
        DeleteFile(work_dir / "missing.txt"),
    ])
    with pytest.raises(FileOperationError):
        composite.execute()
    composite.rollback()

    with pytest.raises(InvalidStateError):
        composite.execute()
    assert not (work_dir / "a.txt").exists()

def test_rollback_reaches_into_nested_composite(work_dir):
    inner = CompositeCommand([
        CreateFile(work_dir / "inner.txt", "i"),
        DeleteFile(work_dir / "missing.txt"),
    ])
    outer = CompositeCommand([CreateFile(work_dir / "outer.txt", "o"), inner])

    with pytest.raises(FileOperationError):
        outer.execute()
    assert (work_dir / "inner.txt").exists()

    assert outer.rollback() == 2
    assert snapshot(work_dir) == {}

def test_rollback_of_executed_composite_raises(work_dir):
    composite = CompositeCommand([CreateFile(work_dir / "a.txt", "x")])
    composite.execute()

    with pytest.raises(InvalidStateError):
        composite.rollback()

def test_nested_composites_undo_in_reverse(work_dir):
    path = work_dir / "a.txt"
    outer = CompositeCommand([
        CompositeCommand([CreateFile(path, "v1")]),
        CompositeCommand([DeleteFile(path), CreateFile(path, "v2")]),
    ])

    outer.execute()
    assert path.read_text() == "v2"

    outer.undo()
    assert not path.exists()

def test_empty_composite_is_a_valid_command():
    composite = CompositeCommand()
    composite.execute()
    composite.undo()

    assert composite.describe() == "CompositeCommand"
    assert composite.state is CommandState.UNDONE

def test_rollback_skips_child_undone_outside_the_composite(work_dir):
    first = CreateFile(work_dir / "a.txt", "x")
    second = CreateFile(work_dir / "b.txt", "y")
    composite = CompositeCommand([first, second, DeleteFile(work_dir / "missing.txt")])
    with pytest.raises(FileOperationError):
        composite.execute()
    first.undo()

    assert composite.rollback() == 1
    assert snapshot(work_dir) == {}

def test_rollback_does_not_touch_child_executed_elsewhere(work_dir):
    shared = CreateFile(work_dir / "a.txt", "shared")
    shared.execute()
    composite = CompositeCommand([CreateFile(work_dir / "b.txt", "b"), shared])

    with pytest.raises(InvalidStateError):
        composite.execute()

    assert composite.executed_children() == [composite.commands[0]]
    assert composite.rollback() == 1
    assert shared.state is CommandState.EXECUTED
    assert snapshot(work_dir) == {"a.txt": b"shared"}

def test_rollback_undoes_remaining_children_then_raises(work_dir):
    composite = CompositeCommand([
        CreateFile(work_dir / "a.txt", "x"),
        CallableCommand(lambda: None, description="no reverse"),
        CreateFile(work_dir / "b.txt", "y"),
        DeleteFile(work_dir / "missing.txt"),
    ])
    with pytest.raises(FileOperationError):
        composite.execute()

    with pytest.raises(RollbackError) as exc_info:
        composite.rollback()

    assert snapshot(work_dir) == {}
    assert exc_info.value.undone == 2
    assert len(exc_info.value.errors) == 1

def test_retrying_a_failed_composite_keeps_its_partial_work_tracked(work_dir):
    first = CreateFile(work_dir / "a.txt", "x")
    composite = CompositeCommand([first, DeleteFile(work_dir / "missing.txt")])
    with pytest.raises(FileOperationError):
        composite.execute()

    # The second attempt fails on the child that already ran
    with pytest.raises(InvalidStateError):
        composite.execute()

    assert composite.rollback() == 1
    assert snapshot(work_dir) == {}
