import pytest

from sketchpad.history import CommitMode, History


def test_starts_with_one_empty_snapshot():
    history = History()
    assert len(history) == 1
    assert history.index == 0
    assert history.current() == ()
    assert not history.can_undo()
    assert not history.can_redo()


def test_three_appends_and_two_undos():
    history = History()
    for state in (("a",), ("a", "b"), ("a", "b", "c")):
        history.commit(state, CommitMode.APPEND)
    history.undo()
    history.undo()
    assert history.index == 1
    assert history.current() == ("a",)


def test_undo_and_redo_are_inverse():
    history = History()
    for n in range(1, 6):
        history.commit(tuple(range(n)))
    for _ in range(3):
        assert history.undo()
    assert history.index == 2
    for _ in range(3):
        assert history.redo()
    assert history.index == 5
    assert history.current() == (0, 1, 2, 3, 4)


def test_ends_are_noops():
    history = History()
    assert history.undo() is False
    history.commit(("x",))
    assert history.redo() is False
    assert history.index == 1


def test_overwrite_replaces_current_without_growing():
    history = History()
    history.commit(("a",))
    history.commit(("b",), CommitMode.OVERWRITE)
    history.commit(("c",), "overwrite")
    assert len(history) == 2
    assert history.current() == ("c",)


def test_append_after_undo_discards_redo_branch():
    history = History()
    history.commit(("a",))
    history.commit(("a", "b"))
    history.undo()
    history.commit(("a", "z"))
    assert len(history) == 3
    assert history.current() == ("a", "z")
    assert not history.can_redo()


def test_limit_drops_oldest_snapshots():
    history = History(limit=3)
    for n in range(1, 6):
        history.commit((n,))
    assert len(history) == 3
    assert history.index == 2
    assert history.current() == (5,)
    history.undo()
    history.undo()
    assert history.current() == (3,)
    assert history.undo() is False


def test_limit_must_keep_two_snapshots():
    with pytest.raises(ValueError):
        History(limit=1)


def test_initial_state_is_copied():
    seed = ["a"]
    history = History(seed)
    seed.append("b")
    assert history.current() == ("a",)
