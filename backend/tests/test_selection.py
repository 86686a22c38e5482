"""Tests for the multi-select manager."""

from app.client.selection import SelectionManager

VISIBLE = ["a", "b", "c"]


def test_toggle_all_selects_every_visible_id():
    selection = SelectionManager()
    selection.toggle_all(True, VISIBLE)
    assert selection.selected == {"a", "b", "c"}
    assert selection.all_checked is True


def test_toggle_all_off_clears_everything():
    selection = SelectionManager()
    selection.toggle_one("zzz", True, VISIBLE)
    selection.toggle_all(True, VISIBLE)
    selection.toggle_all(False, VISIBLE)
    assert selection.selected == set()
    assert selection.all_checked is False


def test_unchecking_one_after_select_all():
    selection = SelectionManager()
    selection.toggle_all(True, VISIBLE)
    selection.toggle_one("b", False, VISIBLE)
    assert selection.selected == {"a", "c"}
    assert selection.all_checked is False


def test_checking_last_item_marks_all_checked():
    selection = SelectionManager()
    selection.toggle_one("a", True, VISIBLE)
    selection.toggle_one("b", True, VISIBLE)
    assert selection.all_checked is False
    selection.toggle_one("c", True, VISIBLE)
    assert selection.all_checked is True


def test_empty_visible_set_is_never_all_checked():
    selection = SelectionManager()
    selection.toggle_all(True, [])
    assert selection.all_checked is False
    assert not selection.has_selection


def test_scoped_keeps_visible_order_and_drops_hidden_ids():
    selection = SelectionManager()
    selection.toggle_one("c", True, VISIBLE)
    selection.toggle_one("hidden", True, VISIBLE)
    selection.toggle_one("a", True, VISIBLE)
    assert selection.scoped(VISIBLE) == ["a", "c"]


def test_prune_forgets_missing_ids():
    selection = SelectionManager()
    selection.toggle_all(True, VISIBLE)
    selection.prune(["a"])
    assert selection.selected == {"a"}


def test_clear_resets_state():
    selection = SelectionManager()
    selection.toggle_all(True, VISIBLE)
    selection.clear()
    assert len(selection) == 0
    assert selection.all_checked is False


def test_checking_hidden_id_is_ignored():
    selection = SelectionManager()
    selection.toggle_one("hidden", True, VISIBLE)
    assert not selection.has_selection
    assert selection.all_checked is False
