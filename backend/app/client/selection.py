"""Multi-select state for bulk actions."""

from collections.abc import Iterable, Sequence


class SelectionManager:
    """Set of selected record IDs, scoped to the visible records.

    Callers pass the currently visible IDs so "select all" and bulk actions
    never reach records outside the active view.
    """

    def __init__(self) -> None:
        self.selected: set[str] = set()
        self.all_checked: bool = False

    @property
    def has_selection(self) -> bool:
        return bool(self.selected)

    def __len__(self) -> int:
        return len(self.selected)

    def __contains__(self, record_id: object) -> bool:
        return str(record_id) in self.selected

    def _recompute(self, visible_ids: Sequence[str]) -> None:
        visible = set(visible_ids)
        self.all_checked = bool(visible) and len(self.selected & visible) == len(visible)

    def toggle_all(self, checked: bool, visible_ids: Sequence[str]) -> None:
        self.selected.clear()
        if checked:
            self.selected.update(str(i) for i in visible_ids)
        self._recompute(visible_ids)

    def toggle_one(self, record_id: str, checked: bool, visible_ids: Sequence[str]) -> None:
        """Check or uncheck one ID. Checking an ID outside the view is ignored."""
        if checked:
            if str(record_id) in visible_ids:
                self.selected.add(str(record_id))
        else:
            self.selected.discard(str(record_id))
        self._recompute(visible_ids)

    def clear(self) -> None:
        self.selected.clear()
        self.all_checked = False

    def scoped(self, visible_ids: Sequence[str]) -> list[str]:
        """Selected IDs that are visible, in visible order."""
        return [i for i in visible_ids if i in self.selected]

    def prune(self, existing_ids: Iterable[str]) -> None:
        """Forget IDs that no longer exist in the store."""
        self.selected &= set(existing_ids)
