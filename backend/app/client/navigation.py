"""Folder navigation with browser-style back/forward history.

``current_path`` is the breadcrumb from the root to the active folder and
``history`` lists every folder visited (``None`` for the root). After every
operation ``history[history_index]`` names the active folder. A fresh
navigation discards whatever forward history lies past the current index.

Back and forward only store folder IDs, so the breadcrumb is rebuilt by
walking ``parent_id`` links through the record store.
"""

import logging
from typing import NamedTuple

from app.client.store import RecordStore

logger = logging.getLogger(__name__)


class PathEntry(NamedTuple):
    folder_id: str
    name: str


class NavigationEngine:
    """Tracks the active folder, its breadcrumb and the visit history."""

    def __init__(self, store: RecordStore) -> None:
        self.store = store
        self.current_path: list[PathEntry] = []
        self.history: list[str | None] = [None]
        self.history_index: int = 0

    # -- queries -----------------------------------------------------------

    def current_folder_id(self) -> str | None:
        return self.current_path[-1].folder_id if self.current_path else None

    @property
    def can_go_back(self) -> bool:
        return self.history_index > 0

    @property
    def can_go_forward(self) -> bool:
        return self.history_index < len(self.history) - 1

    # -- history -----------------------------------------------------------

    def _record_visit(self, folder_id: str | None) -> None:
        del self.history[self.history_index + 1:]
        self.history.append(folder_id)
        self.history_index = len(self.history) - 1

    # -- navigation --------------------------------------------------------

    def navigate_to_root(self) -> None:
        self.current_path = []
        self._record_visit(None)

    def navigate_to_folder(self, folder_id: str, folder_name: str) -> None:
        folder_id = str(folder_id)
        self.current_path.append(PathEntry(folder_id, folder_name))
        self._record_visit(folder_id)

    def navigate_to_path(self, index: int) -> None:
        """Jump to a breadcrumb position; 0 is the root."""
        index = max(0, min(index, len(self.current_path)))
        del self.current_path[index:]
        self._record_visit(self.current_folder_id())

    def navigate_back(self) -> bool:
        """Step back in history. Returns False at the oldest entry."""
        if not self.can_go_back:
            return False
        self.history_index -= 1
        self.current_path = self.restore_path_from_folder_id(self.history[self.history_index])
        return True

    def navigate_forward(self) -> bool:
        """Step forward in history. Returns False at the newest entry."""
        if not self.can_go_forward:
            return False
        self.history_index += 1
        self.current_path = self.restore_path_from_folder_id(self.history[self.history_index])
        return True

    def restore_path_from_folder_id(self, folder_id: str | None) -> list[PathEntry]:
        """Rebuild the root-to-folder breadcrumb by following parent links.

        Stops at the root, at a folder missing from the store, or at an ID
        already seen; the breadcrumb is then truncated at that point.
        """
        path: list[PathEntry] = []
        seen: set[str] = set()
        current = folder_id
        while current is not None and current not in seen:
            folder = self.store.get_folder(current)
            if folder is None:
                logger.debug("Folder %s missing while restoring path", current)
                break
            seen.add(current)
            path.insert(0, PathEntry(folder.id, folder.name))
            current = folder.parent_id
        return path
