"""Registry UI session controller.

One ``RegistrySession`` owns everything a browser tab would hold: the record
store, folder navigation, multi-select, search text, the month/year window,
the connectivity flag and the queue of user-facing notices. Handlers never
raise for remote failures; they log, push a notice and leave local state
as it was. Local state only changes with records the server has confirmed.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from app.client.api_client import DocumentsClient
from app.client.errors import ClientError, RecordNotFoundError, SessionExpiredError
from app.client.filtering import UNSCOPED, filter_records
from app.client.navigation import NavigationEngine, PathEntry
from app.client.samples import sample_records
from app.client.selection import SelectionManager
from app.client.store import AnyRecord, RecordStore
from app.config import settings
from app.core.stats import compute_stats
from app.models.record import DocumentRecord, RegistryStats, parse_record
from app.services.portal_client import PortalClient, PortalError

logger = logging.getLogger(__name__)

_SERVER_FIELDS = {"id", "created_at", "updated_at"}


class NoticeLevel(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    message: str


@dataclass
class BatchResult:
    """Outcome of an ordered per-ID batch that stops at the first failure."""

    succeeded: list[str] = field(default_factory=list)
    failed_id: str | None = None
    error: str | None = None
    remaining: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.failed_id is None


def _write_payload(record: AnyRecord, **changes: Any) -> dict[str, Any]:
    """Full PUT body for *record* with *changes* applied."""
    payload = record.model_dump(mode="json", exclude=_SERVER_FIELDS)
    payload.update(changes)
    return payload


class RegistrySession:
    """State and actions of a single registry UI session."""

    def __init__(
        self,
        client: DocumentsClient,
        portal: PortalClient | None = None,
        *,
        hierarchical: bool = True,
        sample_mode: bool = False,
    ) -> None:
        self.client = client
        self.portal = portal or PortalClient()
        self.hierarchical = hierarchical
        self.sample_mode = sample_mode

        self.store = RecordStore()
        self.navigation = NavigationEngine(self.store)
        self.selection = SelectionManager()

        self.search: str = ""
        self.month: int | None = None
        self.year: int | None = None
        self.online: bool = False
        self.editing_id: str | None = None
        self.redirect_url: str | None = None
        self.notices: list[Notice] = []

    # ------------------------------------------------------------------
    # Notices
    # ------------------------------------------------------------------

    def notify(self, level: NoticeLevel, message: str) -> None:
        self.notices.append(Notice(level, message))

    def drain_notices(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices

    # ------------------------------------------------------------------
    # Start-up and loading
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Verify the session token with the portal, then load records.

        Raises SessionExpiredError when the token is missing or rejected;
        the caller is expected to send the user to ``redirect_url``. In sample
        mode verification is skipped and the sample records are loaded.
        """
        if self.sample_mode:
            logger.warning("Sample mode: session verification skipped")
            await self.load()
            return

        token = self.client.session_token
        try:
            if not token:
                raise PortalError("Session token not found")
            await self.portal.verify(token)
        except PortalError as e:
            logger.error("Session verification failed: %s", e)
            self.redirect_url = self.portal.base_url
            self.notify(NoticeLevel.ERROR, "Invalid session, redirecting...")
            raise SessionExpiredError(str(e), self.redirect_url) from e

        logger.info("Session valid, loading records")
        await self.load()

    async def load(self) -> bool:
        """Replace the store with the server's records. Returns False on failure."""
        if self.sample_mode:
            count = self.store.replace(sample_records())
            self.online = True
            logger.info("Loaded %d sample records", count)
            return True

        try:
            raw = await self.client.list()
        except ClientError as e:
            logger.error("Failed to load records: %s", e)
            self.online = False
            self.notify(NoticeLevel.ERROR, "Failed to load records")
            return False

        count = self.store.replace(raw)
        self.online = True
        self.selection.prune(self.store.ids())
        logger.info("Loaded %d records", count)
        return True

    async def sync(self) -> bool:
        self.notify(NoticeLevel.INFO, "Syncing...")
        ok = await self.load()
        if ok:
            self.notify(NoticeLevel.SUCCESS, "Data synced")
        return ok

    # ------------------------------------------------------------------
    # Filtering
    # ------------------------------------------------------------------

    def set_search(self, text: str) -> None:
        self.search = text

    def set_period(self, month: int | None, year: int | None) -> None:
        self.month, self.year = month, year

    def visible_records(self) -> list[AnyRecord]:
        if self.hierarchical:
            return filter_records(
                self.store,
                folder_id=self.navigation.current_folder_id(),
                search=self.search,
            )
        return filter_records(
            self.store,
            folder_id=UNSCOPED,
            search=self.search,
            month=self.month,
            year=self.year,
        )

    def visible_ids(self) -> list[str]:
        return [r.id for r in self.visible_records()]

    def dashboard(self) -> RegistryStats:
        """Status and tally figures for the active month/year window."""
        return compute_stats(
            filter_records(self.store, month=self.month, year=self.year)
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    @property
    def breadcrumb(self) -> list[PathEntry]:
        return list(self.navigation.current_path)

    def open_folder(self, folder_id: str) -> bool:
        folder = self.store.get_folder(folder_id)
        if folder is None:
            self.notify(NoticeLevel.ERROR, "Folder not found")
            return False
        self.navigation.navigate_to_folder(folder.id, folder.name)
        self.selection.clear()
        return True

    def go_back(self) -> bool:
        moved = self.navigation.navigate_back()
        if moved:
            self.selection.clear()
        return moved

    def go_forward(self) -> bool:
        moved = self.navigation.navigate_forward()
        if moved:
            self.selection.clear()
        return moved

    def go_to_path(self, index: int) -> None:
        self.navigation.navigate_to_path(index)
        self.selection.clear()

    def go_to_root(self) -> None:
        self.navigation.navigate_to_root()
        self.selection.clear()

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    def toggle_all(self, checked: bool) -> None:
        self.selection.toggle_all(checked, self.visible_ids())

    def toggle_one(self, record_id: str, checked: bool) -> None:
        self.selection.toggle_one(record_id, checked, self.visible_ids())

    # ------------------------------------------------------------------
    # Single-record actions
    # ------------------------------------------------------------------

    def view(self, record_id: str) -> AnyRecord | None:
        record = self.store.get(record_id)
        if record is None:
            self.notify(NoticeLevel.ERROR, "Record not found")
        return record

    def begin_create(self) -> None:
        self.editing_id = None

    def begin_edit(self, record_id: str) -> AnyRecord | None:
        record = self.view(record_id)
        self.editing_id = record.id if record is not None else None
        return record

    def cancel_edit(self) -> None:
        self.editing_id = None

    async def save(self, fields: dict[str, Any]) -> AnyRecord | None:
        """Create or update, then apply the server's copy locally.

        Nothing changes locally unless the server confirms the write.
        """
        editing_id = self.editing_id
        try:
            if editing_id is not None:
                existing = self.store.get(editing_id)
                if existing is None:
                    raise RecordNotFoundError(editing_id)
                raw = await self.client.update(editing_id, _write_payload(existing, **fields))
            else:
                payload = dict(fields)
                if payload.get("kind") in ("folder", "file"):
                    payload.setdefault("parent_id", self.navigation.current_folder_id())
                raw = await self.client.create(payload)
            record = parse_record(raw)
        except RecordNotFoundError as e:
            logger.warning("Save failed, record gone: %s", e)
            self.notify(NoticeLevel.ERROR, "Record not found")
            return None
        except (ClientError, ValueError) as e:
            logger.error("Failed to save record: %s", e)
            self.notify(NoticeLevel.ERROR, "Failed to save item")
            return None

        self.store.put(record)
        self.editing_id = None
        self.notify(NoticeLevel.SUCCESS, "Item updated" if editing_id else "Item created")
        return record

    async def update_status(self, record_id: str, status: str) -> DocumentRecord | None:
        record = self.store.get(record_id)
        if not isinstance(record, DocumentRecord):
            self.notify(NoticeLevel.ERROR, "Record not found")
            return None
        try:
            updated = parse_record(await self.client.update_status(record_id, status))
        except (ClientError, ValueError) as e:
            logger.error("Failed to update status of %s: %s", record_id, e)
            self.notify(NoticeLevel.ERROR, "Failed to update status")
            return None
        self.store.put(updated)
        self.notify(NoticeLevel.SUCCESS, "Status updated")
        return updated  # type: ignore[return-value]

    async def delete(self, record_id: str) -> bool:
        record = self.store.get(record_id)
        if record is None:
            self.notify(NoticeLevel.ERROR, "Record not found")
            return False
        try:
            await self.client.delete(record.id)
        except RecordNotFoundError:
            self.notify(NoticeLevel.ERROR, "Record not found")
            return False
        except ClientError as e:
            logger.error("Failed to delete %s: %s", record.id, e)
            self.notify(NoticeLevel.ERROR, "Failed to delete item")
            return False

        self._forget(record.id)
        self.selection.selected.discard(record.id)
        self.notify(NoticeLevel.SUCCESS, f'"{record.label}" deleted')
        return True

    # ------------------------------------------------------------------
    # Bulk actions
    # ------------------------------------------------------------------

    def _forget(self, record_id: str) -> None:
        """Drop a deleted record; a deleted folder's children now live at the root."""
        if self.store.get_folder(record_id) is not None:
            moved = self.store.detach_children(record_id)
            if moved:
                logger.info("Moved %d children of deleted folder %s to root", moved, record_id)
        self.store.remove([record_id])

    def _bulk_targets(self) -> list[str]:
        targets = self.selection.scoped(self.visible_ids())
        if not targets:
            self.notify(NoticeLevel.ERROR, "No items selected")
        return targets

    async def bulk_delete(self) -> BatchResult:
        """Delete the visible selection one ID at a time, stopping at the first failure."""
        result = BatchResult()
        ids = self._bulk_targets()
        if not ids:
            return result

        for index, record_id in enumerate(ids):
            try:
                await self.client.delete(record_id)
            except ClientError as e:
                logger.error("Bulk delete stopped at %s: %s", record_id, e)
                result.failed_id, result.error = record_id, str(e)
                result.remaining = ids[index + 1:]
                break
            result.succeeded.append(record_id)

        for record_id in result.succeeded:
            self._forget(record_id)
        self.selection.clear()
        if result.complete:
            self.notify(NoticeLevel.SUCCESS, f"{len(result.succeeded)} item(s) deleted")
        else:
            self.notify(
                NoticeLevel.ERROR,
                f"Failed to delete items ({len(result.succeeded)} of {len(ids)} deleted)",
            )
        return result

    async def bulk_move(self, target_folder_id: str | None) -> BatchResult:
        """Re-parent the visible selection under a folder, one ID at a time."""
        result = BatchResult()
        ids = self._bulk_targets()
        if not ids:
            return result

        target = self.store.get_folder(target_folder_id)
        if target is None:
            self.notify(NoticeLevel.ERROR, "Choose a destination folder")
            return result

        # The target and its ancestors cannot move under the target.
        blocked = {entry.folder_id for entry in self.navigation.restore_path_from_folder_id(target.id)}
        movable = [i for i in ids if i not in blocked]
        if len(movable) < len(ids):
            self.notify(NoticeLevel.ERROR, "A folder cannot be moved into itself")
        if not movable:
            return result

        for index, record_id in enumerate(movable):
            record = self.store.get(record_id)
            try:
                if record is None or isinstance(record, DocumentRecord):
                    raise RecordNotFoundError(record_id)
                raw = await self.client.update(record_id, _write_payload(record, parent_id=target.id))
                self.store.put(parse_record(raw))
            except (ClientError, ValueError) as e:
                logger.error("Bulk move stopped at %s: %s", record_id, e)
                result.failed_id, result.error = record_id, str(e)
                result.remaining = movable[index + 1:]
                break
            result.succeeded.append(record_id)

        self.selection.clear()
        if result.complete:
            self.notify(
                NoticeLevel.SUCCESS,
                f'{len(result.succeeded)} item(s) moved to "{target.name}"',
            )
        else:
            self.notify(
                NoticeLevel.ERROR,
                f"Failed to move items ({len(result.succeeded)} of {len(movable)} moved)",
            )
        return result

    # ------------------------------------------------------------------
    # UI dispatch
    # ------------------------------------------------------------------

    async def dispatch(self, action: str, record_id: str) -> Any:
        """Route a UI action (``view``, ``edit``, ``delete``, ``open``) to its handler."""
        if action == "view":
            return self.view(record_id)
        if action == "edit":
            return self.begin_edit(record_id)
        if action == "delete":
            return await self.delete(record_id)
        if action == "open":
            return self.open_folder(record_id)
        logger.warning("Unknown UI action %r for %s", action, record_id)
        return None


def create_session(session_token: str, **kwargs: Any) -> RegistrySession:
    """Build a session wired to the configured API and portal."""
    client = DocumentsClient(session_token, base_url=settings.api_base_url)
    portal = PortalClient(base_url=settings.portal_url)
    kwargs.setdefault("sample_mode", settings.client_sample_mode)
    return RegistrySession(client, portal, **kwargs)

