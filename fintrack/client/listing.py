import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

from fintrack.client.http import ApiError
from fintrack.client.models import PaginationData

logger = logging.getLogger(__name__)

T = TypeVar("T")

EDIT_ACTIONS = ("edit", "delete")
RESTORE_ACTIONS = ("restore",)


@dataclass
class Column:
    key: str
    header: str
    render: Optional[Callable[[Any], str]] = None

    def value(self, item) -> str:
        if self.render is not None:
            return self.render(item)
        raw = getattr(item, self.key, None)
        return "" if raw is None else str(raw)


@dataclass
class Row(Generic[T]):
    item: T
    cells: List[str]
    actions: tuple


@dataclass
class ListView(Generic[T]):
    """Rows, per-row actions and detail selection for one entity listing.

    ``show_deleted`` switches between the live view and the deleted view.
    Handlers are optional; an action is only offered when its handler is.
    """

    columns: Sequence[Column]
    empty_state_message: str = "No items found."
    show_deleted: bool = False
    on_edit: Optional[Callable[[T], Any]] = None
    on_delete: Optional[Callable[[T], Any]] = None
    on_restore: Optional[Callable[[T], Any]] = None
    row_click_action: Optional[Callable[[T], Awaitable[T]]] = None
    pagination: Optional[PaginationData] = None
    error: Optional[str] = None
    selected: Optional[T] = field(default=None, init=False)

    def actions_for(self, item) -> tuple:
        if getattr(item, "is_deleted", False):
            return RESTORE_ACTIONS if self.on_restore is not None else ()
        return EDIT_ACTIONS

    def rows(self, items: Sequence[T]) -> List[Row[T]]:
        visible = [item for item in items if bool(getattr(item, "is_deleted", False)) == self.show_deleted]
        return [Row(item, [col.value(item) for col in self.columns], self.actions_for(item)) for item in visible]

    @property
    def empty_message(self) -> str:
        return f"No deleted {self.empty_state_message}" if self.show_deleted else self.empty_state_message

    async def select(self, item: T) -> Optional[T]:
        if self.row_click_action is None:
            self.selected = item
            return item
        try:
            detail = await self.row_click_action(item)
        except ApiError as exc:
            logger.warning("Detail fetch failed: %s", exc.message)
            self.error = exc.message
            return None
        self.error = None
        self.selected = detail if detail is not None else item
        return self.selected

    async def trigger(self, action: str, item: T):
        if action not in self.actions_for(item):
            raise ValueError(f"Action '{action}' is not available for this row")
        handler = {"edit": self.on_edit, "delete": self.on_delete, "restore": self.on_restore}[action]
        if handler is None:
            return None
        result = handler(item)
        if inspect.isawaitable(result):
            result = await result
        return result

    def render(self, items: Sequence[T]) -> str:
        if self.error:
            return f"Error: {self.error}"
        rows = self.rows(items)
        if not rows:
            return self.empty_message

        headers = [col.header for col in self.columns] + ["Actions"]
        table = [[*row.cells, " / ".join(row.actions)] for row in rows]
        widths = [max(len(line[i]) for line in [headers, *table]) for i in range(len(headers))]
        lines = [
            "  ".join(cell.ljust(width) for cell, width in zip(line, widths)).rstrip()
            for line in [headers, *table]
        ]
        lines.insert(1, "  ".join("-" * width for width in widths))
        if self.pagination is not None:
            lines.append(f"Page {self.pagination.page} of {max(self.pagination.total_pages, 1)}")
        return "\n".join(lines)
