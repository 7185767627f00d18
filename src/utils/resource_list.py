from __future__ import annotations

from typing import (
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    Sequence,
    TypeVar,
)

from api.client import ApiError, ValidationError
from utils.logger import get_logger
from utils.pure import SearchField, filter_items

_logger = get_logger(__name__)

T = TypeVar("T")

# (message, severity) -> shows a toast; textual's notify fits this shape
Notifier = Callable[[str, str], None]


class ResourceListController(Generic[T]):
    """
    Fetch / filter / mutate / refetch cycle shared by every list screen.

    Holds the last successfully fetched collection, a loading flag and the
    search query. Starts as loading with nothing fetched. Failures never
    raise: they end up as an error toast and the collection is left as is.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[List[T]]],
        search_fields: Sequence[SearchField],
        notify: Notifier,
        label: str = "items",
    ) -> None:
        self._fetch = fetch
        self.search_fields = search_fields
        self.notify = notify
        self.label = label

        self.items: List[T] = []
        self.loading = True
        self.query = ""
        self.extra_filter: Optional[Callable[[T], bool]] = None

    @property
    def visible(self) -> List[T]:
        """Items matching the query (and extra filter), in fetched order."""
        shown = filter_items(self.items, self.query, self.search_fields)
        if self.extra_filter is not None:
            shown = [item for item in shown if self.extra_filter(item)]
        return shown

    def set_query(self, query: str) -> List[T]:
        self.query = query
        return self.visible

    def set_filter(self, predicate: Optional[Callable[[T], bool]]) -> List[T]:
        self.extra_filter = predicate
        return self.visible

    async def refresh(self) -> bool:
        """Refetch the collection. Returns False if the fetch failed."""
        self.loading = True
        try:
            self.items = list(await self._fetch())
            _logger.debug(f"Fetched {len(self.items)} {self.label}")
            return True
        except ApiError as e:
            _logger.warning(f"Fetching {self.label} failed: {e.message}")
            self.notify(f"Failed to fetch {self.label}: {e.message}", "error")
            return False
        finally:
            self.loading = False

    async def mutate(
        self,
        action: Awaitable[object],
        success_message: str,
        failure_message: str,
        refresh_on_error: bool = False,
    ) -> bool:
        """
        Await one create/update/delete call and refetch on success.

        On failure the collection is untouched, unless ``refresh_on_error`` asks
        to resync with the backend (used after partially applied sequences).
        """
        try:
            await action
        except (ApiError, ValidationError) as e:
            message = e.message if isinstance(e, ApiError) else str(e)
            _logger.warning(f"{failure_message}: {message}")
            self.notify(f"{failure_message}: {message}", "error")
            if refresh_on_error:
                await self.refresh()
            return False

        self.notify(success_message, "information")
        await self.refresh()
        return True

    def find(self, item_id: str) -> Optional[T]:
        for item in self.items:
            if getattr(item, "id", None) == item_id:
                return item
        return None
