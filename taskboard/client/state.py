import logging
from typing import List, Optional

from taskboard.client.api import ApiError, TaskboardClient

logger = logging.getLogger(__name__)

PER_PAGE_CHOICES = (5, 10, 20, 50)


def page_window(current: int, last: int, size: int = 5) -> List[int]:
    """Page numbers a paginator shows: at most `size`, centred on `current`."""
    if last <= size:
        return list(range(1, last + 1))
    half = size // 2
    if current <= half + 1:
        start = 1
    elif current >= last - half:
        start = last - size + 1
    else:
        start = current - half
    return list(range(start, start + size))


class TaskListState:
    """Cached page of the user's tasks.

    The cache is never patched locally: every mutation is followed by a
    re-fetch so data/meta/links always mirror the server.
    """

    def __init__(self, client: TaskboardClient, per_page: int = 10):
        self.client = client
        self.per_page = per_page
        self.current_page = 1
        self.data: List[dict] = []
        self.meta: Optional[dict] = None
        self.links: Optional[dict] = None
        self.error = ""
        self.loading = False

    def fetch(self, page: Optional[int] = None) -> bool:
        page = page or self.current_page
        self.loading = True
        self.error = ""
        try:
            payload = self.client.list_tasks(page=page, per_page=self.per_page)
        except ApiError as e:
            logger.warning("Failed to fetch tasks page %s: %s", page, e)
            self.error = e.message or "Failed to fetch tasks"
            return False
        finally:
            self.loading = False

        self.data = payload["data"]
        self.meta = payload["meta"]
        self.links = payload["links"]
        self.current_page = page

        # the page can vanish underneath us (deletes elsewhere); fall back to the last one
        last_page = self.meta["last_page"]
        if not self.data and page > last_page:
            return self.fetch(last_page)
        return True

    @property
    def total(self) -> int:
        return self.meta["total"] if self.meta else 0

    @property
    def last_page(self) -> int:
        return self.meta["last_page"] if self.meta else 1

    @property
    def has_prev(self) -> bool:
        return bool(self.links and self.links.get("prev"))

    @property
    def has_next(self) -> bool:
        return bool(self.links and self.links.get("next"))

    def pages(self) -> List[int]:
        return page_window(self.current_page, self.last_page)

    def summary(self) -> str:
        if not self.meta or not self.meta["total"]:
            return "No tasks"
        return f"Showing {self.meta['from']} to {self.meta['to']} of {self.meta['total']} results"

    def change_page(self, page: int) -> bool:
        page = min(max(page, 1), self.last_page)
        return self.fetch(page)

    def next_page(self) -> bool:
        if not self.has_next:
            return False
        return self.fetch(self.current_page + 1)

    def prev_page(self) -> bool:
        if not self.has_prev:
            return False
        return self.fetch(self.current_page - 1)

    def change_per_page(self, per_page: int) -> bool:
        if per_page not in PER_PAGE_CHOICES:
            raise ValueError(f"per_page must be one of {PER_PAGE_CHOICES}")
        self.per_page = per_page
        return self.fetch(1)

    # mutations raise ApiError so forms can show field errors

    def create(self, title: str, description: Optional[str] = None, status: Optional[str] = None) -> dict:
        task = self.client.create_task(title, description=description, status=status)
        # newest first, so the new task is at the top of page 1
        self.fetch(1)
        return task

    def update(self, task_id: int, **changes) -> dict:
        task = self.client.update_task(task_id, **changes)
        self.fetch(self.current_page)
        return task

    def delete(self, task_id: int) -> None:
        self.client.delete_task(task_id)
        was_last_on_page = len(self.data) == 1 and self.current_page > 1
        self.fetch(self.current_page - 1 if was_last_on_page else self.current_page)
