"""
Dashboard state machine.

The orchestrator owns everything the dashboard shows: the results cache, the
set of keys being resolved, the selection cursor and the expanded rows. It
launches one asyncio task per resolution. Tasks never touch this state; they
put a ``ResolutionCompleted`` event on a queue and the control loop applies
it with ``apply``. Only the control loop mutates the orchestrator, so no
locks are needed.

At most one resolution per key is in flight. Asking to refresh a key that is
already loading records a single follow-up refresh, launched when the current
resolution completes.
"""

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from reprac.browser import open_url
from reprac.exceptions import DuplicateRepositoryError, ValidationError
from reprac.logging import get_logger
from reprac.registry import Registry
from reprac.types.repos import RepositoryEntry, RepositoryRef
from reprac.types.status import RepoStatus, Status

logger = get_logger("orchestrator")

HELP_TEXT = (
    "enter/space=expand  E=expand all  C=collapse all  r=refresh all  "
    "R=refresh row  a=add  d=delete  o=browser  j/k=move  q=quit"
)


class Resolver(Protocol):
    """Anything that can resolve a repository's deploy status."""

    @property
    def has_auth(self) -> bool: ...

    async def resolve(self, ref: RepositoryRef) -> RepoStatus: ...


@dataclass(frozen=True)
class ResolutionCompleted:
    """A resolution task finished."""

    key: str
    generation: int
    status: RepoStatus


@dataclass(frozen=True)
class RowView:
    """Everything the presentation layer needs for one registry entry."""

    index: int
    entry: RepositoryEntry
    status: RepoStatus | None
    loading: bool
    expanded: bool
    selected: bool

    @property
    def key(self) -> str:
        return self.entry.key

    @property
    def display_state(self) -> Status:
        if self.loading or self.status is None:
            return Status.LOADING
        return self.status.state


@dataclass(frozen=True)
class Summary:
    """Counts for the overview panel."""

    total: int = 0
    behind: int = 0
    clean: int = 0
    no_release: int = 0
    errors: int = 0
    loading: int = 0


class Orchestrator:
    """Drives refreshes, caching and navigation for the dashboard."""

    def __init__(
        self,
        registry: Registry,
        resolver: Resolver,
        opener: Callable[[str], bool] = open_url,
    ) -> None:
        self.registry = registry
        self.resolver = resolver
        self.opener = opener

        self.cache: dict[str, RepoStatus] = {}
        self.loading: set[str] = set()
        self.expanded: set[str] = set()
        self.cursor = 0
        self.status_message = ""

        self._follow_ups: set[str] = set()
        self._generations: dict[str, int] = {}
        self._counter = itertools.count(1)
        self._tasks: set[asyncio.Task] = set()
        self._events: asyncio.Queue[ResolutionCompleted] = asyncio.Queue()

    # -- Queries ------------------------------------------------------------

    @property
    def has_auth(self) -> bool:
        return self.resolver.has_auth

    @property
    def selected(self) -> RepositoryEntry | None:
        if not len(self.registry):
            return None
        return self.registry[self.cursor]

    @property
    def in_flight(self) -> int:
        """Number of running resolution tasks, including abandoned ones."""
        return len(self._tasks)

    def is_loading(self, key: str) -> bool:
        return key in self.loading

    def snapshot(self) -> list[RowView]:
        """Rows in registry order."""
        return [
            RowView(
                index=i,
                entry=entry,
                status=self.cache.get(entry.key),
                loading=entry.key in self.loading,
                expanded=entry.key in self.expanded,
                selected=i == self.cursor,
            )
            for i, entry in enumerate(self.registry)
        ]

    def summary(self) -> Summary:
        counts = {state: 0 for state in Status}
        for entry in self.registry:
            status = self.cache.get(entry.key)
            if status is not None:
                counts[status.state] += 1
        return Summary(
            total=len(self.registry),
            behind=counts[Status.BEHIND],
            clean=counts[Status.CLEAN],
            no_release=counts[Status.NO_RELEASE],
            errors=counts[Status.ERROR],
            loading=len(self.loading),
        )

    # -- Refresh ------------------------------------------------------------

    def start(self) -> None:
        """Resolve every tracked repository, all at once."""
        for entry in self.registry:
            self._request(entry)

    def refresh_all(self) -> None:
        self.status_message = "Refreshing all..."
        for entry in self.registry:
            self._request(entry)

    def refresh_selected(self) -> None:
        entry = self.selected
        if entry is None:
            return
        self.status_message = f"Refreshing {entry.key}..."
        self._request(entry)

    def _request(self, entry: RepositoryEntry) -> bool:
        """Launch a resolution unless one is running; then queue one follow-up."""
        if entry.key in self.loading:
            self._follow_ups.add(entry.key)
            return False
        self._launch(entry.ref)
        return True

    def _launch(self, ref: RepositoryRef) -> None:
        key = ref.key
        generation = next(self._counter)
        self._generations[key] = generation
        self.loading.add(key)

        task = asyncio.get_running_loop().create_task(
            self._resolve(ref, generation), name=f"resolve:{key}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.debug("launched resolution %d for %s", generation, key)

    async def _resolve(self, ref: RepositoryRef, generation: int) -> None:
        try:
            status = await self.resolver.resolve(ref)
        except Exception as e:
            # A resolver bug must not leave the row loading forever.
            logger.exception("resolver crashed for %s", ref.key)
            status = RepoStatus.error(ref, str(e) or type(e).__name__)
        await self._events.put(ResolutionCompleted(ref.key, generation, status))

    # -- Control loop -------------------------------------------------------

    def apply(self, event: ResolutionCompleted) -> bool:
        """
        Merge a completed resolution into the cache.

        Returns:
            False when the event was ignored because its key was deleted
            (or deleted and added again) while it was in flight
        """
        if self._generations.get(event.key) != event.generation:
            logger.debug("dropping stale result for %s", event.key)
            return False

        self.loading.discard(event.key)
        self.cache[event.key] = event.status

        if event.key in self._follow_ups:
            self._follow_ups.discard(event.key)
            self._launch(event.status.ref)
        return True

    async def next_event(self) -> ResolutionCompleted:
        """Wait for the next completion and apply it."""
        event = await self._events.get()
        self.apply(event)
        return event

    async def pump(self, on_change: Callable[[], None]) -> None:
        """Apply completions forever, calling ``on_change`` after each one."""
        while True:
            await self.next_event()
            on_change()

    def close(self) -> None:
        """Abandon every in-flight resolution."""
        for task in list(self._tasks):
            task.cancel()

    # -- Navigation ---------------------------------------------------------

    def _clamp(self, index: int) -> int:
        count = len(self.registry)
        if count == 0:
            return 0
        return max(0, min(index, count - 1))

    def move(self, delta: int) -> None:
        self.cursor = self._clamp(self.cursor + delta)

    def move_to(self, index: int) -> None:
        self.cursor = self._clamp(index)

    def move_to_top(self) -> None:
        self.cursor = 0

    def move_to_bottom(self) -> None:
        self.cursor = self._clamp(len(self.registry) - 1)

    def toggle_expanded(self) -> None:
        entry = self.selected
        if entry is None:
            return
        if entry.key in self.expanded:
            self.expanded.discard(entry.key)
        else:
            self.expanded.add(entry.key)

    def expand_all(self) -> None:
        self.expanded = set(self.registry.keys())

    def collapse_all(self) -> None:
        self.expanded = set()

    # -- Registry mutations -------------------------------------------------

    def add_repository(self, owner: str, repo: str, notes: str = "") -> RepositoryEntry | None:
        """
        Track a new repository and start resolving it.

        Returns:
            The new entry, or None when the input was rejected
        """
        try:
            entry = self.registry.add(RepositoryRef(owner=owner, repo=repo), notes)
        except (ValidationError, DuplicateRepositoryError) as e:
            self.status_message = e.message
            return None

        self.status_message = self._with_persist_warning(f"Added {entry.key}")
        self._request(entry)
        return entry

    def delete_selected(self) -> RepositoryEntry | None:
        """Stop tracking the selected repository and forget its state."""
        if self.selected is None:
            return None

        entry = self.registry.remove(self.cursor)
        key = entry.key
        self.cache.pop(key, None)
        self.loading.discard(key)
        self.expanded.discard(key)
        self._follow_ups.discard(key)
        self._generations.pop(key, None)
        self.cursor = self._clamp(self.cursor)

        self.status_message = self._with_persist_warning(f"Removed {key}")
        return entry

    def _with_persist_warning(self, message: str) -> str:
        error = self.registry.last_persist_error
        if error is None:
            return message
        return f"{message} (not saved: {error.message})"

    # -- Side effects -------------------------------------------------------

    def open_selected(self) -> None:
        entry = self.selected
        if entry is None:
            return
        self.opener(entry.ref.url)

    def show_help(self) -> None:
        self.status_message = HELP_TEXT
