"""
Navigation Controller

Flat state machine over Page plus the modal-open flags. Every change
replaces the whole NavigationState, so a multi-field change is a single
update and subscribers are notified once per change.
"""

from collections.abc import Callable
from dataclasses import dataclass, replace

from common.logging_config import get_logger
from common.types import Page

logger = get_logger("navigation")

Listener = Callable[["NavigationState"], None]


@dataclass(frozen=True)
class NavigationState:
    page: Page = Page.HOME
    search_open: bool = False
    login_open: bool = False
    changelog_open: bool = False


class NavigationController:
    """Holds the current page and modal flags. No history is kept."""

    def __init__(self, initial: Page = Page.HOME):
        self._state = NavigationState(page=Page(initial))
        self._listeners: list[Listener] = []

    @property
    def state(self) -> NavigationState:
        return self._state

    @property
    def page(self) -> Page:
        return self._state.page

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _apply(self, **changes) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)

    def set_page(self, page: Page | str) -> None:
        """Replace the current page unconditionally."""
        target = Page(page)
        logger.debug(f"Navigating {self._state.page.value} -> {target.value}")
        self._apply(page=target)

    def open_search(self) -> None:
        self._apply(search_open=True)

    def close_search(self) -> None:
        self._apply(search_open=False)

    def open_login(self) -> None:
        self._apply(login_open=True)

    def close_login(self) -> None:
        self._apply(login_open=False)

    def open_changelog(self) -> None:
        self._apply(changelog_open=True)

    def close_changelog(self) -> None:
        self._apply(changelog_open=False)

    def navigate_from_search(self, page: Page | str) -> None:
        """Go to a search hit and close the search surface in one update."""
        target = Page(page)
        logger.debug(f"Search navigation -> {target.value}")
        self._apply(page=target, search_open=False)
