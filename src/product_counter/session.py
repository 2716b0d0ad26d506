"""Signed-in user and their analysis history."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from product_counter.models import AnalysisRecord
from product_counter.store import AnalysisStore

logger = logging.getLogger(__name__)

Listener = Callable[["Session"], None]


class NotSignedInError(Exception):
    """Raised when an action needs a signed-in user."""


@dataclass(frozen=True)
class User:
    id: str


class Session:
    """
    Session state: starts anonymous, holds one user at a time.

    Signing in loads the user's recent history; signing out clears it.
    Subscribers are called after every change.
    """

    def __init__(self, store: AnalysisStore, history_limit: int = 10) -> None:
        self._store = store
        self._history_limit = history_limit
        self._listeners: list[Listener] = []
        self.user: User | None = None
        self.history: list[AnalysisRecord] = []

    @property
    def signed_in(self) -> bool:
        return self.user is not None

    def require_user(self) -> User:
        if not self.signed_in:
            raise NotSignedInError("Please sign in to analyze ecommerce websites")
        return self.user

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def sign_in(self, user: User) -> None:
        self.user = user
        logger.info("Signed in as %s", user.id)
        self.refresh_history()

    def sign_out(self) -> None:
        if self.user is not None:
            logger.info("Signed out %s", self.user.id)
        self.user = None
        self.history = []
        self._notify()

    def refresh_history(self) -> None:
        """Reload the user's most recent records. History load failures are logged, not raised."""
        if self.user is None:
            self.history = []
        else:
            try:
                self.history = self._store.list_for_user(self.user.id, self._history_limit)
            except OSError as exc:
                logger.error("Failed to load history: %s", exc)
        self._notify()
