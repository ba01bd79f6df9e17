import logging
from dataclasses import dataclass
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """Identity of the signed-in user"""
    id: int
    email: str = ""
    username: str = ""


SessionListener = Callable[[Optional[SessionUser], Optional[SessionUser]], None]


class SessionProvider:
    """Holds the current signed-in identity (or none) and a loading flag.

    Listeners are called with ``(previous, current)`` on every identity
    transition: sign-in, sign-out, or a switch to a different user. Signing in
    again as the user already present is not a transition.
    """

    def __init__(self):
        self._user: Optional[SessionUser] = None
        self._loading = False
        self._listeners: List[SessionListener] = []

    @property
    def current_user(self) -> Optional[SessionUser]:
        return self._user

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it"""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user: SessionUser) -> None:
        if self._user is not None and self._user.id == user.id:
            self._user = user
            return
        self._loading = True
        try:
            self._transition(user)
        finally:
            self._loading = False

    def sign_out(self) -> None:
        if self._user is None:
            return
        self._transition(None)

    def _transition(self, user: Optional[SessionUser]) -> None:
        previous = self._user
        self._user = user
        logger.info(
            f"Session changed: {previous.id if previous else None} -> {user.id if user else None}"
        )
        for listener in list(self._listeners):
            listener(previous, user)
