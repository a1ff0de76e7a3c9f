from src.task_tracker.domain.repositories import IdentityFormatter


class ShortIdentityFormatter(IdentityFormatter):
    """Shows an address as its first and last characters, e.g. ``0x1234...abcd``."""

    def __init__(self, head: int = 6, tail: int = 4) -> None:
        self._head = head
        self._tail = tail

    def shorten(self, identity: str) -> str:
        if len(identity) <= self._head + self._tail + 3:
            return identity
        return f"{identity[: self._head]}...{identity[-self._tail :]}"
