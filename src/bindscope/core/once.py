"""Process-wide "show this only once" messaging.

Some notices (local simulation notice, connection status footnote,
deprecation warnings) should appear once per process even when bindings are
printed many times during a long-running dev session.
"""

from collections.abc import Callable


class OnceNotifier:
    """Forwards each distinct message to its sink only the first time.

    State starts empty, grows as messages are emitted, and is never reset
    during normal operation.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def emit(self, message: str, sink: Callable[[str], None]) -> bool:
        """Send message to sink unless it was already sent.

        Args:
            message: Message text; identity is the text itself
            sink: Output function receiving the message

        Returns:
            True if the message was sent, False if it was suppressed
        """
        if message in self._seen:
            return False
        self._seen.add(message)
        sink(message)
        return True

    def has_emitted(self, message: str) -> bool:
        return message in self._seen


# Shared by the whole process
once = OnceNotifier()
