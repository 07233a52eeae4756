# kubequest/simulation/notifier.py
import logging
from typing import Callable, Dict, Optional

from kubequest.models.cluster import ClusterSnapshot

logger = logging.getLogger(__name__)

Subscriber = Callable[[ClusterSnapshot], None]


class ChangeNotifier:
    """Fans out each published snapshot to every subscriber, exactly once per mutation."""
    def __init__(self):
        self._subscribers: Dict[int, Subscriber] = {}
        self._next_token = 0
        self.latest: Optional[ClusterSnapshot] = None

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Registers `callback` and returns a function that unregisters it."""
        token = self._next_token
        self._next_token += 1
        self._subscribers[token] = callback

        def unsubscribe():
            self._subscribers.pop(token, None)

        return unsubscribe

    def publish(self, snapshot: ClusterSnapshot):
        self.latest = snapshot
        for callback in list(self._subscribers.values()):
            try:
                callback(snapshot)
            except Exception as e:
                # A broken renderer must not fail the mutation that was already applied
                logger.error(f"Snapshot subscriber {callback!r} failed on version {snapshot.version}: {e}", exc_info=True)
