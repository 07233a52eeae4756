# kubequest/services/cluster_service.py
import logging
import random
from typing import List, Optional

from kubequest.core.config import settings
from kubequest.core.exceptions import ClusterFullError
from kubequest.models.cluster import ClusterSnapshot, RecoveryReport
from kubequest.simulation.clock import build_clock
from kubequest.simulation.entities import ClusterState, Node, Pod
from kubequest.simulation.healing import FailureController
from kubequest.simulation.notifier import ChangeNotifier
from kubequest.simulation.scheduler import select_node

logger = logging.getLogger(__name__)


class ClusterService:
    """
    Single source of truth for the simulated cluster.

    Every command goes through one of the public methods below. Each
    successful mutation publishes exactly one immutable snapshot through
    `notifier`; no-ops and failed commands publish nothing.
    """
    def __init__(
        self,
        clock,
        initial_node_count: int = 2,
        max_pods_per_node: int = 4,
        recovery_delay_ms: int = 2000,
        bootstrap_node_prefix: str = "Ship-Alpha",
        added_node_prefix: str = "Ship-Beta",
        seed: Optional[int] = None,
    ):
        self.clock = clock
        self.initial_node_count = initial_node_count
        self.max_pods_per_node = max_pods_per_node
        self.bootstrap_node_prefix = bootstrap_node_prefix
        self.added_node_prefix = added_node_prefix

        self.state = ClusterState()
        self.notifier = ChangeNotifier()
        self.failure_controller = FailureController(
            self.state, clock, recovery_delay_ms, on_recovered=self._on_recovered
        )
        self.recovery_history: List[RecoveryReport] = []
        self.dropped_pod_total: int = 0

        self._rng = random.Random(seed)
        self._version = 0
        self._node_seq = 0
        self._pod_seq = 0
        self._snapshot: Optional[ClusterSnapshot] = None
        self.bootstrap()

    @classmethod
    def from_settings(cls, clock=None) -> "ClusterService":
        return cls(
            clock=clock if clock is not None else build_clock(settings.CLOCK_MODE),
            initial_node_count=settings.INITIAL_NODE_COUNT,
            max_pods_per_node=settings.MAX_PODS_PER_NODE,
            recovery_delay_ms=settings.RECOVERY_DELAY_MS,
            bootstrap_node_prefix=settings.BOOTSTRAP_NODE_PREFIX,
            added_node_prefix=settings.ADDED_NODE_PREFIX,
        )

    # --- Commands ---

    def bootstrap(self) -> ClusterSnapshot:
        """Replaces the cluster with the initial fleet. Ids keep counting, so none is ever reused."""
        self.state.clear()
        self.recovery_history = []
        self.dropped_pod_total = 0
        for i in range(1, self.initial_node_count + 1):
            self._new_node(f"{self.bootstrap_node_prefix}-{i}")
        logger.info(f"Cluster bootstrapped with {self.initial_node_count} node(s) of capacity {self.max_pods_per_node}.")
        return self._commit()

    def add_node(self, name: Optional[str] = None) -> str:
        node = self._new_node(name)
        if name is None:
            node.name = f"{self.added_node_prefix}-{node.id.rsplit('-', 1)[-1]}"
        logger.info(f"Added node {node.id} ({node.name}).")
        self._commit()
        return node.id

    def remove_node(self, node_id: str) -> bool:
        node = self.state.remove(node_id)
        if node is None:
            logger.info(f"Remove requested for unknown node {node_id}. Nothing to do.")
            return False
        logger.info(f"Removed node {node_id} ({node.name}), discarding {len(node.pods)} pod(s).")
        self._commit()
        return True

    def add_pod(self, name: Optional[str] = None) -> str:
        """Places a new Running pod with the scheduler. Raises ClusterFullError and changes nothing if no node fits."""
        try:
            node_id = select_node(self.state.nodes)
        except ClusterFullError:
            logger.warning(f"Cluster full: no Ready node with a free slot among {len(self.state)} node(s).")
            raise

        self._pod_seq += 1
        pod = Pod(f"pod-{self._pod_seq}", name or f"app-v{self._rng.randrange(10)}")
        node = self.state.get(node_id)
        node.attach(pod)
        logger.info(f"Scheduled pod {pod.id} ({pod.name}) on node {node_id} ({len(node.pods)}/{node.capacity}).")
        self._commit()
        return pod.id

    def crash_node(self, node_id: str) -> bool:
        if not self.failure_controller.crash(node_id):
            return False
        self._commit()
        return True

    def advance_clock(self, ms: int) -> int:
        """Moves a virtual clock forward, firing due recovery tasks. Returns the number of tasks fired."""
        return self.clock.advance(ms)

    # --- Reads ---

    def snapshot(self) -> ClusterSnapshot:
        return self._snapshot

    @property
    def pending_recoveries(self) -> int:
        return self.clock.pending

    # --- Internals ---

    def _new_node(self, name: Optional[str]) -> Node:
        self._node_seq += 1
        node_id = f"node-{self._node_seq}"
        node = Node(node_id, name or node_id, self.max_pods_per_node)
        self.state.add(node)
        return node

    def _on_recovered(self, report: RecoveryReport):
        self.recovery_history.append(report)
        self.dropped_pod_total += len(report.dropped)
        self._commit()

    def _commit(self) -> ClusterSnapshot:
        self._version += 1
        self._snapshot = self.state.to_snapshot(self._version, self.clock.now_ms)
        logger.debug(f"Publishing snapshot v{self._version}: {self._snapshot.total_pods} pod(s) on {len(self.state)} node(s).")
        self.notifier.publish(self._snapshot)
        return self._snapshot


# Instantiate the service (singleton pattern)
cluster_service = ClusterService.from_settings()


def get_cluster_service() -> ClusterService:
    return cluster_service
