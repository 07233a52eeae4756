# kubequest/simulation/healing.py
import logging
from typing import Callable, Optional

from kubequest.models.cluster import PodPlacement, RecoveryReport
from kubequest.simulation.entities import ClusterState
from kubequest.simulation.scheduler import place_pods

logger = logging.getLogger(__name__)


class FailureController:
    """
    Drives a node through Ready -> NotReady -> NotReady (drained).

    A crash is visible immediately. Rescheduling of the crashed node's pods
    happens later, in a one-shot task that carries only the node id and
    re-resolves it against the live cluster state when it fires.
    """
    def __init__(
        self,
        state: ClusterState,
        clock,
        recovery_delay_ms: int,
        on_recovered: Optional[Callable[[RecoveryReport], None]] = None,
    ):
        self.state = state
        self.clock = clock
        self.recovery_delay_ms = recovery_delay_ms
        self.on_recovered = on_recovered

    def crash(self, node_id: str) -> bool:
        """Marks the node NotReady and schedules its recovery. Returns False when nothing changed."""
        node = self.state.get(node_id)
        if node is None:
            logger.info(f"Crash requested for unknown node {node_id}. Ignoring.")
            return False
        if not node.ready:
            logger.info(f"Node {node_id} is already NotReady. Ignoring repeated crash.")
            return False

        node.mark_not_ready()
        self.clock.schedule(self.recovery_delay_ms, self._fire, node_id)
        logger.warning(
            f"Node {node_id} ({node.name}) crashed with {len(node.pods)} pod(s). "
            f"Self-healing scheduled in {self.recovery_delay_ms} ms."
        )
        return True

    def _fire(self, node_id: str):
        report = self.recover(node_id)
        if report is not None and self.on_recovered is not None:
            self.on_recovered(report)

    def recover(self, node_id: str) -> Optional[RecoveryReport]:
        """Drains the crashed node and re-places its pods. Returns None if the node is gone."""
        node = self.state.get(node_id)
        if node is None:
            logger.info(f"Recovery for node {node_id} skipped: node was removed before the task fired.")
            return None

        # The node ends up empty even if some pods cannot be placed
        to_reschedule = node.drain()
        placements, dropped = place_pods(self.state.nodes, to_reschedule)

        report = RecoveryReport(
            node_id=node_id,
            fired_at_ms=self.clock.now_ms,
            rescheduled=tuple(PodPlacement(pod_id=p.id, node_id=n.id) for p, n in placements),
            dropped=tuple(p.id for p in dropped),
        )
        logger.info(
            f"Self-healing for node {node_id}: {len(placements)}/{len(to_reschedule)} pod(s) rescheduled."
        )
        if dropped:
            logger.warning(
                f"Cluster capacity exceeded during rescheduling of node {node_id}: "
                f"dropped {len(dropped)} pod(s) {list(report.dropped)}"
            )
        return report
