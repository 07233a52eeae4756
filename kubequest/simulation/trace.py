# kubequest/simulation/trace.py
"""
Chaos scenario traces.

Drives a ClusterService on a VirtualClock with randomly chosen commands and
records one row of cluster metrics per step, so a whole session of crashes,
self-healing and overflow can be inspected as a DataFrame.
"""
import logging
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from kubequest.core.exceptions import ClusterFullError
from kubequest.models.cluster import NodeStatus, PodStatus
from kubequest.services.cluster_service import ClusterService
from kubequest.simulation.clock import VirtualClock

logger = logging.getLogger(__name__)

ACTION_IDLE = 'Idle'
ACTION_ADD_POD = 'AddPod'
ACTION_ADD_NODE = 'AddNode'
ACTION_CRASH_NODE = 'CrashNode'
ACTION_REMOVE_NODE = 'RemoveNode'

DEFAULT_ACTION_PROBABILITIES: Dict[str, float] = {
    ACTION_ADD_POD: 0.45,
    ACTION_ADD_NODE: 0.08,
    ACTION_CRASH_NODE: 0.07,
    ACTION_REMOVE_NODE: 0.05,
    ACTION_IDLE: 0.35,
}

TRACE_COLUMNS = [
    'Timestamp_ms', 'Action', 'Target', 'Num_Ready_Nodes', 'Num_NotReady_Nodes',
    'Num_Pods_Running', 'Num_Pods_Crashed', 'Free_Slots', 'Cluster_Full_Total',
    'Dropped_Pods_Total', 'Pending_Recoveries',
]


def generate_trace(
    steps: int,
    seed: int = 42,
    step_ms: int = 500,
    action_probabilities: Optional[Dict[str, float]] = None,
    initial_node_count: int = 2,
    max_pods_per_node: int = 4,
    recovery_delay_ms: int = 2000,
) -> pd.DataFrame:
    """Runs `steps` random commands and returns the per-step metrics. The same seed gives the same frame."""
    probabilities = dict(action_probabilities or DEFAULT_ACTION_PROBABILITIES)
    total = sum(probabilities.values())
    if total <= 0:
        raise ValueError("action_probabilities must contain a positive weight")
    actions = list(probabilities.keys())
    weights = np.array([probabilities[a] for a in actions], dtype=float) / total

    rng = np.random.default_rng(seed)
    clock = VirtualClock()
    service = ClusterService(
        clock,
        initial_node_count=initial_node_count,
        max_pods_per_node=max_pods_per_node,
        recovery_delay_ms=recovery_delay_ms,
        seed=seed,
    )
    cluster_full_total = 0
    rows: List[Dict] = []

    for _ in range(steps):
        action = str(rng.choice(actions, p=weights))
        target = None
        snapshot = service.snapshot()

        if action == ACTION_ADD_POD:
            try:
                target = service.add_pod()
            except ClusterFullError:
                cluster_full_total += 1
        elif action == ACTION_ADD_NODE:
            target = service.add_node()
        elif action == ACTION_CRASH_NODE:
            ready = [n.id for n in snapshot.nodes if n.status == NodeStatus.READY]
            if ready:
                target = ready[int(rng.integers(len(ready)))]
                service.crash_node(target)
        elif action == ACTION_REMOVE_NODE:
            if snapshot.nodes:
                target = snapshot.nodes[int(rng.integers(len(snapshot.nodes)))].id
                service.remove_node(target)

        service.advance_clock(step_ms)
        rows.append(_metrics_row(service, action, target, cluster_full_total))

    df = pd.DataFrame(rows, columns=TRACE_COLUMNS)
    logger.info(
        f"Generated trace of {len(df)} steps: {cluster_full_total} ClusterFull, "
        f"{service.dropped_pod_total} pod(s) dropped during recovery."
    )
    return df


def _metrics_row(service: ClusterService, action: str, target: Optional[str], cluster_full_total: int) -> Dict:
    snapshot = service.snapshot()
    pods = [p for n in snapshot.nodes for p in n.pods]
    return {
        'Timestamp_ms': service.clock.now_ms,
        'Action': action,
        'Target': target,
        'Num_Ready_Nodes': snapshot.ready_nodes,
        'Num_NotReady_Nodes': snapshot.not_ready_nodes,
        'Num_Pods_Running': sum(1 for p in pods if p.status == PodStatus.RUNNING),
        'Num_Pods_Crashed': sum(1 for p in pods if p.status == PodStatus.CRASHED),
        'Free_Slots': snapshot.free_slots,
        'Cluster_Full_Total': cluster_full_total,
        'Dropped_Pods_Total': service.dropped_pod_total,
        'Pending_Recoveries': service.pending_recoveries,
    }
