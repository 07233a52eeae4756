# kubequest/simulation/scheduler.py
"""
Placement policy: first-fit in cluster order.

The first Ready node with a free slot wins. There is no scoring, no
randomness and no load ranking, so the same node list always yields the
same choice.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple

from kubequest.core.exceptions import ClusterFullError
from kubequest.simulation.entities import Node, Pod

logger = logging.getLogger(__name__)


def first_fit(nodes: Iterable[Node]) -> Optional[Node]:
    for node in nodes:
        if node.can_schedule():
            return node
    return None


def select_node(nodes: Sequence[Node]) -> str:
    """Returns the id of the node that should receive a new pod, or raises ClusterFullError."""
    node = first_fit(nodes)
    if node is None:
        logger.debug(f"No schedulable node among {len(nodes)} nodes.")
        raise ClusterFullError(node_count=len(nodes))
    return node.id


def place_pods(nodes: Sequence[Node], pods: Sequence[Pod]) -> Tuple[List[Tuple[Pod, Node]], List[Pod]]:
    """
    Places pods one after another with first-fit, attaching each to its node
    immediately so a node filled by one pod is skipped for the next.

    Returns (placements, dropped).
    """
    placements: List[Tuple[Pod, Node]] = []
    dropped: List[Pod] = []
    for pod in pods:
        node = first_fit(nodes)
        if node is None:
            dropped.append(pod)
            continue
        node.attach(pod)
        placements.append((pod, node))
    return placements, dropped
