# kubequest/simulation/entities.py
from typing import Dict, Iterator, List, Optional

from kubequest.models.cluster import (
    ClusterSnapshot, NodeSnapshot, NodeStatus, PodSnapshot, PodStatus
)


class Pod:
    """Represents a simulated pod (a shipping container)."""
    def __init__(self, pod_id: str, name: str):
        self.id: str = pod_id
        self.name: str = name
        self.status: PodStatus = PodStatus.PENDING

    def to_snapshot(self) -> PodSnapshot:
        return PodSnapshot(id=self.id, name=self.name, status=self.status)


class Node:
    """Represents a simulated worker node (a ship)."""
    def __init__(self, node_id: str, name: str, capacity: int):
        self.id: str = node_id
        self.name: str = name
        self.capacity: int = capacity
        self.status: NodeStatus = NodeStatus.READY
        self.pods: List[Pod] = []

    @property
    def ready(self) -> bool:
        return self.status == NodeStatus.READY

    def can_schedule(self) -> bool:
        """Checks if one more pod fits on this node."""
        return self.ready and len(self.pods) < self.capacity

    def attach(self, pod: Pod):
        pod.status = PodStatus.RUNNING
        self.pods.append(pod)

    def mark_not_ready(self):
        self.status = NodeStatus.NOT_READY
        for pod in self.pods:
            pod.status = PodStatus.CRASHED

    def drain(self) -> List[Pod]:
        """Detaches and returns every pod, leaving the node empty."""
        pods, self.pods = self.pods, []
        return pods

    def to_snapshot(self) -> NodeSnapshot:
        return NodeSnapshot(
            id=self.id,
            name=self.name,
            capacity=self.capacity,
            status=self.status,
            pods=tuple(p.to_snapshot() for p in self.pods),
        )


class ClusterState:
    """Ordered, mutable collection of nodes. Insertion order is the scheduling order."""
    def __init__(self):
        self._nodes: Dict[str, Node] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    @property
    def nodes(self) -> List[Node]:
        return list(self._nodes.values())

    def get(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def add(self, node: Node):
        if node.id in self._nodes:
            raise ValueError(f"Node id {node.id} already in use")
        self._nodes[node.id] = node

    def remove(self, node_id: str) -> Optional[Node]:
        return self._nodes.pop(node_id, None)

    def clear(self):
        self._nodes = {}

    def total_pods(self) -> int:
        return sum(len(n.pods) for n in self._nodes.values())

    def to_snapshot(self, version: int, taken_at_ms: int) -> ClusterSnapshot:
        return ClusterSnapshot(
            version=version,
            taken_at_ms=taken_at_ms,
            nodes=tuple(n.to_snapshot() for n in self._nodes.values()),
        )
