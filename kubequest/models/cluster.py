# kubequest/models/cluster.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Optional, Tuple


class PodStatus(str, Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    CRASHED = "Crashed"


class NodeStatus(str, Enum):
    READY = "Ready"
    NOT_READY = "NotReady"


class PodSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    status: PodStatus


class NodeSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    capacity: int
    status: NodeStatus
    pods: Tuple[PodSnapshot, ...] = ()

    @computed_field
    @property
    def free_slots(self) -> int:
        if self.status != NodeStatus.READY:
            return 0
        return max(0, self.capacity - len(self.pods))


class ClusterSnapshot(BaseModel):
    """
    Immutable, fully materialized view of the cluster published after every mutation.
    Node order is the scheduling order.
    """
    model_config = ConfigDict(frozen=True)

    version: int = Field(..., description="Increases by one with every published mutation")
    taken_at_ms: int = Field(..., description="Clock time at which the snapshot was taken")
    nodes: Tuple[NodeSnapshot, ...] = ()

    @computed_field
    @property
    def total_pods(self) -> int:
        return sum(len(n.pods) for n in self.nodes)

    @computed_field
    @property
    def ready_nodes(self) -> int:
        return sum(1 for n in self.nodes if n.status == NodeStatus.READY)

    @computed_field
    @property
    def not_ready_nodes(self) -> int:
        return sum(1 for n in self.nodes if n.status == NodeStatus.NOT_READY)

    @computed_field
    @property
    def free_slots(self) -> int:
        return sum(n.free_slots for n in self.nodes)

    def get_node(self, node_id: str) -> Optional[NodeSnapshot]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


class PodPlacement(BaseModel):
    model_config = ConfigDict(frozen=True)

    pod_id: str
    node_id: str


class RecoveryReport(BaseModel):
    """Outcome of one self-healing run for a crashed node."""
    model_config = ConfigDict(frozen=True)

    node_id: str
    fired_at_ms: int
    rescheduled: Tuple[PodPlacement, ...] = ()
    dropped: Tuple[str, ...] = Field((), description="Pod ids lost because no Ready node had room")

    @computed_field
    @property
    def overflow(self) -> bool:
        return len(self.dropped) > 0


class RecoveryHistoryResponse(BaseModel):
    reports: List[RecoveryReport] = []
    dropped_pod_total: int = 0


class ClockAdvanceRequest(BaseModel):
    ms: int = Field(..., ge=0, description="Virtual milliseconds to advance")
