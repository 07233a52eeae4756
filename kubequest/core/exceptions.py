# kubequest/core/exceptions.py

CLUSTER_FULL_MESSAGE = "Cluster Full! Add more Nodes (Ships) to deploy more Pods (Containers)."


class KubeQuestError(Exception):
    """Base class for errors raised by the simulator."""


class ClusterFullError(KubeQuestError):
    """No Ready node has a free pod slot. The cluster is left unchanged."""

    def __init__(self, node_count: int):
        self.node_count = node_count
        super().__init__(CLUSTER_FULL_MESSAGE)


class UnknownConceptError(KubeQuestError):
    def __init__(self, concept_id: str):
        self.concept_id = concept_id
        super().__init__(f"Concept '{concept_id}' not found")
