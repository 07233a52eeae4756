# kubequest/services/concept_catalog.py
from typing import Dict, List

from kubequest.core.exceptions import UnknownConceptError
from kubequest.models.concept import Concept, VisualAction

K8S_CONCEPTS: List[Concept] = [
    Concept(
        id="cluster",
        title="Cluster",
        analogy="The Shipping Port",
        description="The entire facility where all the action happens. It manages the ships (Nodes) and the cargo (Pods).",
    ),
    Concept(
        id="node",
        title="Node",
        analogy="The Cargo Ship",
        description="A worker machine (virtual or physical) that carries the containers. It needs a captain (Kubelet) to report back to the port authority.",
        visual_action=VisualAction.ADD_NODE,
    ),
    Concept(
        id="pod",
        title="Pod",
        analogy="The Shipping Container",
        description="The smallest deployable unit. Usually wraps one application container (like a box inside the shipping container). Pods live on Nodes.",
        visual_action=VisualAction.ADD_POD,
    ),
    Concept(
        id="deployment",
        title="Deployment",
        analogy="The Crane Operator / Manifest",
        description="Ensures the right number of containers are always present. If a container falls overboard (crashes), the Deployment orders a new one.",
        visual_action=VisualAction.SCALE_UP,
    ),
    Concept(
        id="service",
        title="Service",
        analogy="The Dispatch Office",
        description="Provides a permanent phone number (IP address) to reach a set of Pods, even if the Pods themselves change or move ships.",
    ),
    Concept(
        id="ingress",
        title="Ingress",
        analogy="The Port Gate",
        description="Manages external access to the services in the cluster, typically HTTP. It routes traffic from the outside world to the correct Service.",
    ),
    Concept(
        id="configmap",
        title="ConfigMap",
        analogy="The Instruction Label",
        description='Configuration data (like DB URLs) decoupled from container images, so you can change settings without rebuilding the "box".',
    ),
    Concept(
        id="secret",
        title="Secret",
        analogy="The Safe",
        description="Similar to ConfigMaps but specifically for sensitive info like passwords or keys. Keeps them locked away securely.",
    ),
]

_BY_ID: Dict[str, Concept] = {c.id: c for c in K8S_CONCEPTS}


def list_concepts() -> List[Concept]:
    return list(K8S_CONCEPTS)


def get_concept(concept_id: str) -> Concept:
    try:
        return _BY_ID[concept_id]
    except KeyError:
        raise UnknownConceptError(concept_id) from None


def tutor_context(concept: Concept) -> str:
    """Describes what the learner is looking at, for the tutor prompt."""
    return (
        f"The user is currently learning about the Kubernetes {concept.title} "
        f"(Analogy: {concept.analogy}). Description: {concept.description}"
    )
