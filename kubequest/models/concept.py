# kubequest/models/concept.py
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class VisualAction(str, Enum):
    ADD_NODE = "ADD_NODE"
    ADD_POD = "ADD_POD"
    SCALE_UP = "SCALE_UP"


class Concept(BaseModel):
    """
    One learning module of the catalog.
    `visual_action` is a hint for the visualizer only; the cluster engine ignores it.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    analogy: str = Field(..., description="The layman term used by the shipping-port analogy")
    description: str
    visual_action: Optional[VisualAction] = None
