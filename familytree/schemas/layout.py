from pydantic import BaseModel
from typing import List, Optional
from familytree.models.person import Gender
import enum

class EdgeKind(str, enum.Enum):
    PATERNAL = "paternal"
    MATERNAL = "maternal"
    SPOUSE = "spouse"

class LayoutNode(BaseModel):
    id: int
    generation: int
    x: float
    y: float
    label: str
    gender: Optional[Gender] = None

class LayoutEdge(BaseModel):
    id: str
    source: int
    target: int
    kind: EdgeKind

class TreeLayout(BaseModel):
    nodes: List[LayoutNode] = []
    edges: List[LayoutEdge] = []
