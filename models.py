"""Data model for the contacts graph: people, weighted edges and the graph root."""

from typing import Any, List, Literal, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

GRAPH_TYPE = "contact_graph"


class ContactRecord(NamedTuple):
    """One accepted leak row, trimmed, in column order."""
    owner_name: str
    owner_phone: str
    contact_name: str
    contact_phone: str
    owner_location: str


class StepConfig(BaseModel):
    """Configuration handed to the step by the orchestrator."""
    model_config = ConfigDict(extra="ignore")

    leak: str = Field(description="Path to the leak CSV, absolute or relative.")

    @field_validator("leak")
    @classmethod
    def _leak_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("config.leak is required")
        return v


class Person(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    phone: str = Field(min_length=1)
    # None for contact-only people and owners with a blank location
    location: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)

    owner_phone: str = Field(min_length=1)
    contact_phone: str = Field(min_length=1)
    weight: int = Field(ge=1)


class GraphMeta(BaseModel):
    model_config = ConfigDict(frozen=True)

    source: str
    rows: int = Field(ge=0)
    type: Literal["contact_graph"] = GRAPH_TYPE


class ContactGraph(BaseModel):
    """
    Directed contact graph keyed by phone number.

    Node and edge order carries no meaning; only the uniqueness of phones
    and of (owner_phone, contact_phone) pairs is guaranteed.
    """
    model_config = ConfigDict(frozen=True)

    nodes: List[Person]
    edges: List[Edge]
    meta: GraphMeta

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [p.to_dict() for p in self.nodes],
            "edges": [e.model_dump() for e in self.edges],
            "meta":  self.meta.model_dump(),
        }
