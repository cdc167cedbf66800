"""Models for the RAG pipeline."""

from typing import Any, Dict, List, Union
from pydantic import BaseModel, ConfigDict, Field


PointId = Union[int, str]


class RetrievedPoint(BaseModel):
    """A document returned by the vector index, with its similarity score."""

    model_config = ConfigDict(frozen=True)

    id: PointId = Field(description="Point identifier in the index")
    score: float = Field(description="Similarity score from the provider")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Article metadata")


class Source(BaseModel):
    """A retrieved article as reported back to the caller."""

    id: PointId
    score: float
    payload: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_point(cls, point: RetrievedPoint) -> "Source":
        return cls(id=point.id, score=point.score, payload=dict(point.payload))


class AnswerPayload(BaseModel):
    """Answer to a query; the unit stored in the query cache."""

    answer: str = Field(description="Generated answer text")
    sources: List[Source] = Field(default_factory=list, description="Articles used as context")
    cached: bool = Field(default=False, description="True when served from cache")
