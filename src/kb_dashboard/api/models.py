"""Response payloads returned by the knowledge-base backend."""

from __future__ import annotations

from pydantic import BaseModel, Field


class DocumentStats(BaseModel):
    doc_id: int
    title: str
    total_chunks: int
    total_entities: int
    total_relationships: int
    created_at: str
    file_type: str
    status: str


class KBStats(BaseModel):
    total_documents: int
    total_chunks: int
    total_entities: int
    total_relationships: int
    documents: list[DocumentStats] = Field(default_factory=list)
    last_updated: str


class KBDataResponse(BaseModel):
    stats: KBStats
    execution_time: float


class GraphNode(BaseModel):
    id: str
    name: str
    category: str
    val: float = 1.0


class GraphLink(BaseModel):
    source: str
    target: str
    value: float = 1.0


class GraphData(BaseModel):
    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)


class GraphResponse(BaseModel):
    data: GraphData
    categories: list[str] = Field(default_factory=list)


class UploadResponse(BaseModel):
    task_id: str | None = None
    doc_id: int | None = None
    status: str
    message: str | None = None

    @property
    def started(self) -> bool:
        return self.status == "started"
