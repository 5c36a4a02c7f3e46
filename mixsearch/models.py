"""
Pydantic models shared by the service layer.

- Document: what a DocumentSource returns
- BuildIndexResponse: result of a full index rebuild
- SearchResult / SearchResponse: ranked search output
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Unique document id")
    content: str = Field(default="", description="Extracted plain text")
    source: str = Field(default="local", description='Source category used for scoping ("local" | "remote")')
    title: str = Field(default="")


class BuildIndexResponse(BaseModel):
    success: bool
    message: str
    indexed_count: int = 0
    total_terms: int = 0
    avg_doc_length: float = 0.0
    skipped_count: int = Field(default=0, description="Documents skipped because tokenization failed")


class SearchResult(BaseModel):
    doc_id: str
    title: str
    snippet: str
    score: float = Field(..., description="Blended score in [0, 1]")
    bm25_score: float = Field(..., description="Normalized lexical component")
    embedding_score: float = Field(..., description="Normalized semantic component (0 when disabled)")
    source: str


class SearchResponse(BaseModel):
    query: str
    scope: str
    total_results: int
    elapsed: str = Field(default="0ms", description="Wall-clock time, e.g. '12ms'")
    results: List[SearchResult] = Field(default_factory=list)
    error: Optional[str] = None
