from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional


class GenerateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Optional here so a missing prompt gets the API's own 400 message
    prompt: Optional[str] = None
    context: Optional[str] = None
    max_results: Optional[int] = Field(default=None, alias="maxResults")


class GenerateResponse(BaseModel):
    code: str
    explanation: str
    components: List[str]
    context_used: List[str]


class RetrievedDocumentSchema(BaseModel):
    content: str
    metadata: Dict[str, str]
    score: float


class SearchResponse(BaseModel):
    results: List[RetrievedDocumentSchema]


class HealthResponse(BaseModel):
    status: str
    indexStats: Optional[dict] = None


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
