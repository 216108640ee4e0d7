"""
Response models for operations and the HTTP surface
"""

from typing import Optional, List
from pydantic import BaseModel, Field


class OperationResponse(BaseModel):
    """Result of a user-facing action"""
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    """Error response model"""
    message: str
    error_code: Optional[str] = None


class BatchAppendResult(BaseModel):
    """Outcome of a chunked append"""
    requested: int = 0
    added: int = 0
    failures: List[str] = Field(default_factory=list)

    @property
    def partial(self) -> bool:
        return self.added < self.requested
