"""
Error envelope shared by every 4xx/5xx response, for the OpenAPI docs.
"""
from typing import Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """`{code, message, details}` as produced by app.core.errors."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None
