# ============================================================================
# FILE: vidtube/schemas/common.py
# ============================================================================
from typing import Annotated, Any, List, Optional
from pydantic import BaseModel, ConfigDict, StringConstraints
from pydantic.alias_generators import to_camel

# Trimmed, non-empty text
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

class ApiResponse(CamelModel):
    """Envelope used by every endpoint"""
    status_code: int = 200
    data: Any = None
    message: str = "Success"
    success: bool = True
    errors: Optional[List[Any]] = None

def api_response(data: Any = None, message: str = "Success", status_code: int = 200) -> ApiResponse:
    return ApiResponse(
        status_code=status_code,
        data=data,
        message=message,
        success=status_code < 400,
    )
