from pydantic import BaseModel
from typing import Any, Dict, Optional


class AuthenticatedUser(BaseModel):
    user_id: int
    claims: Dict[str, Any] = {}


class APIResponse(BaseModel):
    message: str
    success: bool
    data: Optional[dict] = None
