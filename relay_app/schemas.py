# relay_app/schemas.py
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ChatRequest(BaseModel):
    """Inbound body of ``POST /api/chat``. Presence checks happen in the service layer."""
    model_config = ConfigDict(extra='ignore')

    input: Optional[str] = ""
    sessionId: Optional[str] = None

    @field_validator('input', 'sessionId', mode='before')
    @classmethod
    def coerce_to_str(cls, v: Any) -> Optional[str]:
        if v is None: return None
        if isinstance(v, str): return v
        return str(v)
