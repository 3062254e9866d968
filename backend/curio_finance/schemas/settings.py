from pydantic import BaseModel
from typing import Optional


class AvailableProvider(BaseModel):
    id: str
    requires_key: bool
    supports_chat: bool
    supports_insights: bool
    supports_function_calling: bool
    supports_streaming: bool
    max_tokens: int
    default_model: Optional[str] = None
    default_base_url: Optional[str] = None


class LLMSettingsResponse(BaseModel):
    default_provider: str
    temperature: float
    max_tokens: int
