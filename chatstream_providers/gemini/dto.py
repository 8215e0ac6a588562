"""
Pydantic DTOs for the Gemini ``streamGenerateContent`` request body.

Field names follow the REST API's snake_case aliases (``system_instruction``,
``generation_config``, ``thinking_config``), which the endpoint accepts.
"""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class PartDTO(BaseModel):
    text: str


class ContentDTO(BaseModel):
    """One conversation turn; ``model`` is Gemini's name for the assistant."""

    role: Literal["user", "model"]
    parts: List[PartDTO]


class SystemInstructionDTO(BaseModel):
    parts: List[PartDTO]


class ThinkingConfigDTO(BaseModel):
    thinking_budget: int = 0


class GenerationConfigDTO(BaseModel):
    thinking_config: Optional[ThinkingConfigDTO] = None


class GenerateContentRequestDTO(BaseModel):
    """Request body; ``system_instruction`` is omitted when ``None``."""

    system_instruction: Optional[SystemInstructionDTO] = None
    contents: List[ContentDTO] = Field(..., min_length=1)
    generation_config: GenerationConfigDTO = Field(default_factory=GenerationConfigDTO)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


__all__ = [
    "PartDTO",
    "ContentDTO",
    "SystemInstructionDTO",
    "ThinkingConfigDTO",
    "GenerationConfigDTO",
    "GenerateContentRequestDTO",
]
