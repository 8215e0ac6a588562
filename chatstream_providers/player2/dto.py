"""Pydantic DTOs for the Player2 companion app's local endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LocalLoginResponse(BaseModel):
    """Response of ``POST /v1/login/web/{client_id}``; unknown fields are ignored."""

    model_config = ConfigDict(populate_by_name=True)

    p2_key: Optional[str] = Field(default=None, alias="p2Key")


__all__ = ["LocalLoginResponse"]
