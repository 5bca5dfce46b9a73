"""Pydantic schemas used across the project."""
from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str = "healthy"
    timestamp: str


class StatusResponse(BaseModel):
    status: str = "healthy"
    version: str
    commit: str
    database: Literal["connected", "unavailable"]


__all__ = ["HealthResponse", "StatusResponse"]
