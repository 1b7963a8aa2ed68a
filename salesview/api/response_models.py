"""
Pydantic response schemas for the API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    rows: int
    divisions: int
    branches: int
    brands: int
    items: int


class FilterOptionsResponse(BaseModel):
    divisions: list[str]
    departments: list[str]
    categories: list[str]
    branches: list[str]
    brands: list[str]
    items: list[str]


class LoadResponse(BaseModel):
    status: str
    rows: int
    source: Optional[str] = None
