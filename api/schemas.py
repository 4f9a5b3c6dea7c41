from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class FilterCriteriaModel(BaseModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    product: Optional[str] = None
    entity_name: Optional[str] = None


class AssistantRequest(BaseModel):
    question: str = Field(min_length=1)
    filters: FilterCriteriaModel = Field(default_factory=FilterCriteriaModel)
