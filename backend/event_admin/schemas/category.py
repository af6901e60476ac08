"""Pydantic schemas for meeting categories and event categories."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, computed_field, field_validator


class CategoryCreate(BaseModel):
    id: Optional[str] = None
    name: str

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be empty")
        return value


class CategoryUpdate(CategoryCreate):
    pass


class Category(BaseModel):
    id: str
    name: str
    is_active: bool = True
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeletionInfo(BaseModel):
    """What references a meeting category. Meetings block deletion; the rest are dropped."""
    category: Category
    meetings: list[str] = []
    participants: list[str] = []
    events: list[str] = []

    @computed_field
    @property
    def blocked(self) -> bool:
        return len(self.meetings) > 0

    @computed_field
    @property
    def has_soft_dependencies(self) -> bool:
        return len(self.participants) > 0 or len(self.events) > 0
