"""Knowledge area schemas."""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from questionbank.models.knowledge_area import AREA_NAME_MAX_LENGTH, AREA_NAME_MIN_LENGTH


class KnowledgeAreaName(BaseModel):
    """Base schema carrying a validated area name."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(
        ...,
        min_length=AREA_NAME_MIN_LENGTH,
        max_length=AREA_NAME_MAX_LENGTH,
        description="Display name, unique among the siblings of this area"
    )

    @field_validator('name', mode='before')
    @classmethod
    def strip_name(cls, v):
        """Names are compared and stored without surrounding whitespace."""
        if isinstance(v, str):
            return v.strip()
        return v


class KnowledgeAreaCreate(KnowledgeAreaName):
    """Schema for creating a top-level or child knowledge area."""


class KnowledgeAreaUpdate(KnowledgeAreaName):
    """Schema for renaming and/or moving a knowledge area."""
    parent_id: Optional[int] = Field(
        ...,
        alias="parentId",
        description="New parent area ID (null moves the area to the top level)"
    )


class KnowledgeAreaSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str


class KnowledgeAreaResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    name: str
    parent_id: Optional[int] = Field(None, alias="parentId")


class KnowledgeAreaList(BaseModel):
    areas: List[KnowledgeAreaSummary]


class KnowledgeAreaCreated(BaseModel):
    id: int


class ChildOfKnowledgeArea(BaseModel):
    """A child area or topic as listed under its parent area."""
    id: int
    name: str
    type: Literal["area", "topic"]


class KnowledgeAreaChildren(BaseModel):
    children: List[ChildOfKnowledgeArea]


class KnowledgeAreaAncestors(BaseModel):
    ancestors: List[KnowledgeAreaResponse]
