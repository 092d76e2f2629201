"""Topic schemas."""
from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator

from questionbank.models.topic import TOPIC_NAME_MAX_LENGTH


class TopicBase(BaseModel):
    """Base schema for creating or updating a topic."""
    model_config = ConfigDict(populate_by_name=True)

    area_id: int = Field(..., alias="areaId", description="Knowledge area the topic belongs to")
    topic_name: str = Field(
        ...,
        alias="topicName",
        min_length=1,
        max_length=TOPIC_NAME_MAX_LENGTH
    )

    @field_validator('topic_name', mode='before')
    @classmethod
    def strip_topic_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class TopicCreate(TopicBase):
    pass


class TopicUpdate(TopicBase):
    pass


class TopicResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    area_id: int = Field(..., alias="areaId")
    topic_id: int = Field(..., alias="topicId")
    topic_name: str = Field(..., alias="topicName")


class TopicDetail(TopicResponse):
    """A topic with the names of the areas above it, root first."""
    path: List[str] = Field(default_factory=list)


class TopicList(BaseModel):
    topics: List[TopicResponse]


class TopicCreated(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    topic_id: int = Field(..., alias="topicId")
