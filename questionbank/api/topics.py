"""Topic API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status

from questionbank.api.errors import get_hierarchy_service, http_error
from questionbank.core.errors import HierarchyError
from questionbank.core.hierarchy_rules import HierarchyService
from questionbank.models.topic import Topic
from questionbank.schemas.topic import (
    TopicCreate,
    TopicCreated,
    TopicDetail,
    TopicList,
    TopicResponse,
    TopicUpdate,
)

router = APIRouter()


def topic_to_response(topic: Topic) -> TopicResponse:
    return TopicResponse(area_id=topic.area_id, topic_id=topic.id, topic_name=topic.name)


@router.get("/", response_model=TopicList)
def get_topics(
    area_id: Optional[int] = Query(None, alias="areaId", description="Only topics under this area"),
    topic_name: Optional[str] = Query(None, alias="topicName", description="Topic name prefix"),
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Search topics by area and/or name prefix."""
    topics = service.find_topics(area_id, topic_name)
    return {"topics": [topic_to_response(t) for t in topics]}


@router.post("/", response_model=TopicCreated, status_code=status.HTTP_201_CREATED)
def create_topic(
    topic_data: TopicCreate,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Create a topic under a knowledge area."""
    try:
        topic_id = service.create_topic(topic_data.topic_name, topic_data.area_id)
    except HierarchyError as e:
        raise http_error(e)
    return TopicCreated(topic_id=topic_id)


@router.get("/{topic_id}", response_model=TopicDetail)
def get_topic(
    topic_id: int,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Get a topic along with the names of the areas above it."""
    try:
        topic = service.get_topic(topic_id)
    except HierarchyError as e:
        raise http_error(e)
    return TopicDetail(
        area_id=topic.area_id,
        topic_id=topic.id,
        topic_name=topic.name,
        path=service.get_topic_path(topic)
    )


@router.put("/{topic_id}", status_code=status.HTTP_200_OK)
def update_topic(
    topic_id: int,
    topic_data: TopicUpdate,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Rename and/or move a topic to another knowledge area."""
    try:
        service.update_topic(topic_id, topic_data.topic_name, topic_data.area_id)
    except HierarchyError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_topic(
    topic_id: int,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    try:
        service.delete_topic(topic_id)
    except HierarchyError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
