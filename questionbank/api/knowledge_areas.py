"""Knowledge area API routes."""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Response, status

from questionbank.api.errors import get_hierarchy_service, http_error
from questionbank.core.errors import HierarchyError
from questionbank.core.hierarchy_rules import HierarchyService
from questionbank.core.hierarchy_types import SiblingKind
from questionbank.models.knowledge_area import AREA_NAME_MAX_LENGTH
from questionbank.schemas.knowledge_area import (
    ChildOfKnowledgeArea,
    KnowledgeAreaAncestors,
    KnowledgeAreaChildren,
    KnowledgeAreaCreate,
    KnowledgeAreaCreated,
    KnowledgeAreaList,
    KnowledgeAreaResponse,
    KnowledgeAreaSummary,
    KnowledgeAreaUpdate,
)

router = APIRouter()


@router.get("/toplevel", response_model=KnowledgeAreaList)
def get_top_level_knowledge_areas(
    name_filter: Optional[str] = Query(
        None, alias="nameFilter", max_length=AREA_NAME_MAX_LENGTH,
        description="Case-insensitive substring of the area name"
    ),
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """List top-level knowledge areas ordered by name."""
    areas = service.get_top_level_areas(name_filter)
    return {"areas": [KnowledgeAreaSummary.model_validate(a) for a in areas]}


@router.post("/toplevel", response_model=KnowledgeAreaCreated, status_code=status.HTTP_201_CREATED)
def create_top_level_knowledge_area(
    area_data: KnowledgeAreaCreate,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Create a knowledge area with no parent."""
    try:
        area_id = service.create_area(area_data.name, None)
    except HierarchyError as e:
        raise http_error(e)
    return {"id": area_id}


@router.post("/{area_id}", response_model=KnowledgeAreaCreated, status_code=status.HTTP_201_CREATED)
def create_child_knowledge_area(
    area_id: int,
    area_data: KnowledgeAreaCreate,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Create a knowledge area under the area `area_id`."""
    try:
        child_id = service.create_area(area_data.name, area_id)
    except HierarchyError as e:
        raise http_error(e)
    return {"id": child_id}


@router.get("/{area_id}", response_model=KnowledgeAreaResponse)
def get_knowledge_area(
    area_id: int,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    try:
        area = service.get_area(area_id)
    except HierarchyError as e:
        raise http_error(e)
    return KnowledgeAreaResponse.model_validate(area)


@router.put("/{area_id}", status_code=status.HTTP_200_OK)
def update_knowledge_area(
    area_id: int,
    area_data: KnowledgeAreaUpdate,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """
    Rename and/or move a knowledge area.

    - **parentId**: new parent, or null to make the area top-level
    """
    try:
        service.update_area(area_id, area_data.name, area_data.parent_id)
    except HierarchyError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_200_OK)


@router.delete("/{area_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_knowledge_area(
    area_id: int,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Delete a knowledge area. Fails while it still has child areas or topics."""
    try:
        service.delete_area(area_id)
    except HierarchyError as e:
        raise http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{area_id}/children", response_model=KnowledgeAreaChildren)
def get_children_of_knowledge_area(
    area_id: int,
    name_filter: Optional[str] = Query(
        None, alias="nameFilter", max_length=AREA_NAME_MAX_LENGTH,
        description="Case-insensitive substring of the child name"
    ),
    type: Optional[SiblingKind] = Query(None, description="Only list children of this type"),
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """List child areas (first) and topics of a knowledge area, each ordered by name."""
    try:
        children = service.get_children(area_id, name_filter, type)
    except HierarchyError as e:
        raise http_error(e)

    result = [
        ChildOfKnowledgeArea(id=a.id, name=a.name, type=SiblingKind.AREA.value)
        for a in children.areas
    ]
    result.extend(
        ChildOfKnowledgeArea(id=t.id, name=t.name, type=SiblingKind.TOPIC.value)
        for t in children.topics
    )
    return {"children": result}


@router.get("/{area_id}/ancestors", response_model=KnowledgeAreaAncestors)
def get_ancestors_of_knowledge_area(
    area_id: int,
    service: HierarchyService = Depends(get_hierarchy_service)
):
    """Get the ancestor chain of a knowledge area, root first, excluding the area itself."""
    try:
        ancestors = service.get_area_ancestors(area_id)
    except HierarchyError as e:
        raise http_error(e)
    return {"ancestors": [KnowledgeAreaResponse.model_validate(a) for a in ancestors]}
