"""Translation of domain errors into HTTP errors."""
from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from questionbank.core.database import get_db
from questionbank.core.errors import HierarchyError
from questionbank.core.hierarchy_rules import HierarchyService


def http_error(error: HierarchyError) -> HTTPException:
    """Build the HTTPException reported to the client for a domain error."""
    return HTTPException(
        status_code=error.status_code,
        detail=error.to_dict()
    )


def get_hierarchy_service(db: Session = Depends(get_db)) -> HierarchyService:
    return HierarchyService(db)
