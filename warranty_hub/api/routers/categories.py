# warranty_hub/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from warranty_hub.api.deps import http_error, require_admin
from warranty_hub.data.database import get_db
from warranty_hub.domain.errors import ServiceError
from warranty_hub.domain.schemas import CategoryIn, CategoryOut
from warranty_hub.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()


@router.get("/{category_id}", response_model=CategoryOut)
def get_category(category_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.get_category(category_id)
    except ServiceError as e:
        raise http_error(e)


@router.post("", response_model=CategoryOut, status_code=201, dependencies=[Depends(require_admin)])
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.create_category(payload.name.strip())
    except ServiceError as e:
        raise http_error(e)


@router.put("/{category_id}", response_model=CategoryOut, dependencies=[Depends(require_admin)])
def update_category(category_id: int, payload: CategoryIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.update_category(category_id, payload.name.strip())
    except ServiceError as e:
        raise http_error(e)


@router.delete("/{category_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    """
    Usuwa kategorię. 409, jeśli są do niej przypisane produkty.
    """
    svc = get_service(db)
    try:
        svc.delete_category(category_id)
    except ServiceError as e:
        raise http_error(e)
    return Response(status_code=204)
