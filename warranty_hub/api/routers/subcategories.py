# warranty_hub/api/routers/subcategories.py
from typing import List

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from warranty_hub.api.deps import http_error, require_admin
from warranty_hub.data.database import get_db
from warranty_hub.domain.errors import ServiceError
from warranty_hub.domain.schemas import SubcategoryIn, SubcategoryOut
from warranty_hub.services.category_service import SubcategoryService

router = APIRouter(prefix="/subcategories", tags=["subcategories"])


def get_service(db: Session):
    return SubcategoryService(db)


@router.get("", response_model=List[SubcategoryOut])
def list_subcategories(db: Session = Depends(get_db)):
    return get_service(db).list_subcategories()


@router.get("/{subcategory_id}", response_model=SubcategoryOut)
def get_subcategory(subcategory_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return svc.to_dict(svc.get_subcategory(subcategory_id))
    except ServiceError as e:
        raise http_error(e)


@router.post("", response_model=SubcategoryOut, status_code=201, dependencies=[Depends(require_admin)])
def create_subcategory(payload: SubcategoryIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        sub = svc.create_subcategory(payload.name.strip(), payload.category_id)
        return svc.to_dict(sub)
    except ServiceError as e:
        raise http_error(e)


@router.put("/{subcategory_id}", response_model=SubcategoryOut, dependencies=[Depends(require_admin)])
def update_subcategory(subcategory_id: int, payload: SubcategoryIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        sub = svc.update_subcategory(subcategory_id, payload.name.strip(), payload.category_id)
        return svc.to_dict(sub)
    except ServiceError as e:
        raise http_error(e)


@router.delete("/{subcategory_id}", status_code=204, dependencies=[Depends(require_admin)])
def delete_subcategory(subcategory_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        svc.delete_subcategory(subcategory_id)
    except ServiceError as e:
        raise http_error(e)
    return Response(status_code=204)
