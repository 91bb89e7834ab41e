# warranty_hub/api/routers/serials.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from warranty_hub.api.deps import http_error, require_admin
from warranty_hub.data.database import get_db
from warranty_hub.domain.errors import ServiceError
from warranty_hub.domain.schemas import (
    AvailabilityOut,
    SerialsIn,
    SerialsBulkIn,
    SerialUpdateIn,
    SerialListOut,
    SerialsAddedOut,
    SerialUpdatedOut,
    SerialDeletedOut,
)
from warranty_hub.domain.serials import split_csv
from warranty_hub.services.serial_service import SerialService
from warranty_hub.utils.settings import SERIALS_PER_REQUEST, SERIALS_PER_BULK_REQUEST

router = APIRouter(tags=["serials"])


def get_service(db: Session):
    return SerialService(db)


def _check_batch_size(serials: List[str], limit: int, empty_message: str, limit_message: str):
    if not serials:
        raise HTTPException(status_code=400, detail=empty_message)
    if len(serials) > limit:
        raise HTTPException(status_code=400, detail=limit_message)


@router.get("/serials/check/{serial}", response_model=AvailabilityOut)
def check_serial(serial: str, db: Session = Depends(get_db)):
    """
    Czy kod jest wolny do utworzenia nowego seriala (publiczne).
    """
    return get_service(db).check_availability(serial)


@router.get("/products/{product_id}/serials", response_model=SerialListOut, dependencies=[Depends(require_admin)])
def list_serials(product_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        return {"serials": svc.list_serials(product_id), "statistics": svc.stats(product_id)}
    except ServiceError as e:
        raise http_error(e)


@router.post(
    "/products/{product_id}/serials",
    response_model=SerialsAddedOut,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def add_serials(product_id: int, payload: SerialsIn, db: Session = Depends(get_db)):
    _check_batch_size(
        payload.serials,
        SERIALS_PER_REQUEST,
        "Serials array is required and cannot be empty",
        f"Cannot add more than {SERIALS_PER_REQUEST} serials at once",
    )
    svc = get_service(db)
    try:
        result = svc.add_serials(product_id, payload.serials)
    except ServiceError as e:
        raise http_error(e)
    return {"message": f"Successfully added {result['added']} serial numbers", **result}


@router.post(
    "/products/{product_id}/serials/bulk",
    response_model=SerialsAddedOut,
    status_code=201,
    dependencies=[Depends(require_admin)],
)
def bulk_add_serials(product_id: int, payload: SerialsBulkIn, db: Session = Depends(get_db)):
    """
    Import hurtowy: `csvData` (przecinek / średnik / nowa linia) ma
    pierwszeństwo przed `serials`.
    """
    serials = split_csv(payload.csvData) if payload.csvData else (payload.serials or [])
    _check_batch_size(
        serials,
        SERIALS_PER_BULK_REQUEST,
        "No valid serials provided",
        f"Bulk import limited to {SERIALS_PER_BULK_REQUEST} serials per request",
    )
    svc = get_service(db)
    try:
        result = svc.add_serials(product_id, serials)
    except ServiceError as e:
        raise http_error(e)
    return {"message": f"Bulk import successful: {result['added']} serials added", **result}


@router.put(
    "/products/{product_id}/serials/{serial_id}",
    response_model=SerialUpdatedOut,
    dependencies=[Depends(require_admin)],
)
def update_serial(product_id: int, serial_id: int, payload: SerialUpdateIn, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        result = svc.update_serial_code(product_id, serial_id, payload.serial)
    except ServiceError as e:
        raise http_error(e)
    return {"message": "Serial number updated successfully", **result}


@router.delete(
    "/products/{product_id}/serials/{serial_id}",
    response_model=SerialDeletedOut,
    dependencies=[Depends(require_admin)],
)
def delete_serial(product_id: int, serial_id: int, db: Session = Depends(get_db)):
    svc = get_service(db)
    try:
        result = svc.delete_serial(product_id, serial_id)
    except ServiceError as e:
        raise http_error(e)
    return {"message": f"Serial number '{result['deleted']}' deleted successfully", **result}
