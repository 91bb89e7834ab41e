# warranty_hub/api/routers/products.py
import json
from decimal import Decimal
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from sqlalchemy.orm import Session

from warranty_hub.api.deps import get_image_store, http_error, require_admin
from warranty_hub.data.database import get_db
from warranty_hub.domain.errors import ServiceError
from warranty_hub.domain.schemas import ProductCreatedOut, ProductDeletedOut, ProductFields, ProductOut
from warranty_hub.services.image_store import ImageStore
from warranty_hub.services.product_service import ProductService
from warranty_hub.utils.settings import IMAGE_MAX_BYTES, IMAGE_MAX_FILES
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session, image_store: ImageStore):
    return ProductService(db, image_store)


def parse_serials(raw: str | None) -> List[str] | None:
    """Pole `serials` formularza to tablica JSON zapisana jako tekst."""
    if raw is None or raw.strip() == "":
        return None
    try:
        serials = json.loads(raw)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid serials format")
    if not isinstance(serials, list) or not all(isinstance(s, str) for s in serials):
        raise HTTPException(status_code=400, detail="Invalid serials format")
    return serials


def upload_images(files: List[UploadFile] | None, image_store: ImageStore) -> List[str]:
    """
    Sprawdza wszystkie pliki przed wysłaniem pierwszego: tylko image/*,
    maks. IMAGE_MAX_BYTES na plik i IMAGE_MAX_FILES plików.
    """
    files = [f for f in (files or []) if f.filename]
    if len(files) > IMAGE_MAX_FILES:
        raise HTTPException(status_code=400, detail=f"Cannot upload more than {IMAGE_MAX_FILES} images at once")

    payloads = []
    for f in files:
        if not (f.content_type or "").startswith("image/"):
            raise HTTPException(status_code=400, detail=f"Only image uploads are allowed: {f.filename}")
        data = f.file.read()
        if len(data) > IMAGE_MAX_BYTES:
            raise HTTPException(status_code=400, detail=f"Image too large: {f.filename}")
        payloads.append((data, f.content_type, f.filename))

    return [image_store.put(data, content_type, filename) for data, content_type, filename in payloads]


def product_form(
    name: str = Form(..., min_length=1),
    description: Optional[str] = Form(None),
    price: Decimal = Form(..., ge=0),
    quantity: Optional[int] = Form(None, ge=0),
    category_id: int = Form(..., gt=0),
    subcategory_id: Optional[int] = Form(None),
) -> ProductFields:
    return ProductFields(
        name=name.strip(),
        description=description,
        price=price,
        quantity=quantity,
        category_id=category_id,
        # formularze wysyłają 0 / puste pole, gdy podkategoria nie jest wybrana
        subcategory_id=subcategory_id or None,
    )


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db), image_store: ImageStore = Depends(get_image_store)):
    """
    Lista produktów (najnowsze pierwsze); zdjęcia jako podpisane URL-e.
    """
    return get_service(db, image_store).list_products()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    svc = get_service(db, image_store)
    try:
        return svc.get_product(product_id)
    except ServiceError as e:
        raise http_error(e)


@router.post("", response_model=ProductCreatedOut, status_code=201, dependencies=[Depends(require_admin)])
def create_product(
    fields: ProductFields = Depends(product_form),
    serials: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """
    Tworzy produkt ze zdjęciami i serialami (multipart/form-data).
    Produkt, zdjęcia i seriale zapisywane są w jednej transakcji.
    """
    codes = parse_serials(serials) or []
    keys = upload_images(images, image_store)

    svc = get_service(db, image_store)
    try:
        return {"id": svc.create(fields, codes, keys)}
    except ServiceError as e:
        if keys:
            logger.warning(f"Product '{fields.name}' not created, {len(keys)} uploaded image(s) left unreferenced")
        raise http_error(e)


@router.put("/{product_id}", response_model=ProductCreatedOut, dependencies=[Depends(require_admin)])
def update_product(
    product_id: int,
    fields: ProductFields = Depends(product_form),
    serials: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """
    Aktualizuje produkt. Przesłane `serials` ZASTĘPUJĄ całą pulę seriali
    produktu (razem z jego rejestracjami gwarancyjnymi).
    """
    codes = parse_serials(serials)
    keys = upload_images(images, image_store)

    svc = get_service(db, image_store)
    try:
        return svc.update(product_id, fields, serial_codes=codes, image_keys=keys)
    except ServiceError as e:
        raise http_error(e)


@router.delete("/{product_id}", response_model=ProductDeletedOut, dependencies=[Depends(require_admin)])
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    image_store: ImageStore = Depends(get_image_store),
):
    """
    Usuwa produkt razem z serialami, zdjęciami i rejestracjami.
    409, jeśli produkt ma zaakceptowane gwarancje.
    """
    svc = get_service(db, image_store)
    try:
        return svc.delete(product_id)
    except ServiceError as e:
        raise http_error(e)
