# warranty_hub/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional
from decimal import Decimal
from datetime import datetime


# =====================================================
# AUTH
# =====================================================
class LoginIn(BaseModel):
    """Schema dla logowania administratora."""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class TokenOut(BaseModel):
    token: str


class AdminIdentity(BaseModel):
    """Tożsamość administratora odczytana z tokenu."""

    id: int
    email: str


# =====================================================
# CATALOG
# =====================================================
class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Nazwa kategorii")


class CategoryOut(BaseModel):
    id: int
    name: str
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class SubcategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category_id: int = Field(..., gt=0, description="ID kategorii nadrzędnej (musi być > 0)")


class SubcategoryOut(BaseModel):
    id: int
    name: str
    category_id: int
    category_name: str | None = None
    created_at: datetime | None = None


# =====================================================
# PRODUCTS
# =====================================================
class ProductFields(BaseModel):
    """Pola produktu z formularza (multipart); walidację robi router."""

    name: str
    description: str | None = None
    price: Decimal
    quantity: int | None = None
    category_id: int
    subcategory_id: int | None = None


class ProductOut(BaseModel):
    """Schema dla produktu (response). images to podpisane, czasowe URL-e."""

    id: int
    name: str
    description: str | None = None
    price: Decimal
    quantity: int
    category_id: int
    category_name: str | None = None
    subcategory_id: int | None = None
    subcategory_name: str | None = None
    created_at: datetime
    images: List[str] = []


class ProductCreatedOut(BaseModel):
    id: int


class ProductDeletedOut(BaseModel):
    product_name: str


# =====================================================
# SERIALS
# =====================================================
class SerialsIn(BaseModel):
    """Schema dla dodawania seriali do istniejącego produktu."""

    serials: List[str] = []


class SerialsBulkIn(BaseModel):
    """Import hurtowy: lista albo tekst CSV (przecinek, średnik, nowa linia)."""

    serials: Optional[List[str]] = None
    csvData: Optional[str] = None


class SerialUpdateIn(BaseModel):
    serial: str = Field(..., min_length=1)


class SerialOut(BaseModel):
    id: int
    serial: str
    is_used: bool
    created_at: datetime
    status: str
    user_name: str | None = None
    registered_at: datetime | None = None


class SerialStatsOut(BaseModel):
    total: int
    used: int
    available: int


class SerialListOut(BaseModel):
    serials: List[SerialOut]
    statistics: SerialStatsOut


class SerialsAddedOut(BaseModel):
    message: str
    added: int
    serials: List[str]


class SerialUpdatedOut(BaseModel):
    message: str
    id: int
    old_serial: str
    new_serial: str


class SerialDeletedOut(BaseModel):
    message: str
    deleted: str


class SerialDetails(BaseModel):
    id: int
    product_id: int
    product_name: str
    category_name: str
    is_used: bool


class AvailabilityOut(BaseModel):
    available: bool
    exists: bool
    details: SerialDetails | None = None


# =====================================================
# WARRANTY
# =====================================================
class SerialContext(BaseModel):
    """Kontekst seriala potrzebny do wypełnienia formularza gwarancji."""

    serial_number_id: int
    product_id: int
    product_name: str
    category_id: int
    category_name: str


class SerialContextOut(BaseModel):
    product_id: int
    product_name: str
    category_id: int
    category_name: str


class WarrantyRegisterIn(BaseModel):
    """Schema dla rejestracji gwarancji."""

    serial: str = Field(..., min_length=1)
    product_id: int = Field(..., gt=0, description="ID produktu (musi być > 0)")
    user_name: str = Field(..., min_length=1, max_length=255)
    user_email: str = Field(..., min_length=3, max_length=255)
    user_phone: str = Field(..., min_length=1, max_length=64)


class WarrantyRegisteredOut(BaseModel):
    message: str
    registration_id: int


class WarrantyStatusIn(BaseModel):
    # accepted | rejected, inne wartości odrzuca serwis (InvalidStatus)
    status: str


class WarrantyStatusOut(BaseModel):
    message: str
    id: int
    status: str


class RegistrationOut(BaseModel):
    id: int
    serial: str
    product_id: int
    product_name: str
    category_id: int
    category_name: str
    user_name: str
    user_email: str
    user_phone: str
    registered_at: datetime
    status: str


# =====================================================
# CONTACT
# =====================================================
class ContactIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    phone: str = Field(..., min_length=1, max_length=64)
    message: str = Field(..., min_length=1)


class ContactCreatedOut(BaseModel):
    message: str
    id: int


class ContactOut(BaseModel):
    id: int
    name: str
    email: str
    phone: str
    message: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
