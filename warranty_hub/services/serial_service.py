# warranty_hub/services/serial_service.py
from typing import List, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warranty_hub.domain.errors import NotFound, InvalidFormat, Conflict
from warranty_hub.domain.serials import normalize_serial, normalize_batch, is_valid_serial
from warranty_hub.repos.product_repo import ProductRepo
from warranty_hub.repos.serial_repo import SerialRepo
from warranty_hub.repos.warranty_repo import WarrantyRepo
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


class SerialService:
    """
    Pula numerów seryjnych produktu.

    Pilnuje formatu i globalnej unikalności kodów oraz tego, że
    products.quantity jest zawsze równe liczbie seriali produktu.
    Każda operacja zapisu to jedna transakcja: insert/delete razem z
    przeliczeniem quantity.
    """

    def __init__(self, db: Session):
        self.repo = SerialRepo(db)
        self.products = ProductRepo(db)
        self.warranties = WarrantyRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def list_serials(self, product_id: int) -> List[dict]:
        if not self.products.get(product_id):
            raise NotFound("Product not found")

        serials = self.repo.list_for_product(product_id)
        latest = self.warranties.latest_for_serials(s.id for s in serials)

        result = []
        for s in serials:
            reg = latest.get(s.id)
            result.append(
                {
                    "id": s.id,
                    "serial": s.serial,
                    "is_used": s.is_used,
                    "created_at": s.created_at,
                    "status": "registered" if reg else "available",
                    "user_name": reg.user_name if reg else None,
                    "registered_at": reg.registered_at if reg else None,
                }
            )
        return result

    def stats(self, product_id: int) -> dict:
        return self.repo.stats(product_id)

    def check_availability(self, raw_code: str) -> dict:
        """
        "available" = kod nie istnieje w bazie, więc można z nim utworzyć nowy serial.
        Czy istniejący serial da się jeszcze zarejestrować na gwarancję, mówi
        is_used w details.
        """
        code = normalize_serial(raw_code)
        row = self.repo.get_with_context(code)
        if row is None:
            return {"available": True, "exists": False, "details": None}

        serial, product, category = row
        return {
            "available": False,
            "exists": True,
            "details": {
                "id": serial.id,
                "product_id": product.id,
                "product_name": product.name,
                "category_name": category.name,
                "is_used": serial.is_used,
            },
        }

    # =====================================================
    # COMMANDS
    # =====================================================
    def prepare_codes(self, raw_codes: Sequence[str], exclude_product_id: int | None = None) -> List[str]:
        """
        Normalizuje partię kodów i odrzuca ją, jeśli któryś kod jest już zajęty.
        exclude_product_id pomija seriale produktu, którego pula zaraz zostanie
        podmieniona.
        """
        codes = normalize_batch(raw_codes)
        existing = self.repo.existing_codes(codes, exclude_product_id=exclude_product_id)
        if existing:
            raise Conflict(f"Serial(s) already exist: {', '.join(existing)}", codes=existing)
        return codes

    def insert_codes(self, product_id: int, codes: List[str]) -> int:
        """Dodaje przygotowane kody i przelicza quantity. Bez commita."""
        if codes:
            self.repo.add_many(product_id, codes)
        return self.repo.sync_product_quantity(product_id)

    def add_serials(self, product_id: int, raw_codes: Sequence[str]) -> dict:
        """
        Use Case: dodanie seriali do istniejącego produktu (addytywne).
        """
        product = self.products.get(product_id)
        if not product:
            raise NotFound("Product not found")

        codes = self.prepare_codes(raw_codes)

        try:
            quantity = self.insert_codes(product_id, codes)
            self.repo.commit()
        except IntegrityError:
            # równoległy insert wstawił ten sam kod, rozstrzyga unikalny indeks
            self.repo.rollback()
            taken = self.repo.existing_codes(codes) or codes
            logger.warning(f"Serial insert for product {product_id} hit unique index: {taken}")
            raise Conflict(f"Serial(s) already exist: {', '.join(taken)}", codes=taken)

        logger.info(f"Added {len(codes)} serials to product {product_id}, quantity={quantity}")

        return {"added": len(codes), "serials": codes}

    def delete_serial(self, product_id: int, serial_id: int) -> dict:
        serial = self.repo.get_for_product(product_id, serial_id)
        if not serial:
            raise NotFound("Serial number not found for this product")

        if self.warranties.references_serial(serial.id):
            raise Conflict(
                f"Cannot delete serial '{serial.serial}' - it has an active warranty registration",
                codes=[serial.serial],
            )

        code = serial.serial
        try:
            self.repo.delete(serial)
            quantity = self.repo.sync_product_quantity(product_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Deleted serial {code} from product {product_id}, quantity={quantity}")

        return {"deleted": code}

    def update_serial_code(self, product_id: int, serial_id: int, new_raw_code: str) -> dict:
        # TODO: ustalić z właścicielem produktu, czy wolno zmieniać kod seriala
        # z rejestracją gwarancyjną (delete_serial na to nie pozwala).
        code = normalize_serial(new_raw_code)
        if not is_valid_serial(code):
            raise InvalidFormat("Invalid serial number format", codes=[code])

        serial = self.repo.get_for_product(product_id, serial_id)
        if not serial:
            raise NotFound("Serial number not found for this product")

        if self.repo.code_taken_by_other(code, serial.id):
            raise Conflict(f"Serial '{code}' already exists", codes=[code])

        old_code = serial.serial
        serial.serial = code
        try:
            self.repo.flush()
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise Conflict(f"Serial '{code}' already exists", codes=[code])

        logger.info(f"Serial {serial_id} of product {product_id} renamed {old_code} -> {code}")

        return {"id": serial_id, "old_serial": old_code, "new_serial": code}
