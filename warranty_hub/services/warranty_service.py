# warranty_hub/services/warranty_service.py
from sqlalchemy.orm import Session

from warranty_hub.data.models.warranty_registration import WarrantyRegistrationModel
from warranty_hub.domain.errors import NotFound, AlreadyRegistered, Conflict, InvalidStatus
from warranty_hub.domain.schemas import SerialContext, WarrantyRegisterIn
from warranty_hub.domain.serials import normalize_serial
from warranty_hub.repos.serial_repo import SerialRepo
from warranty_hub.repos.warranty_repo import WarrantyRepo
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)

DECISION_STATUSES = ("accepted", "rejected")


class WarrantyService:
    """
    Rejestracje gwarancyjne i ich cykl życia.

    pending -> accepted (koniec), pending -> rejected (zwalnia serial),
    usunięcie z dowolnego stanu zwalnia serial. Zmiana statusu i flaga
    is_used seriala zapisywane są w jednej transakcji.
    """

    def __init__(self, db: Session):
        self.repo = WarrantyRepo(db)
        self.serials = SerialRepo(db)

    # =====================================================
    # QUERY
    # =====================================================
    def validate_serial(self, raw_code: str) -> SerialContext:
        """
        Use Case: sprawdzenie seriala przed rejestracją (publiczne).
        """
        code = normalize_serial(raw_code)
        row = self.serials.get_with_context(code)
        if row is None:
            raise NotFound("Serial number not found", codes=[code])

        serial, product, category = row
        if serial.is_used:
            raise AlreadyRegistered("Serial number already registered", codes=[code])

        return SerialContext(
            serial_number_id=serial.id,
            product_id=product.id,
            product_name=product.name,
            category_id=category.id,
            category_name=category.name,
        )

    def list_all(self):
        return [
            {
                "id": reg.id,
                "serial": serial,
                "product_id": product.id,
                "product_name": product.name,
                "category_id": category.id,
                "category_name": category.name,
                "user_name": reg.user_name,
                "user_email": reg.user_email,
                "user_phone": reg.user_phone,
                "registered_at": reg.registered_at,
                "status": reg.status,
            }
            for reg, serial, product, category in self.repo.list_with_context()
        ]

    # =====================================================
    # COMMANDS
    # =====================================================
    def register(self, payload: WarrantyRegisterIn) -> dict:
        """
        Use Case: rejestracja gwarancji.

        Serial jest walidowany ponownie, bo mógł zostać zajęty między
        sprawdzeniem po stronie klienta a wysłaniem formularza.
        """
        ctx = self.validate_serial(payload.serial)

        if ctx.product_id != payload.product_id:
            raise Conflict("Product mismatch for given serial", codes=[normalize_serial(payload.serial)])

        try:
            if not self.serials.claim(ctx.serial_number_id):
                raise AlreadyRegistered("Serial number already registered", codes=[normalize_serial(payload.serial)])
            registration = self.repo.create(
                WarrantyRegistrationModel(
                    serial_number_id=ctx.serial_number_id,
                    product_id=ctx.product_id,
                    user_name=payload.user_name,
                    user_email=payload.user_email,
                    user_phone=payload.user_phone,
                    status="pending",
                )
            )
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Warranty {registration.id} registered for serial {ctx.serial_number_id}")

        return {
            "registration_id": registration.id,
            "serial": normalize_serial(payload.serial),
            "product_name": ctx.product_name,
        }

    def set_status(self, registration_id: int, status: str) -> dict:
        if status not in DECISION_STATUSES:
            raise InvalidStatus("Invalid status")

        registration = self.repo.get(registration_id)
        if not registration:
            raise NotFound("Registration not found")

        # accepted i rejected są końcowe; rejected mógł już oddać serial komuś innemu
        if registration.status != "pending":
            raise Conflict(f"Registration is already {registration.status}")

        try:
            registration.status = status
            self.repo.flush()
            if status == "rejected":
                self.serials.set_used(registration.serial_number_id, False)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Warranty {registration_id} marked {status}")

        return {"id": registration_id, "status": status}

    def delete(self, registration_id: int):
        """
        Usuwa rejestrację i zawsze zwalnia serial, także gdy była już
        zaakceptowana.
        """
        registration = self.repo.get(registration_id)
        if not registration:
            raise NotFound("Registration not found")

        serial_id = registration.serial_number_id
        previous = registration.status
        try:
            self.repo.delete(registration)
            self.serials.set_used(serial_id, False)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        if previous == "accepted":
            logger.warning(f"Accepted warranty {registration_id} deleted, serial {serial_id} is free again")
        else:
            logger.info(f"Warranty {registration_id} ({previous}) deleted, serial {serial_id} freed")

    def contact_details(self, registration_id: int) -> dict:
        """Dane do powiadomienia: kto rejestrował i jaki serial."""
        registration = self.repo.get(registration_id)
        if not registration:
            raise NotFound("Registration not found")
        serial = self.serials.get(registration.serial_number_id)
        return {
            "user_name": registration.user_name,
            "user_email": registration.user_email,
            "serial": serial.serial if serial else "",
        }
