# warranty_hub/repos/warranty_repo.py
from typing import Iterable, List

from sqlalchemy import select, delete, func

from warranty_hub.data.models.category import CategoryModel
from warranty_hub.data.models.product import ProductModel
from warranty_hub.data.models.serial_number import SerialNumberModel
from warranty_hub.data.models.warranty_registration import WarrantyRegistrationModel
from warranty_hub.repos.base import BaseRepo


class WarrantyRepo(BaseRepo):

    def get(self, registration_id: int) -> WarrantyRegistrationModel | None:
        return self.db.get(WarrantyRegistrationModel, registration_id)

    def create(self, registration: WarrantyRegistrationModel) -> WarrantyRegistrationModel:
        self.db.add(registration)
        self.db.flush()
        return registration

    def delete(self, registration: WarrantyRegistrationModel):
        self.db.delete(registration)
        self.db.flush()

    def delete_for_product(self, product_id: int) -> int:
        res = self.db.execute(
            delete(WarrantyRegistrationModel)
            .where(WarrantyRegistrationModel.product_id == product_id)
            .execution_options(synchronize_session="fetch")
        )
        return res.rowcount

    def list_with_context(self):
        """Rows of (registration, serial code, product, category), newest first."""
        return self.db.execute(
            select(
                WarrantyRegistrationModel,
                SerialNumberModel.serial,
                ProductModel,
                CategoryModel,
            )
            .join(SerialNumberModel, WarrantyRegistrationModel.serial_number_id == SerialNumberModel.id)
            .join(ProductModel, WarrantyRegistrationModel.product_id == ProductModel.id)
            .join(CategoryModel, ProductModel.category_id == CategoryModel.id)
            .order_by(WarrantyRegistrationModel.registered_at.desc(), WarrantyRegistrationModel.id.desc())
        ).all()

    def references_serial(self, serial_id: int) -> bool:
        return self.db.execute(
            select(WarrantyRegistrationModel.id).where(WarrantyRegistrationModel.serial_number_id == serial_id)
        ).first() is not None

    def latest_for_serials(self, serial_ids: Iterable[int]) -> dict:
        """Maps serial id to its most recent registration."""
        serial_ids = list(serial_ids)
        if not serial_ids:
            return {}
        rows: List[WarrantyRegistrationModel] = list(
            self.db.execute(
                select(WarrantyRegistrationModel)
                .where(WarrantyRegistrationModel.serial_number_id.in_(serial_ids))
                .order_by(WarrantyRegistrationModel.id)
            ).scalars()
        )
        latest = {}
        for reg in rows:
            latest[reg.serial_number_id] = reg
        return latest

    def count_by_status(self, product_id: int) -> dict:
        rows = self.db.execute(
            select(WarrantyRegistrationModel.status, func.count(WarrantyRegistrationModel.id))
            .where(WarrantyRegistrationModel.product_id == product_id)
            .group_by(WarrantyRegistrationModel.status)
        ).all()
        return {status: count for status, count in rows}
