# warranty_hub/repos/serial_repo.py
from typing import Iterable, List

from sqlalchemy import select, update, delete, func, case

from warranty_hub.data.models.category import CategoryModel
from warranty_hub.data.models.product import ProductModel
from warranty_hub.data.models.serial_number import SerialNumberModel
from warranty_hub.repos.base import BaseRepo


class SerialRepo(BaseRepo):

    def get(self, serial_id: int) -> SerialNumberModel | None:
        return self.db.get(SerialNumberModel, serial_id)

    def get_for_product(self, product_id: int, serial_id: int) -> SerialNumberModel | None:
        return self.db.execute(
            select(SerialNumberModel).where(
                SerialNumberModel.id == serial_id,
                SerialNumberModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def get_by_code(self, code: str) -> SerialNumberModel | None:
        return self.db.execute(
            select(SerialNumberModel).where(SerialNumberModel.serial == code)
        ).scalar_one_or_none()

    def get_with_context(self, code: str):
        """Serial joined with its product and category, or None."""
        return self.db.execute(
            select(SerialNumberModel, ProductModel, CategoryModel)
            .join(ProductModel, SerialNumberModel.product_id == ProductModel.id)
            .join(CategoryModel, ProductModel.category_id == CategoryModel.id)
            .where(SerialNumberModel.serial == code)
        ).first()

    def list_for_product(self, product_id: int) -> List[SerialNumberModel]:
        return list(
            self.db.execute(
                select(SerialNumberModel)
                .where(SerialNumberModel.product_id == product_id)
                .order_by(SerialNumberModel.created_at.desc(), SerialNumberModel.id.desc())
            ).scalars()
        )

    def existing_codes(self, codes: Iterable[str], exclude_product_id: int | None = None) -> List[str]:
        codes = list(codes)
        if not codes:
            return []
        stmt = select(SerialNumberModel.serial).where(SerialNumberModel.serial.in_(codes))
        if exclude_product_id is not None:
            stmt = stmt.where(SerialNumberModel.product_id != exclude_product_id)
        return list(self.db.execute(stmt).scalars())

    def code_taken_by_other(self, code: str, serial_id: int) -> bool:
        return self.db.execute(
            select(SerialNumberModel.id).where(
                SerialNumberModel.serial == code,
                SerialNumberModel.id != serial_id,
            )
        ).first() is not None

    def add_many(self, product_id: int, codes: Iterable[str]) -> List[SerialNumberModel]:
        rows = [SerialNumberModel(product_id=product_id, serial=code, is_used=False) for code in codes]
        self.db.add_all(rows)
        self.db.flush()
        return rows

    def delete(self, serial: SerialNumberModel):
        self.db.delete(serial)
        self.db.flush()

    def delete_for_product(self, product_id: int) -> int:
        res = self.db.execute(
            delete(SerialNumberModel)
            .where(SerialNumberModel.product_id == product_id)
            .execution_options(synchronize_session="fetch")
        )
        return res.rowcount

    def set_used(self, serial_id: int, used: bool) -> int:
        res = self.db.execute(
            update(SerialNumberModel)
            .where(SerialNumberModel.id == serial_id)
            .values(is_used=used)
            .execution_options(synchronize_session="fetch")
        )
        return res.rowcount

    def count_for_product(self, product_id: int) -> int:
        return self.db.execute(
            select(func.count(SerialNumberModel.id)).where(SerialNumberModel.product_id == product_id)
        ).scalar_one()

    def stats(self, product_id: int) -> dict:
        total, used = self.db.execute(
            select(
                func.count(SerialNumberModel.id),
                func.coalesce(func.sum(case((SerialNumberModel.is_used.is_(True), 1), else_=0)), 0),
            ).where(SerialNumberModel.product_id == product_id)
        ).one()
        return {"total": int(total), "used": int(used), "available": int(total) - int(used)}

    def sync_product_quantity(self, product_id: int) -> int:
        """Sets products.quantity to the live serial count and returns it."""
        live_count = (
            select(func.count(SerialNumberModel.id))
            .where(SerialNumberModel.product_id == product_id)
            .scalar_subquery()
        )
        self.db.execute(
            update(ProductModel)
            .where(ProductModel.id == product_id)
            .values(quantity=live_count)
            .execution_options(synchronize_session="fetch")
        )
        return self.count_for_product(product_id)

    def claim(self, serial_id: int) -> bool:
        """Flips is_used to true only if it was false; False means someone claimed it first."""
        res = self.db.execute(
            update(SerialNumberModel)
            .where(SerialNumberModel.id == serial_id, SerialNumberModel.is_used.is_(False))
            .values(is_used=True)
            .execution_options(synchronize_session="fetch")
        )
        return res.rowcount == 1
