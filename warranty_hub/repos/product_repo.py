# warranty_hub/repos/product_repo.py
from typing import List

from sqlalchemy import select, delete

from warranty_hub.data.models.product import ProductModel, ProductImageModel
from warranty_hub.repos.base import BaseRepo


class ProductRepo(BaseRepo):

    def get(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def list_all(self) -> List[ProductModel]:
        return list(
            self.db.execute(
                select(ProductModel).order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            ).unique().scalars()
        )

    def create(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.flush()
        return product

    def add_images(self, product: ProductModel, keys: List[str]):
        for key in keys:
            product.images.append(ProductImageModel(file_path=key))
        self.db.flush()

    def delete_images(self, product_id: int) -> int:
        res = self.db.execute(
            delete(ProductImageModel)
            .where(ProductImageModel.product_id == product_id)
            .execution_options(synchronize_session="fetch")
        )
        return res.rowcount

    def delete(self, product_id: int) -> int:
        res = self.db.execute(
            delete(ProductModel)
            .where(ProductModel.id == product_id)
            .execution_options(synchronize_session="fetch")
        )
        return res.rowcount

    def exists_in_category(self, category_id: int) -> bool:
        return self.db.execute(
            select(ProductModel.id).where(ProductModel.category_id == category_id).limit(1)
        ).first() is not None
