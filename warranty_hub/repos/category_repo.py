# warranty_hub/repos/category_repo.py
from typing import List

from sqlalchemy import select

from warranty_hub.data.models.category import CategoryModel
from warranty_hub.data.models.subcategory import SubcategoryModel
from warranty_hub.repos.base import BaseRepo


class CategoryRepo(BaseRepo):

    def get(self, category_id: int) -> CategoryModel | None:
        return self.db.get(CategoryModel, category_id)

    def list_all(self) -> List[CategoryModel]:
        return list(self.db.execute(select(CategoryModel).order_by(CategoryModel.name)).scalars())

    def create(self, category: CategoryModel) -> CategoryModel:
        self.db.add(category)
        self.db.flush()
        return category

    def delete(self, category: CategoryModel):
        self.db.delete(category)
        self.db.flush()


class SubcategoryRepo(BaseRepo):

    def get(self, subcategory_id: int) -> SubcategoryModel | None:
        return self.db.get(SubcategoryModel, subcategory_id)

    def list_all(self) -> List[SubcategoryModel]:
        return list(
            self.db.execute(
                select(SubcategoryModel)
                .join(CategoryModel, SubcategoryModel.category_id == CategoryModel.id)
                .order_by(CategoryModel.name, SubcategoryModel.name)
            ).unique().scalars()
        )

    def create(self, subcategory: SubcategoryModel) -> SubcategoryModel:
        self.db.add(subcategory)
        self.db.flush()
        return subcategory

    def delete(self, subcategory: SubcategoryModel):
        self.db.delete(subcategory)
        self.db.flush()
