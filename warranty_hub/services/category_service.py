# warranty_hub/services/category_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warranty_hub.data.models.category import CategoryModel
from warranty_hub.data.models.subcategory import SubcategoryModel
from warranty_hub.domain.errors import NotFound, Conflict
from warranty_hub.repos.category_repo import CategoryRepo, SubcategoryRepo
from warranty_hub.repos.product_repo import ProductRepo
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


class CategoryService:
    """Kategorie produktów. Jedyna reguła: nie usuwamy kategorii z produktami."""

    def __init__(self, db: Session):
        self.repo = CategoryRepo(db)
        self.products = ProductRepo(db)

    def list_categories(self) -> List[CategoryModel]:
        return self.repo.list_all()

    def get_category(self, category_id: int) -> CategoryModel:
        category = self.repo.get(category_id)
        if not category:
            raise NotFound("Category not found")
        return category

    def _commit_unique_name(self):
        try:
            self.repo.flush()
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            raise Conflict("Duplicate category name. Please use a unique name.")

    def create_category(self, name: str) -> CategoryModel:
        category = CategoryModel(name=name)
        self.repo.add(category)
        self._commit_unique_name()
        logger.info(f"Category {category.id} '{name}' created")
        return category

    def update_category(self, category_id: int, name: str) -> CategoryModel:
        category = self.get_category(category_id)
        category.name = name
        self._commit_unique_name()
        return category

    def delete_category(self, category_id: int):
        category = self.get_category(category_id)
        if self.products.exists_in_category(category_id):
            raise Conflict(
                "Cannot delete: One or more products are still assigned to this category. "
                "Please move or delete products first."
            )
        try:
            self.repo.delete(category)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        logger.info(f"Category {category_id} deleted")


class SubcategoryService:
    def __init__(self, db: Session):
        self.repo = SubcategoryRepo(db)
        self.categories = CategoryRepo(db)

    @staticmethod
    def to_dict(sub: SubcategoryModel) -> dict:
        return {
            "id": sub.id,
            "name": sub.name,
            "category_id": sub.category_id,
            "category_name": sub.category.name if sub.category else None,
            "created_at": sub.created_at,
        }

    def list_subcategories(self) -> List[dict]:
        return [self.to_dict(s) for s in self.repo.list_all()]

    def get_subcategory(self, subcategory_id: int) -> SubcategoryModel:
        sub = self.repo.get(subcategory_id)
        if not sub:
            raise NotFound("Subcategory not found")
        return sub

    def create_subcategory(self, name: str, category_id: int) -> SubcategoryModel:
        if not self.categories.get(category_id):
            raise NotFound("Category not found")
        try:
            sub = self.repo.create(SubcategoryModel(name=name, category_id=category_id))
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        logger.info(f"Subcategory {sub.id} '{name}' created under category {category_id}")
        return sub

    def update_subcategory(self, subcategory_id: int, name: str, category_id: int) -> SubcategoryModel:
        sub = self.get_subcategory(subcategory_id)
        if not self.categories.get(category_id):
            raise NotFound("Category not found")
        try:
            sub.name = name
            sub.category_id = category_id
            self.repo.flush()
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        return sub

    def delete_subcategory(self, subcategory_id: int):
        # bez ochrony: produkty z tą podkategorią zostają
        sub = self.get_subcategory(subcategory_id)
        try:
            self.repo.delete(sub)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        logger.info(f"Subcategory {subcategory_id} deleted")
