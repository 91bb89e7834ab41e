import pytest

from warranty_hub.data.models.category import CategoryModel
from warranty_hub.data.models.subcategory import SubcategoryModel
from warranty_hub.domain.errors import Conflict, NotFound
from warranty_hub.services.category_service import CategoryService, SubcategoryService


def test_list_categories_ordered_by_name(db):
    svc = CategoryService(db)
    svc.create_category("Tablets")
    svc.create_category("Audio")
    assert [c.name for c in svc.list_categories()] == ["Audio", "Tablets"]


def test_duplicate_category_name(db, category):
    with pytest.raises(Conflict):
        CategoryService(db).create_category("Laptops")
    assert db.query(CategoryModel).count() == 1


def test_update_category(db, category):
    updated = CategoryService(db).update_category(category.id, "Notebooks")
    assert updated.name == "Notebooks"


def test_delete_category_in_use_is_refused(db, category, make_product):
    make_product()

    with pytest.raises(Conflict) as exc:
        CategoryService(db).delete_category(category.id)

    assert "still assigned to this category" in exc.value.message
    db.expire_all()
    assert db.get(CategoryModel, category.id) is not None


def test_delete_unused_category(db, category):
    CategoryService(db).delete_category(category.id)
    assert db.query(CategoryModel).count() == 0


def test_missing_category(db):
    with pytest.raises(NotFound):
        CategoryService(db).get_category(1)


def test_subcategory_requires_existing_category(db):
    with pytest.raises(NotFound):
        SubcategoryService(db).create_subcategory("Gaming", 77)


def test_subcategory_listing_has_category_name(db, category):
    svc = SubcategoryService(db)
    svc.create_subcategory("Ultrabooks", category.id)
    svc.create_subcategory("Gaming", category.id)

    rows = svc.list_subcategories()

    assert [r["name"] for r in rows] == ["Gaming", "Ultrabooks"]
    assert {r["category_name"] for r in rows} == {"Laptops"}


def test_subcategory_delete_is_unconditional(db, category):
    svc = SubcategoryService(db)
    sub = svc.create_subcategory("Gaming", category.id)

    svc.delete_subcategory(sub.id)

    assert db.query(SubcategoryModel).count() == 0


def test_failed_subcategory_commit_is_rolled_back(db, category, monkeypatch):
    from sqlalchemy.exc import OperationalError

    from warranty_hub.repos.category_repo import SubcategoryRepo

    def failing_commit(self):
        raise OperationalError("COMMIT", {}, Exception("database is locked"))

    monkeypatch.setattr(SubcategoryRepo, "commit", failing_commit)

    with pytest.raises(OperationalError):
        SubcategoryService(db).create_subcategory("Gaming", category.id)

    # wstawiony już wiersz nie może zostać w otwartej transakcji
    assert db.query(SubcategoryModel).count() == 0
    assert db.get(CategoryModel, category.id) is not None
