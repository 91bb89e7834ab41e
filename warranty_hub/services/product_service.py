# warranty_hub/services/product_service.py
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from warranty_hub.data.models.product import ProductModel
from warranty_hub.domain.errors import NotFound, Conflict
from warranty_hub.domain.schemas import ProductFields
from warranty_hub.repos.category_repo import CategoryRepo, SubcategoryRepo
from warranty_hub.repos.product_repo import ProductRepo
from warranty_hub.repos.serial_repo import SerialRepo
from warranty_hub.repos.warranty_repo import WarrantyRepo
from warranty_hub.services.image_store import ImageStore
from warranty_hub.services.serial_service import SerialService
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


class ProductService:
    """
    Serwis obsługujący Use Case'y dla domeny Product.

    Orkiestruje zapis produktu razem ze zdjęciami, serialami i
    rejestracjami gwarancyjnymi tak, żeby inwarianty SerialService i
    WarrantyService były zachowane. Każda komenda to jedna transakcja.
    """

    def __init__(self, db: Session, image_store: ImageStore):
        self.repo = ProductRepo(db)
        self.categories = CategoryRepo(db)
        self.subcategories = SubcategoryRepo(db)
        self.serials = SerialRepo(db)
        self.warranties = WarrantyRepo(db)
        self.serial_service = SerialService(db)
        self.image_store = image_store

    # =====================================================
    # QUERY
    # =====================================================
    def list_products(self) -> List[dict]:
        return [self._to_dict(p) for p in self.repo.list_all()]

    def get_product(self, product_id: int) -> dict:
        product = self.repo.get(product_id)
        if not product:
            raise NotFound("Product not found")
        return self._to_dict(product)

    def _to_dict(self, product: ProductModel) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "price": product.price,
            "quantity": product.quantity,
            "category_id": product.category_id,
            "category_name": product.category.name if product.category else None,
            "subcategory_id": product.subcategory_id,
            "subcategory_name": product.subcategory.name if product.subcategory else None,
            "created_at": product.created_at,
            "images": [self.image_store.viewable_url(img.file_path) for img in product.images],
        }

    # =====================================================
    # COMMANDS
    # =====================================================
    def _check_references(self, fields: ProductFields):
        if not self.categories.get(fields.category_id):
            raise NotFound("Category not found")
        if fields.subcategory_id is not None and not self.subcategories.get(fields.subcategory_id):
            raise NotFound("Subcategory not found")

    def create(self, fields: ProductFields, serial_codes: List[str], image_keys: List[str]) -> int:
        """
        Use Case: utworzenie produktu ze zdjęciami i serialami.

        Seriale są sprawdzane przed jakimkolwiek zapisem; jeśli mimo to
        unikalny indeks odrzuci insert, cała transakcja (produkt, zdjęcia,
        seriale) jest wycofywana.
        """
        self._check_references(fields)
        codes = self.serial_service.prepare_codes(serial_codes)
        quantity = len(codes) if codes else (fields.quantity or 0)

        try:
            product = self.repo.create(
                ProductModel(
                    name=fields.name,
                    description=fields.description,
                    price=fields.price,
                    quantity=quantity,
                    category_id=fields.category_id,
                    subcategory_id=fields.subcategory_id,
                )
            )
            self.repo.add_images(product, image_keys)
            if codes:
                self.serial_service.insert_codes(product.id, codes)
            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            taken = self.serials.existing_codes(codes) or codes
            logger.warning(f"Product '{fields.name}' rolled back, serial conflict: {taken}")
            raise Conflict(f"Serial(s) already exist: {', '.join(taken)}", codes=taken)
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product.id} created with {len(codes)} serials, {len(image_keys)} images")

        return product.id

    def update(
        self,
        product_id: int,
        fields: ProductFields,
        serial_codes: List[str] | None = None,
        image_keys: List[str] | None = None,
    ) -> dict:
        """
        Use Case: edycja produktu.

        Podanie serial_codes to pełna podmiana puli (nie dopisywanie):
        rejestracje gwarancyjne produktu i jego seriale są usuwane, a nowe
        seriale wstawiane jako nieużyte. Do dopisywania służy
        SerialService.add_serials.
        """
        product = self.repo.get(product_id)
        if not product:
            raise NotFound("Product not found")

        self._check_references(fields)

        codes = None
        if serial_codes is not None:
            codes = self.serial_service.prepare_codes(serial_codes, exclude_product_id=product_id)

        try:
            product.name = fields.name
            product.description = fields.description
            product.price = fields.price
            product.category_id = fields.category_id
            product.subcategory_id = fields.subcategory_id
            if fields.quantity is not None:
                product.quantity = fields.quantity
            self.repo.flush()

            if image_keys:
                self.repo.add_images(product, image_keys)

            if codes is not None:
                removed = self.warranties.delete_for_product(product_id)
                self.serials.delete_for_product(product_id)
                self.serial_service.insert_codes(product_id, codes)
                logger.warning(
                    f"Product {product_id} serials replaced: {len(codes)} new, {removed} registrations dropped"
                )
            elif self.serials.count_for_product(product_id):
                # quantity wynika z seriali, wartość z formularza jest ignorowana
                self.serials.sync_product_quantity(product_id)

            self.repo.commit()
        except IntegrityError:
            self.repo.rollback()
            taken = self.serials.existing_codes(codes or []) or (codes or [])
            raise Conflict(f"Serial(s) already exist: {', '.join(taken)}", codes=taken)
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product_id} updated")

        return {"id": product_id}

    def delete(self, product_id: int) -> dict:
        """
        Use Case: usunięcie produktu.

        Odmowa (Conflict), gdy produkt ma zaakceptowane gwarancje.
        Kolejność: rejestracje, seriale, zdjęcia, produkt.
        """
        product = self.repo.get(product_id)
        if not product:
            raise NotFound("Product not found")

        by_status = self.warranties.count_by_status(product_id)
        accepted = by_status.get("accepted", 0)
        if accepted:
            logger.warning(f"Refused to delete product {product_id}: {accepted} accepted warranties")
            raise Conflict(
                f"Cannot delete product '{product.name}': it has {accepted} accepted warranty registration(s)"
            )

        pending = by_status.get("pending", 0)
        if pending:
            logger.warning(f"Deleting product {product_id} with {pending} pending warranty registration(s)")

        name = product.name
        try:
            self.warranties.delete_for_product(product_id)
            self.serials.delete_for_product(product_id)
            self.repo.delete_images(product_id)
            self.repo.delete(product_id)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise

        logger.info(f"Product {product_id} ('{name}') deleted")

        return {"product_name": name}
