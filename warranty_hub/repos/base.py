# warranty_hub/repos/base.py
from sqlalchemy.orm import Session


class BaseRepo:
    """
    Repozytoria tylko przygotowują zmiany (add / flush / bulk update).
    Commit należy do serwisu: jeden use case = jedna transakcja.
    """

    def __init__(self, db: Session):
        self.db = db

    def add(self, obj):
        self.db.add(obj)

    def flush(self):
        self.db.flush()

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
