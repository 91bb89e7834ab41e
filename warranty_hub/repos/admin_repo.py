from sqlalchemy import select

from warranty_hub.data.models.admin_user import AdminUserModel
from warranty_hub.repos.base import BaseRepo


class AdminRepo(BaseRepo):

    def get_by_email(self, email: str) -> AdminUserModel | None:
        return self.db.execute(
            select(AdminUserModel).where(AdminUserModel.email == email)
        ).scalar_one_or_none()

    def create(self, admin: AdminUserModel) -> AdminUserModel:
        self.db.add(admin)
        self.db.flush()
        return admin
