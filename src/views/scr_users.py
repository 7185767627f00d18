from __future__ import annotations

from typing import List, Optional

import api.crud as crud
from api.models import USER_ROLES, User
from utils.forms import FormField
from views.modal_form import EntityFormModal
from views.scr_resource_list import ResourceListScreen

ROLE_OPTIONS = [(r.capitalize(), r) for r in USER_ROLES]


def user_fields(creating: bool) -> List[FormField]:
    # password is only mandatory for new accounts, blank keeps the current one
    return [
        FormField("name", "Name", required=True),
        FormField("email", "Email", required=True, placeholder="user@example.com"),
        FormField("password", "Password", kind="password", required=creating,
                  placeholder="" if creating else "leave blank to keep"),
        FormField("role", "Role", kind="select", required=True, options=ROLE_OPTIONS),
        FormField("isActive", "Active", kind="bool"),
    ]


class UsersScreen(ResourceListScreen):
    """
    Admin accounts of the dashboard itself.
    """

    LABEL = "users"
    COLUMNS = ("Name", "Email", "Role", "Status")
    SEARCH_FIELDS = ("name", "email")
    SEARCH_PLACEHOLDER = "Search users by name or email..."

    async def fetch_items(self) -> List[User]:
        return await crud.get_users(self.client)

    def row_for(self, u: User):
        return (u.name or "-", u.email, u.role, "Active" if u.is_active else "Inactive")

    def detail_title(self, u: User) -> str:
        return u.name or u.email

    def describe(self, u: User) -> str:
        return f"user {u.email}"

    def build_form(self, u: Optional[User]) -> EntityFormModal:
        if u is None:
            return EntityFormModal(
                "Add New User",
                user_fields(creating=True),
                lambda data: crud.create_user(self.client, data),
                defaults={"role": "viewer", "isActive": True},
                success_message="User created successfully",
                failure_message="Failed to create user",
            )
        return EntityFormModal(
            "Edit User",
            user_fields(creating=False),
            lambda data: crud.update_user(self.client, u.id, data),
            entity=u.to_json(),
            success_message="User updated successfully",
            failure_message="Failed to update user",
        )

    async def delete_item(self, u: User) -> None:
        me = self.app.state.user
        if me is not None and me.id == u.id:
            raise crud.ValidationError("You cannot delete your own account")
        await crud.delete_user(self.client, u.id)
