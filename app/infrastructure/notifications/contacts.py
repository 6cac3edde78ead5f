"""Read-only lookup of user contact details owned by the account subsystem."""

from typing import Optional

from sqlalchemy import select

from infrastructure.notifications.models import UserContact
from infrastructure.persistence import Database
from infrastructure.persistence.models import UserRow


class UserContactDirectory:
    """Resolves a user id to email and phone details."""

    def __init__(self, database: Database):
        self._database = database

    async def get_contact(self, user_id: str) -> Optional[UserContact]:
        async with self._database.session() as session:
            row = await session.scalar(select(UserRow).where(UserRow.id == user_id))
        return UserContact.model_validate(row) if row is not None else None
