from typing import Optional
from pydantic import BaseModel

from .customer import CustomerRecord

class SessionContext(BaseModel):
    """
    Who is signed in to the console.
    `user` is the signed-in customer, `admin_email` marks an admin session.
    """
    user: Optional[CustomerRecord] = None
    admin_email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return bool(self.admin_email)

    @property
    def is_customer(self) -> bool:
        return self.user is not None
