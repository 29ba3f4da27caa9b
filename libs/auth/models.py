from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuthUser(BaseModel):
    """
    Identity carried by a storefront access token.

    ``role`` is the claim as issued; authorization decisions re-check it
    against the user directory.
    """

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="sub")
    email: Optional[EmailStr] = None
    role: Literal["owner", "user"] = "user"
    name: Optional[str] = None

    @property
    def is_owner(self) -> bool:
        return self.role == "owner"
