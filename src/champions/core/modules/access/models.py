from uuid import UUID

from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.user.models import Role


class Actor(ApiModel):
    """Caller context passed explicitly into every core operation.

    `role` is the claim carried by the credential, which may lag behind the
    profile role until the claim is refreshed.
    """

    id: UUID = Field(..., description="User ID")
    name: str = Field(..., description="Display name or email")
    role: Role = Field(..., description="Role claim of the current credential")
