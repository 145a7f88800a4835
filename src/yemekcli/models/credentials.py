from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Credentials(BaseModel):
    """Identity and session values attached to every upstream request.

    ``customer_hash`` is optional: the listing endpoint answers without it.
    """

    model_config = ConfigDict(frozen=True)

    auth_token: str
    user_id: str = ""
    customer_hash: str = ""
    perseus_client_id: str = ""
    perseus_session_id: str = ""
