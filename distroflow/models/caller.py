# distroflow/models/caller.py
from sqlmodel import SQLModel, Field


class Caller(SQLModel):
    """
    Authenticated identity resolved from a Supabase access token.

    Identity:
      - id: Supabase auth.users.id (JWT "sub")
      - email: lowercased email claim

    Authorization:
      - role: app_metadata.role, if the identity system assigned one
      - capabilities: app_metadata.capabilities granted to this user

    Nothing here is persisted; the identity system is the source of truth.
    """

    id: str
    email: str
    role: str | None = None
    capabilities: list[str] = Field(default_factory=list)
