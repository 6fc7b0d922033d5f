"""User-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict


class UserKarmaResponse(BaseModel):
    """Public karma summary for a user."""

    id: int
    username: str
    display_name: str | None = None
    karma: int

    model_config = ConfigDict(from_attributes=True)
