"""Set catalog Pydantic models."""
from pydantic import BaseModel, ConfigDict


class SetRecord(BaseModel):
    """One catalog entry: a Scryfall set or a hand-curated alias."""

    model_config = ConfigDict(frozen=True)

    code: str
    name: str
    normalized_name: str
    released_at: str


class SetCandidate(SetRecord):
    """A catalog entry scored against a query."""

    score: int
