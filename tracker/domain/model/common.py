"""Base for the tracker's domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Immutable entity.

    Users, provider links and linking sessions are never edited in place;
    registries and stores hand out fresh instances. Unknown fields are
    rejected so a mapper cannot silently drop a column.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")
