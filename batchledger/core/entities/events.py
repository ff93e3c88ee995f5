"""Events emitted after a ledger transaction commits."""

from pydantic import BaseModel, ConfigDict


class InvalidationEvent(BaseModel):
    """Tells the cache layer to drop summaries for a material/location."""

    model_config = ConfigDict(frozen=True)

    material_id: str
    location_id: str | None = None
