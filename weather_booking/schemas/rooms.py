from pydantic import BaseModel, ConfigDict, Field


class Room(BaseModel):
    """
    Room details returned by the room catalog. Unknown fields are ignored.
    """

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Display name of the room")
    base_price: float = Field(..., alias="basePrice", ge=0, description="Nightly base price")
    location: str = Field(..., description="Location used for the weather forecast")
