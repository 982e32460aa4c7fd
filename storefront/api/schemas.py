# storefront/api/schemas.py

from pydantic import BaseModel, Field, field_validator

# ===================================================================
#                       Product Schemas
# ===================================================================

class Product(BaseModel):
    id: str = Field(..., examples=["prd1"])
    name: str = Field(..., examples=["Top Hat (6\")"])
    cost: float = Field(0.0, ge=0, examples=[39.95])
    description: str = Field("", examples=["A classic silk top hat."])
    image: str | None = None
    on_offer: bool = False

    @field_validator("description", mode="before")
    @classmethod
    def null_description_is_empty(cls, value):
        # Rows without a description come back from the table as null
        return "" if value is None else value

    class Config:
        from_attributes = True


# ===================================================================
#                      Service Schemas
# ===================================================================

class HealthRead(BaseModel):
    status: str


class StatusRead(BaseModel):
    service: str
    version: str
    ai_enhancement: bool
    cache_mode: str | None = None
    cached_descriptions: int = 0
