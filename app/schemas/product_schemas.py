from pydantic import AliasChoices, BaseModel, Field
from typing import Optional


class ProductCreateRequest(BaseModel):
    """Body of POST /products. Any id or user_id sent by the caller is ignored."""

    name: str = Field(validation_alias=AliasChoices("name", "title"))
    description: Optional[str] = None
    price: float = Field(allow_inf_nan=False)


class ProductUpdateRequest(BaseModel):
    """Body of PUT /products/{id}. Only name and price are applied."""

    name: str = Field(validation_alias=AliasChoices("name", "title"))
    price: float = Field(allow_inf_nan=False)
