from sqlalchemy import Column, String
from sqlmodel import SQLModel, Field
from typing import Optional


class Product(SQLModel, table=True):
    __tablename__ = "products"

    id: Optional[int] = Field(default=None, primary_key=True)
    # Stored in the historic "title" column
    name: str = Field(sa_column=Column("title", String, nullable=False))
    description: Optional[str] = None
    price: float
    # Owner id from the identity provider, not a foreign key here
    user_id: int = Field(index=True)


class ProductRead(SQLModel):
    id: int
    name: str
    description: Optional[str] = None
    price: float
    user_id: int
