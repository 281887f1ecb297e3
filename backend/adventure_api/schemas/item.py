"""
Pydantic schemas for shop items.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=2000)
    category: Optional[str] = Field(None, max_length=100)
    price: float = Field(0, ge=0)
    rental_price: float = Field(0, ge=0)
    purchase: bool = True
    rent: bool = False


class ItemResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    category: Optional[str]
    price: float
    rental_price: float
    purchase: bool
    rent: bool

    model_config = ConfigDict(from_attributes=True)
