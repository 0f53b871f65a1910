"""
Care Recipient Schemas
Pydantic models for care recipient requests and responses
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class CareRecipientCreate(BaseModel):
    """Schema for creating a care recipient"""
    name: str = Field(..., min_length=1, max_length=255)
    color: Optional[str] = Field(None, max_length=20)


class CareRecipientUpdate(BaseModel):
    """Schema for updating a care recipient"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    color: Optional[str] = Field(None, max_length=20)
    status: Optional[str] = Field(None, pattern="^(active|inactive)$")


class CareRecipientResponse(BaseModel):
    """Care recipient response"""
    id: int
    name: str
    color: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
