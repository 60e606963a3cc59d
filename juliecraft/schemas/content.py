# juliecraft/schemas/content.py

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# -------------------------------------------------------------------
# Homepage sections
# -------------------------------------------------------------------

class HomepageSectionCreate(BaseModel):
    section_type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=255)
    content: Dict[str, Any] = Field(default_factory=dict)
    display_settings: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    sort_order: int = 0


class HomepageSectionUpdate(BaseModel):
    section_type: Optional[str] = Field(None, max_length=50)
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[Dict[str, Any]] = None
    display_settings: Optional[Dict[str, Any]] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class HomepageSectionOut(HomepageSectionCreate):
    id: UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

# -------------------------------------------------------------------
# Footer
# -------------------------------------------------------------------

class FooterBlock(BaseModel):
    section_key: str = Field(..., min_length=1, max_length=50)
    title: Optional[str] = Field(None, max_length=255)
    content: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    sort_order: int = 0


class FooterBlockOut(FooterBlock):
    id: UUID

    model_config = ConfigDict(from_attributes=True)


class FooterReplace(BaseModel):
    sections: Optional[List[FooterBlock]] = None
