from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ThemeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    name: str
    description: Optional[str] = None
    category: str
    primary_color: str
    css_variables: Dict[str, str] = Field(default_factory=dict)
    is_active: bool
    is_seasonal: bool
    sort_order: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ThemeForm(BaseModel):
    name: str = ""
    slug: str = ""
    description: Optional[str] = ""
    category: str = "custom"
    primary_color: str = "#3B82F6"
    is_active: bool = True
    is_seasonal: bool = False
    sort_order: int = 0
    css_variables: Dict[str, str] = Field(default_factory=dict)


class ThemePresetOut(BaseModel):
    key: str
    name: str
    description: str
    category: str
    primary_color: str
    is_seasonal: bool
    css_variables: Dict[str, str]


class ApplyPresetRequest(BaseModel):
    preset: str
    form: Optional[ThemeForm] = None


class ThemeFormEdit(BaseModel):
    form: Optional[ThemeForm] = None
    css_variables: Dict[str, str] = Field(default_factory=dict)
    slug: Optional[str] = None


class SlugRequest(BaseModel):
    name: str
    transliterate: bool = False


class SlugResponse(BaseModel):
    slug: str


class ThemeSelection(BaseModel):
    theme_id: int


class PresentationOut(BaseModel):
    slug: Optional[str] = None
    css_variables: Dict[str, str] = Field(default_factory=dict)
    attributes: Dict[str, str] = Field(default_factory=dict)
    local_storage: Dict[str, str] = Field(default_factory=dict)


class CurrentThemeOut(BaseModel):
    theme: Optional[ThemeOut] = None
    presentation: PresentationOut


class DefaultThemeOut(BaseModel):
    slug: Optional[str] = None


class DefaultThemeIn(BaseModel):
    slug: str
