from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict


class LogoSettings(BaseModel):
    site_logo: Optional[str] = None
    site_logo_url: Optional[str] = None
    favicon_url: Optional[str] = None


class ContactBase(BaseModel):
    email: str
    phone: Optional[str] = None
    location: Optional[str] = None
    map_embed_url: Optional[str] = None
    facebook_url: Optional[str] = None
    twitter_url: Optional[str] = None
    instagram_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    youtube_url: Optional[str] = None
    github_url: Optional[str] = None
    zalo_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    whatsapp: Optional[str] = None
    business_hours: Optional[str] = None
    tax_id: Optional[str] = None
    footer_text: Optional[str] = None


class ContactOut(ContactBase):
    model_config = ConfigDict(from_attributes=True)

    id: int


class ResolvedImage(BaseModel):
    public_url: Optional[str] = None
    signed_url: Optional[str] = None


class UploadResponse(BaseModel):
    url: str


class ChangeVersionsOut(BaseModel):
    versions: Dict[str, int]
