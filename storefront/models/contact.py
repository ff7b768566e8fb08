from sqlalchemy import Column, DateTime, Integer, String, Text, func

from storefront.core.database import Base

CONTACT_OPTIONAL_FIELDS = (
    "phone",
    "location",
    "map_embed_url",
    "facebook_url",
    "twitter_url",
    "instagram_url",
    "linkedin_url",
    "youtube_url",
    "github_url",
    "zalo_url",
    "tiktok_url",
    "whatsapp",
    "business_hours",
    "tax_id",
    "footer_text",
)


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Integer, primary_key=True)
    email = Column(String(255), nullable=False)
    phone = Column(String(40), nullable=True)
    location = Column(Text, nullable=True)
    map_embed_url = Column(Text, nullable=True)
    facebook_url = Column(Text, nullable=True)
    twitter_url = Column(Text, nullable=True)
    instagram_url = Column(Text, nullable=True)
    linkedin_url = Column(Text, nullable=True)
    youtube_url = Column(Text, nullable=True)
    github_url = Column(Text, nullable=True)
    zalo_url = Column(Text, nullable=True)
    tiktok_url = Column(Text, nullable=True)
    whatsapp = Column(String(40), nullable=True)
    business_hours = Column(Text, nullable=True)
    tax_id = Column(String(60), nullable=True)
    footer_text = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
