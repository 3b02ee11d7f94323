# listings_admin/models.py
"""SQLAlchemy ORM models for persisted entities.

A listing points at a shared `Location` and owns its per-language
translations, category links and collection links; those child rows are
removed with the listing through ON DELETE CASCADE.
"""
import uuid
from sqlalchemy import (
    Boolean, Column, Float, ForeignKey, Index, JSON, Text, TIMESTAMP, UniqueConstraint, func,
)
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.orm import relationship
from .db import Base

# TEXT[] on PostgreSQL, JSON list elsewhere
StringArray = ARRAY(Text).with_variant(JSON(), "sqlite")

LANGUAGE_CODES = ("en", "ar")


def new_id():
    return str(uuid.uuid4())


class Location(Base):
    __tablename__ = "locations"
    id = Column(Text, primary_key=True, default=new_id)
    google_place_id = Column(Text, unique=True, index=True)
    latitude = Column(Float)
    longitude = Column(Float)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    translations = relationship("LocationTranslation", back_populates="location",
                                cascade="all, delete-orphan", passive_deletes=True)


class LocationTranslation(Base):
    __tablename__ = "location_translations"
    __table_args__ = (UniqueConstraint("location_id", "language_code"),)
    id = Column(Text, primary_key=True, default=new_id)
    location_id = Column(Text, ForeignKey("locations.id", ondelete="CASCADE"), nullable=False)
    language_code = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    address = Column(Text)
    city = Column(Text)

    location = relationship("Location", back_populates="translations")


class Listing(Base):
    __tablename__ = "listings"
    id = Column(Text, primary_key=True, default=new_id)
    listing_type = Column(Text, nullable=False)
    google_maps_link = Column(Text)
    tags = Column(StringArray)
    location_id = Column(Text, ForeignKey("locations.id", ondelete="SET NULL"), index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    location = relationship("Location")
    translations = relationship("ListingTranslation", back_populates="listing",
                                cascade="all, delete-orphan", passive_deletes=True)
    category_links = relationship("ListingCategory", cascade="all, delete-orphan", passive_deletes=True)
    collection_links = relationship("CollectionLink", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def category_ids(self):
        return [link.category_id for link in self.category_links]


class ListingTranslation(Base):
    __tablename__ = "listing_translations"
    __table_args__ = (UniqueConstraint("listing_id", "language_code"),)
    id = Column(Text, primary_key=True, default=new_id)
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), nullable=False)
    language_code = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    description = Column(Text)
    opening_hours = Column(Text)
    popular_stores = Column(StringArray)
    entertainment = Column(StringArray)
    dining_options = Column(StringArray)
    special_services = Column(StringArray)
    parking_info = Column(Text)
    cuisine_type = Column(Text)
    story_behind = Column(Text)
    menu_highlights = Column(StringArray)
    price_range = Column(Text)
    dietary_options = Column(StringArray)
    reservation_info = Column(Text)
    seating_options = Column(StringArray)
    special_features = Column(StringArray)
    historical_significance = Column(Text)
    entry_fee = Column(Text)
    best_time_to_visit = Column(Text)
    tour_guide_availability = Column(Text)
    tips = Column(Text)
    activities = Column(StringArray)
    facilities = Column(StringArray)
    safety_tips = Column(Text)
    duration = Column(Text)
    highlights = Column(StringArray)
    religious_significance = Column(Text)
    entry_rules = Column(Text)
    nearby_attractions = Column(StringArray)
    slug = Column(Text)

    listing = relationship("Listing", back_populates="translations")


class Category(Base):
    __tablename__ = "categories"
    id = Column(Text, primary_key=True, default=new_id)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


class ListingCategory(Base):
    __tablename__ = "listing_categories"
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    category_id = Column(Text, ForeignKey("categories.id", ondelete="CASCADE"), primary_key=True)


class Collection(Base):
    __tablename__ = "curated_collections"
    id = Column(Text, primary_key=True, default=new_id)
    name = Column(Text)
    slug = Column(Text, nullable=False, unique=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    translations = relationship("CollectionTranslation", cascade="all, delete-orphan", passive_deletes=True)


class CollectionTranslation(Base):
    __tablename__ = "curated_collection_translations"
    __table_args__ = (UniqueConstraint("collection_id", "language_code"),)
    id = Column(Text, primary_key=True, default=new_id)
    collection_id = Column(Text, ForeignKey("curated_collections.id", ondelete="CASCADE"), nullable=False)
    language_code = Column(Text, nullable=False)
    name = Column(Text, nullable=False)


class CollectionLink(Base):
    __tablename__ = "curated_collection_items"
    listing_id = Column(Text, ForeignKey("listings.id", ondelete="CASCADE"), primary_key=True)
    collection_id = Column(Text, ForeignKey("curated_collections.id", ondelete="CASCADE"), primary_key=True)
    feature_on_home = Column(Boolean, nullable=False, default=False)

Index("idx_listing_categories_category", ListingCategory.category_id)
Index("idx_collection_items_collection", CollectionLink.collection_id)
