# listings_admin/schemas.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional
from datetime import datetime


class ListingTranslationFields(BaseModel):
    description: Optional[str] = None
    opening_hours: Optional[str] = None
    popular_stores: Optional[List[str]] = None
    entertainment: Optional[List[str]] = None
    dining_options: Optional[List[str]] = None
    special_services: Optional[List[str]] = None
    parking_info: Optional[str] = None
    cuisine_type: Optional[str] = None
    story_behind: Optional[str] = None
    menu_highlights: Optional[List[str]] = None
    price_range: Optional[str] = None
    dietary_options: Optional[List[str]] = None
    reservation_info: Optional[str] = None
    seating_options: Optional[List[str]] = None
    special_features: Optional[List[str]] = None
    historical_significance: Optional[str] = None
    entry_fee: Optional[str] = None
    best_time_to_visit: Optional[str] = None
    tour_guide_availability: Optional[str] = None
    tips: Optional[str] = None
    activities: Optional[List[str]] = None
    facilities: Optional[List[str]] = None
    safety_tips: Optional[str] = None
    duration: Optional[str] = None
    highlights: Optional[List[str]] = None
    religious_significance: Optional[str] = None
    entry_rules: Optional[str] = None
    nearby_attractions: Optional[List[str]] = None
    slug: Optional[str] = None


class ListingTranslationIn(ListingTranslationFields):
    language_code: Literal["en", "ar"]
    name: str


class ListingTranslationOut(ListingTranslationFields):
    id: str
    listing_id: str
    language_code: str
    name: str
    model_config = ConfigDict(from_attributes=True)


class ListingData(BaseModel):
    listing_type: str
    google_maps_link: Optional[str] = None
    tags: Optional[List[str]] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    google_place_id: Optional[str] = None


class LocationTranslationsIn(BaseModel):
    name_en: Optional[str]
    name_ar: Optional[str]
    location_id: Optional[str]
    address_en: Optional[str] = None
    address_ar: Optional[str] = None
    city_en: Optional[str] = None
    city_ar: Optional[str] = None


class CollectionLinkIn(BaseModel):
    collection_id: str
    feature_on_home: bool


class ListingUpdatePayload(BaseModel):
    listing_data: ListingData = Field(..., alias="listingData")
    location_translations: LocationTranslationsIn = Field(..., alias="locationTranslations")
    listing_translations: List[ListingTranslationIn] = Field(..., alias="listingTranslations")
    category_ids: List[str] = Field(..., alias="categoryIds")
    collection_links: List[CollectionLinkIn] = Field(..., alias="collectionLinks")
    model_config = ConfigDict(populate_by_name=True)


class ListingCreate(BaseModel):
    listing_type: str
    google_maps_link: Optional[str] = None
    tags: Optional[List[str]] = None


class LocationTranslationOut(BaseModel):
    language_code: str
    name: str
    address: Optional[str]
    city: Optional[str]
    model_config = ConfigDict(from_attributes=True)


class LocationOut(BaseModel):
    id: str
    google_place_id: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    translations: List[LocationTranslationOut] = []
    model_config = ConfigDict(from_attributes=True)


class CollectionLinkOut(BaseModel):
    collection_id: str
    feature_on_home: bool
    model_config = ConfigDict(from_attributes=True)


class ListingOut(BaseModel):
    id: str
    listing_type: str
    google_maps_link: Optional[str]
    tags: Optional[List[str]]
    location_id: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    translations: List[ListingTranslationOut] = []
    category_ids: List[str] = []
    collection_links: List[CollectionLinkOut] = []
    location: Optional[LocationOut] = None
    model_config = ConfigDict(from_attributes=True)


class CollectionIn(BaseModel):
    name_en: Optional[str] = None
    name_ar: Optional[str] = None
    slug: Optional[str] = None


class CollectionOut(BaseModel):
    id: str
    slug: str
    name_en: str = ""
    name_ar: str = ""
