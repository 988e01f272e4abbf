"""
Pydantic schemas for listing submission, wizard steps, search and responses.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Optional, Type
from datetime import date, datetime
from decimal import Decimal
from xpatly.models.listing import ListingStatus, PropertyType
from xpatly.utils.validators import ValidationUtils


# Wizard step field groups

class CategoryStep(BaseModel):
    """Step 1: what kind of property."""

    property_type: PropertyType = Field(..., description="apartment, house, room or studio")


class AddressStep(BaseModel):
    """Step 2: where it is."""

    model_config = ConfigDict(str_strip_whitespace=True)

    address: str = Field(..., min_length=5, max_length=255, examples=["Tartu mnt 10"])
    city: str = Field(..., min_length=2, max_length=100, examples=["Tallinn"])
    district: Optional[str] = Field(None, max_length=100, examples=["Kesklinn"])
    latitude: Decimal = Field(..., ge=-90, le=90)
    longitude: Decimal = Field(..., ge=-180, le=180)

    @field_validator("address", "city")
    @classmethod
    def validate_required_text(cls, v, info):
        return ValidationUtils.clean_required_text(v, info.field_name.capitalize())

    @field_validator("district")
    @classmethod
    def validate_district(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v


class ListingTextFields(BaseModel):
    """Step 3 fields without the content policy check."""

    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=10, max_length=100)
    description: str = Field(..., min_length=50, max_length=2000)
    bedrooms: int = Field(..., ge=0, le=20)
    bathrooms: int = Field(..., ge=0, le=20)
    area_sqm: Decimal = Field(..., ge=5, description="Floor area in square meters")
    furnished: bool = False
    expat_friendly: bool = False

    @field_validator("title", "description")
    @classmethod
    def validate_text(cls, v, info):
        return ValidationUtils.clean_required_text(v, info.field_name.capitalize())


class DetailsStep(ListingTextFields):
    """Step 3: details, with blocked phrases rejected outright."""

    @field_validator("title")
    @classmethod
    def validate_title_policy(cls, v):
        return ValidationUtils.reject_blocked_phrases(v, "Title")

    @field_validator("description")
    @classmethod
    def validate_description_policy(cls, v):
        return ValidationUtils.reject_blocked_phrases(v, "Description")


class MediaStep(BaseModel):
    """Step 4: photos and video."""

    image_count: int = Field(0, ge=0, le=40, description="Number of photos to upload")
    youtube_url: Optional[str] = Field(None, max_length=500)

    @field_validator("youtube_url")
    @classmethod
    def validate_youtube_url(cls, v):
        return ValidationUtils.validate_youtube_url(v)


class PricingStep(BaseModel):
    """Step 5: monthly rent."""

    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class AvailabilityStep(BaseModel):
    """Step 6: move-in date."""

    available_from: date


WIZARD_STEPS: Dict[str, Type[BaseModel]] = {
    "category": CategoryStep,
    "address": AddressStep,
    "details": DetailsStep,
    "media": MediaStep,
    "pricing": PricingStep,
    "availability": AvailabilityStep,
}


def next_wizard_step(step: str) -> Optional[str]:
    """Name of the step after the given one, None after the last."""
    names = list(WIZARD_STEPS)
    index = names.index(step)
    return names[index + 1] if index + 1 < len(names) else None


class WizardStepResponse(BaseModel):
    step: str
    valid: bool
    next_step: Optional[str] = None


# Submission

class ListingSubmission(CategoryStep, AddressStep, ListingTextFields, PricingStep, AvailabilityStep):
    """
    Complete listing submitted at the end of the wizard.
    Blocked phrases are not rejected here; the listing service flags them instead.
    """

    youtube_url: Optional[str] = Field(None, max_length=500)

    @field_validator("youtube_url")
    @classmethod
    def validate_youtube_url(cls, v):
        return ValidationUtils.validate_youtube_url(v)


class ListingCreateResponse(BaseModel):
    """Result of a listing submission."""

    message: str
    id: str
    status: ListingStatus
    flagged: bool = False


# Search

class ListingSearchFilters(BaseModel):
    """Public search filters. Only active listings are ever returned."""

    city: Optional[str] = Field(None, max_length=100, description="Partial, case-insensitive match")
    district: Optional[str] = Field(None, max_length=100)
    property_type: Optional[PropertyType] = None
    price_min: Optional[Decimal] = Field(None, ge=0)
    price_max: Optional[Decimal] = Field(None, ge=0)
    bedrooms: Optional[int] = Field(None, ge=0, le=20, description="Minimum number of bedrooms")
    bathrooms: Optional[int] = Field(None, ge=0, le=20, description="Minimum number of bathrooms")
    area_min: Optional[Decimal] = Field(None, ge=0)
    area_max: Optional[Decimal] = Field(None, ge=0)
    furnished: Optional[bool] = None
    expat_friendly: Optional[bool] = None

    @field_validator("city", "district")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v.strip() if v else v

    @model_validator(mode="after")
    def validate_ranges(self):
        """Validate price and area ranges."""
        if self.price_min is not None and self.price_max is not None:
            if self.price_min > self.price_max:
                raise ValueError("Minimum price cannot be greater than maximum price")

        if self.area_min is not None and self.area_max is not None:
            if self.area_min > self.area_max:
                raise ValueError("Minimum area cannot be greater than maximum area")
        return self

    def matches(self, listing: Any) -> bool:
        """
        Check a listing against these filters in memory.
        Mirrors the SQL conditions used by the listing search.
        """
        if listing.status != ListingStatus.ACTIVE:
            return False
        if self.city and self.city.lower() not in listing.city.lower():
            return False
        if self.district and (not listing.district or self.district.lower() not in listing.district.lower()):
            return False
        if self.property_type and listing.property_type != self.property_type:
            return False
        if self.price_min is not None and listing.price < self.price_min:
            return False
        if self.price_max is not None and listing.price > self.price_max:
            return False
        if self.bedrooms is not None and listing.bedrooms < self.bedrooms:
            return False
        if self.bathrooms is not None and listing.bathrooms < self.bathrooms:
            return False
        if self.area_min is not None and listing.area_sqm < self.area_min:
            return False
        if self.area_max is not None and listing.area_sqm > self.area_max:
            return False
        if self.furnished is not None and listing.furnished != self.furnished:
            return False
        if self.expat_friendly is not None and listing.expat_friendly != self.expat_friendly:
            return False
        return True


# Responses

class ListingImageResponse(BaseModel):
    id: str
    listing_id: str
    url: str
    order: int
    mime_type: str
    file_size: int
    width: Optional[int] = None
    height: Optional[int] = None


class ListingResponse(BaseModel):
    """Schema for listing response."""

    id: str
    owner_id: str
    title: str
    description: str
    property_type: PropertyType
    address: str
    city: str
    district: Optional[str] = None
    latitude: float
    longitude: float
    price: float
    bedrooms: int
    bathrooms: int
    area_sqm: float
    furnished: bool
    expat_friendly: bool
    available_from: date
    youtube_url: Optional[str] = None
    status: ListingStatus
    rejection_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    images: List[ListingImageResponse] = Field(default_factory=list)


class ListingListResponse(BaseModel):
    """Schema for paginated listing search results."""

    listings: List[ListingResponse]
    total: int = Field(..., examples=[42])
    page: int = Field(..., examples=[1])
    per_page: int = Field(..., examples=[20])
    total_pages: int = Field(..., examples=[3])
