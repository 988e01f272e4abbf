"""
Listing API endpoints: submission, wizard step validation, search and owner actions.
"""

from fastapi import APIRouter, Body, Depends, File, Form, Path, Query, Response, UploadFile, status
from typing import Any, Dict, List, Optional
from datetime import date
from decimal import Decimal
from uuid import UUID

from xpatly.models.listing import PropertyType
from xpatly.models.user import User
from xpatly.services.listing import ListingService
from xpatly.schemas.listing import (
    ListingSubmission,
    ListingCreateResponse,
    ListingSearchFilters,
    ListingResponse,
    ListingListResponse,
    WizardStepResponse,
)
from xpatly.schemas.error import get_crud_error_responses, get_error_responses
from xpatly.utils.dependencies import (
    get_current_active_user,
    get_optional_current_user,
    get_listing_service,
)


router = APIRouter(prefix="/listings", tags=["Listings"])


@router.post(
    "",
    response_model=ListingCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit listing",
    description=(
        "Submit a listing with up to 40 images. Verified landlords publish directly; "
        "everything else, including text that trips the content filter, waits for review."
    ),
    responses=get_crud_error_responses()
)
async def create_listing(
    property_type: PropertyType = Form(...),
    address: str = Form(...),
    city: str = Form(...),
    district: Optional[str] = Form(None),
    latitude: Decimal = Form(...),
    longitude: Decimal = Form(...),
    title: str = Form(...),
    description: str = Form(...),
    price: Decimal = Form(...),
    bedrooms: int = Form(...),
    bathrooms: int = Form(...),
    area_sqm: Decimal = Form(...),
    furnished: bool = Form(False),
    expat_friendly: bool = Form(False),
    available_from: date = Form(...),
    youtube_url: Optional[str] = Form(None),
    images: List[UploadFile] = File(default=[]),
    current_user: User = Depends(get_current_active_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingCreateResponse:
    """
    Submit a new listing.

    Raises:
        InsufficientPermissionsError: If the user is not a landlord
        DuplicateResourceError: If the user already has a live listing at this address
        pydantic.ValidationError: If a field breaks the listing rules
    """
    submission = ListingSubmission(
        property_type=property_type,
        address=address,
        city=city,
        district=district,
        latitude=latitude,
        longitude=longitude,
        title=title,
        description=description,
        price=price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        area_sqm=area_sqm,
        furnished=furnished,
        expat_friendly=expat_friendly,
        available_from=available_from,
        youtube_url=youtube_url,
    )

    result = await listing_service.create_listing(submission, images, current_user)

    return ListingCreateResponse(
        message=result.message,
        id=str(result.listing_id),
        status=result.status,
        flagged=result.flagged,
    )


@router.get(
    "",
    response_model=ListingListResponse,
    status_code=status.HTTP_200_OK,
    summary="Search listings",
    description="Active listings only, newest first",
    responses=get_error_responses(422, 500)
)
async def search_listings(
    city: Optional[str] = Query(None, description="City, partial match"),
    district: Optional[str] = Query(None, description="District, partial match"),
    property_type: Optional[PropertyType] = Query(None),
    price_min: Optional[Decimal] = Query(None, ge=0, description="Minimum monthly rent"),
    price_max: Optional[Decimal] = Query(None, ge=0, description="Maximum monthly rent"),
    bedrooms: Optional[int] = Query(None, ge=0, le=20, description="Minimum number of bedrooms"),
    bathrooms: Optional[int] = Query(None, ge=0, le=20, description="Minimum number of bathrooms"),
    area_min: Optional[Decimal] = Query(None, ge=0),
    area_max: Optional[Decimal] = Query(None, ge=0),
    furnished: Optional[bool] = Query(None),
    expat_friendly: Optional[bool] = Query(None),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    per_page: int = Query(20, ge=1, le=100, description="Number of listings per page"),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingListResponse:
    filters = ListingSearchFilters(
        city=city,
        district=district,
        property_type=property_type,
        price_min=price_min,
        price_max=price_max,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        area_min=area_min,
        area_max=area_max,
        furnished=furnished,
        expat_friendly=expat_friendly,
    )

    result = await listing_service.search_listings(filters, page=page, per_page=per_page)

    return ListingListResponse(
        listings=[ListingResponse.model_validate(listing.to_dict()) for listing in result["listings"]],
        total=result["total"],
        page=result["page"],
        per_page=result["per_page"],
        total_pages=result["total_pages"],
    )


@router.get(
    "/mine",
    response_model=List[ListingResponse],
    status_code=status.HTTP_200_OK,
    summary="My listings",
    description="The caller's listings in every status, newest first",
    responses=get_error_responses(401, 403, 500)
)
async def get_my_listings(
    current_user: User = Depends(get_current_active_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> List[ListingResponse]:
    listings = await listing_service.get_owner_listings(current_user)
    return [ListingResponse.model_validate(listing.to_dict()) for listing in listings]


@router.post(
    "/wizard/{step}",
    response_model=WizardStepResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate wizard step",
    description="Validate one step of the listing wizard: category, address, details, media, pricing or availability",
    responses=get_error_responses(404, 422)
)
async def validate_wizard_step(
    step: str = Path(..., description="Wizard step name"),
    payload: Dict[str, Any] = Body(default_factory=dict),
    listing_service: ListingService = Depends(get_listing_service)
) -> WizardStepResponse:
    _, next_step = listing_service.validate_wizard_step(step, payload)
    return WizardStepResponse(step=step, valid=True, next_step=next_step)


@router.get(
    "/{listing_id}",
    response_model=ListingResponse,
    status_code=status.HTTP_200_OK,
    summary="Get listing",
    description="Active listings are public; other statuses are visible to the owner and admins only",
    responses=get_error_responses(404, 422, 500)
)
async def get_listing(
    listing_id: UUID = Path(..., description="Listing ID"),
    current_user: Optional[User] = Depends(get_optional_current_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    listing = await listing_service.get_listing(listing_id, current_user)
    return ListingResponse.model_validate(listing.to_dict())


@router.post(
    "/{listing_id}/archive",
    response_model=ListingResponse,
    status_code=status.HTTP_200_OK,
    summary="Archive listing",
    description="Owner takes an active listing off the market",
    responses=get_crud_error_responses()
)
async def archive_listing(
    listing_id: UUID = Path(..., description="Listing ID"),
    current_user: User = Depends(get_current_active_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> ListingResponse:
    listing = await listing_service.archive_listing(listing_id, current_user)
    return ListingResponse.model_validate(listing.to_dict())


@router.delete(
    "/{listing_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete listing",
    description="Owner deletes a listing with its images and flags",
    responses=get_crud_error_responses()
)
async def delete_listing(
    listing_id: UUID = Path(..., description="Listing ID"),
    current_user: User = Depends(get_current_active_user),
    listing_service: ListingService = Depends(get_listing_service)
) -> Response:
    await listing_service.delete_listing(listing_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
