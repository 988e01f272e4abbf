"""
Saved search endpoints. Matching active listings produce new-match notifications.
"""

from fastapi import APIRouter, Depends, Path, Response, status
from typing import List
from uuid import UUID

from xpatly.models.user import User
from xpatly.services.notification import SavedSearchService
from xpatly.schemas.notification import SavedSearchCreate, SavedSearchResponse
from xpatly.schemas.error import get_crud_error_responses, get_auth_error_responses
from xpatly.utils.dependencies import get_current_active_user, get_saved_search_service


router = APIRouter(prefix="/saved-searches", tags=["Saved Searches"])


@router.post(
    "",
    response_model=SavedSearchResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Save a search",
    responses=get_crud_error_responses()
)
async def create_saved_search(
    search_data: SavedSearchCreate,
    current_user: User = Depends(get_current_active_user),
    saved_search_service: SavedSearchService = Depends(get_saved_search_service)
) -> SavedSearchResponse:
    saved = await saved_search_service.create_saved_search(search_data, current_user)
    return SavedSearchResponse.model_validate(saved.to_dict())


@router.get(
    "",
    response_model=List[SavedSearchResponse],
    status_code=status.HTTP_200_OK,
    summary="List saved searches",
    responses=get_auth_error_responses()
)
async def list_saved_searches(
    current_user: User = Depends(get_current_active_user),
    saved_search_service: SavedSearchService = Depends(get_saved_search_service)
) -> List[SavedSearchResponse]:
    searches = await saved_search_service.get_saved_searches(current_user)
    return [SavedSearchResponse.model_validate(s.to_dict()) for s in searches]


@router.delete(
    "/{search_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete saved search",
    responses=get_crud_error_responses()
)
async def delete_saved_search(
    search_id: UUID = Path(..., description="Saved search ID"),
    current_user: User = Depends(get_current_active_user),
    saved_search_service: SavedSearchService = Depends(get_saved_search_service)
) -> Response:
    await saved_search_service.delete_saved_search(search_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
