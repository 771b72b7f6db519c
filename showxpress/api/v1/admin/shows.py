from fastapi import APIRouter, Depends, status

from showxpress.api.deps import get_current_admin, get_show_catalog
from showxpress.schemas.common import ErrorResponse, MessageResponse
from showxpress.schemas.show import ShowCreate, ShowUpdate, Show as ShowSchema
from showxpress.services.show_catalog import ShowCatalog

router = APIRouter(
    prefix="/admin/shows",
    tags=["Admin - Shows"],
    dependencies=[Depends(get_current_admin)],
)


@router.post("/", response_model=ShowSchema, status_code=status.HTTP_201_CREATED)
def add_show(
    data: ShowCreate,
    catalog: ShowCatalog = Depends(get_show_catalog),
):
    """
    Schedule a show. The movie is looked up by its TMDB id and cached
    locally the first time it is scheduled.
    """
    return catalog.add_show(data)


@router.patch("/{show_id}", response_model=ShowSchema)
def update_show(
    show_id: str,
    data: ShowUpdate,
    catalog: ShowCatalog = Depends(get_show_catalog),
):
    """Change price, date, time or theater. The seating layout is fixed."""
    return catalog.update_show(show_id, data)


@router.delete(
    "/{show_id}",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def delete_show(
    show_id: str,
    catalog: ShowCatalog = Depends(get_show_catalog),
):
    """Cancel a show. Refused while it still has confirmed bookings."""
    catalog.delete_show(show_id)
    return MessageResponse(message="Show deleted successfully")
