from typing import List

from fastapi import APIRouter, Depends, Query

from showxpress.api.deps import get_movie_provider, get_show_catalog
from showxpress.integrations.tmdb import TMDBClient
from showxpress.schemas.show import Show as ShowSchema
from showxpress.services.show_catalog import ShowCatalog

router = APIRouter(prefix="/shows", tags=["Shows"])


# ---------------------------------------------------------------------------
# Movie metadata: pass-through to TMDB
# ---------------------------------------------------------------------------


@router.get("/now-playing")
def now_playing(
    page: int = Query(1, ge=1),
    provider: TMDBClient = Depends(get_movie_provider),
):
    """Movies currently in theaters, straight from TMDB."""
    return {"success": True, "data": provider.now_playing(page=page)}


@router.get("/popular")
def popular(
    page: int = Query(1, ge=1),
    provider: TMDBClient = Depends(get_movie_provider),
):
    return {"success": True, "data": provider.popular(page=page)}


@router.get("/movies/{tmdb_id}")
def movie_details(
    tmdb_id: str,
    provider: TMDBClient = Depends(get_movie_provider),
):
    """Movie details with cast and videos (trailers) for the movie page."""
    return {"success": True, "data": provider.movie_details(tmdb_id)}


# ---------------------------------------------------------------------------
# Shows
# ---------------------------------------------------------------------------


@router.get("/movies/{tmdb_id}/shows", response_model=List[ShowSchema])
def shows_for_movie(
    tmdb_id: str,
    catalog: ShowCatalog = Depends(get_show_catalog),
):
    """Scheduled shows of a movie, earliest first."""
    return catalog.shows_for_movie(tmdb_id)


@router.get("/", response_model=List[ShowSchema])
def list_shows(catalog: ShowCatalog = Depends(get_show_catalog)):
    return catalog.list_shows()


@router.get("/{show_id}", response_model=ShowSchema)
def get_show(
    show_id: str,
    catalog: ShowCatalog = Depends(get_show_catalog),
):
    """A single show with its occupied seats, used to render the seat map."""
    return catalog.get_show(show_id)
