import logging
from typing import Optional

import requests

from showxpress.core.exceptions import MetadataProviderError, NotFoundError

logger = logging.getLogger(__name__)


class TMDBClient:
    """Thin pass-through to the TMDB v3 API, authenticated with a bearer read token."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.themoviedb.org/3",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        })

    def close(self) -> None:
        self.session.close()

    def _get(self, path: str, **params) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(url, params=params or None, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("TMDB request %s failed: %s", path, e)
            raise MetadataProviderError() from e

        if response.status_code == 404:
            raise NotFoundError("Movie", path)
        if response.status_code >= 400:
            logger.error("TMDB request %s returned %s", path, response.status_code)
            raise MetadataProviderError()
        return response.json()

    def now_playing(self, page: int = 1) -> list:
        return self._get("/movie/now_playing", page=page).get("results", [])

    def popular(self, page: int = 1) -> list:
        return self._get("/movie/popular", page=page).get("results", [])

    def movie_details(self, tmdb_id: str) -> dict:
        """Details merged with the cast and the trailer/video list."""
        details = self._get(f"/movie/{tmdb_id}")
        credits = self._get(f"/movie/{tmdb_id}/credits")
        videos = self._get(f"/movie/{tmdb_id}/videos")
        return {
            **details,
            "cast": credits.get("cast", []),
            "videos": videos.get("results", []),
        }

    def movie_for_cache(self, tmdb_id: str) -> dict:
        """Fields stored on the local Movie record when a show is first scheduled."""
        details = self._get(f"/movie/{tmdb_id}")
        credits = self._get(f"/movie/{tmdb_id}/credits")
        return {
            "tmdb_id": str(tmdb_id),
            "title": details.get("title") or "",
            "overview": details.get("overview"),
            "backdrop_path": details.get("backdrop_path"),
            "poster_path": details.get("poster_path"),
            "release_date": details.get("release_date"),
            "runtime": details.get("runtime"),
            "vote_average": details.get("vote_average") or 0.0,
            "vote_count": details.get("vote_count") or 0,
            "genres": details.get("genres") or [],
            "original_language": details.get("original_language"),
            "tagline": details.get("tagline"),
            "cast": credits.get("cast", []),
        }
