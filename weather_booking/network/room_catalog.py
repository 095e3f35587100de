"""
Client for the external room catalog service, with bounded timeouts and retries
on transient failures (timeouts, rate limiting, 5xx).
"""

import time
from typing import Optional
from urllib.parse import quote

import requests
import structlog
from pydantic import ValidationError as PydanticValidationError

from weather_booking.errors import RoomNotFound, UpstreamUnavailable
from weather_booking.metrics import upstream_latency, upstream_requests
from weather_booking.schemas.rooms import Room

logger = structlog.get_logger(__name__)

UPSTREAM = "room_catalog"
RETRY_DELAY = 0.5


def should_retry(res: Optional[requests.Response], err: Optional[Exception]) -> bool:
    """
    Determine whether the request should be retried based on response or error.

    Args:
        res (Optional[requests.Response]): Response object if available.
        err (Optional[Exception]): Exception raised by the request, if any.

    Returns:
        bool: True if the request should be retried, False otherwise.
    """
    if res is not None and res.status_code == 429:
        return True
    if isinstance(err, (requests.Timeout, requests.ConnectionError)):
        return True
    if res is not None and 500 <= res.status_code < 600:
        return True
    return False


class RoomCatalogClient:
    """
    Resolves room ids to room details (name, base price, location).

    One instance is opened at application startup and closed at shutdown; it
    holds a pooled requests.Session.

    Example:
        >>> catalog = RoomCatalogClient("http://rooms.internal/rooms/", timeout=5)
        >>> room = catalog.get_room("64f1c2")
        >>> room.base_price
        120.0
        >>> catalog.close()
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        max_retries: int = 2,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.timeout = timeout
        self.max_retries = max_retries
        self._session = session or requests.Session()

    def get_room(self, room_id: str) -> Room:
        """
        Fetch room details for ``room_id``.

        Args:
            room_id: Opaque catalog reference

        Returns:
            Room: Parsed room details

        Raises:
            RoomNotFound: Catalog answered 404, or the id is only dots
            UpstreamUnavailable: Catalog unreachable, erroring, or returned a malformed body
        """
        if not room_id.strip("."):
            # "", "." and ".." resolve to the collection or its parent, not a room
            raise RoomNotFound(f"Room {room_id} not found")

        url = self.base_url + quote(room_id, safe="")
        retries = 0

        while True:
            res: Optional[requests.Response] = None
            err: Optional[Exception] = None
            try:
                with upstream_latency.labels(upstream=UPSTREAM).time():
                    res = self._session.get(url, timeout=self.timeout)
                upstream_requests.labels(upstream=UPSTREAM, status=str(res.status_code)).inc()
            except requests.RequestException as e:
                upstream_requests.labels(upstream=UPSTREAM, status="error").inc()
                err = e

            if res is not None and res.status_code == 404:
                logger.info("room_not_found", room_id=room_id)
                raise RoomNotFound(f"Room {room_id} not found")

            if err is None and res is not None and res.ok:
                break

            if retries >= self.max_retries or not should_retry(res, err):
                logger.error(
                    "room_catalog_request_failed",
                    room_id=room_id,
                    status_code=res.status_code if res is not None else None,
                    error=str(err) if err else None,
                    retries=retries,
                )
                raise UpstreamUnavailable("Room catalog request failed") from err

            retries += 1
            logger.warning(
                "room_catalog_retry",
                room_id=room_id,
                status_code=res.status_code if res is not None else None,
                attempt=retries,
            )
            time.sleep(RETRY_DELAY * retries)

        try:
            return Room.model_validate(res.json())
        except (ValueError, PydanticValidationError) as e:
            logger.error("room_catalog_malformed_response", room_id=room_id, error=str(e))
            raise UpstreamUnavailable("Room catalog returned a malformed room") from e

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
