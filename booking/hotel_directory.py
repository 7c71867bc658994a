"""
Hotel directory: where nightly prices and hotel owners come from.

The hotel service itself is a plain CRUD service outside this repository.
The booking and notification services only need two answers from it:
- the current price of a room
- who owns a hotel

HttpHotelDirectory asks the hotel service over HTTP. StaticHotelDirectory
answers from a JSON fixture file and is used for local runs and demos.
Neither retries; a failed call is a hard error for the caller.
"""

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import httpx

from shared.errors import HotelNotFound, RoomNotFound, ServiceUnavailable
from shared.models import Hotel, Room


class HotelDirectory(ABC):
    """Read-only view of the hotel service."""

    @abstractmethod
    def get_room_price(self, hotel_id: str, room_id: str) -> float:
        """
        Current nightly price of a room.

        Raises:
            RoomNotFound: The hotel or room does not exist
            ServiceUnavailable: The hotel service could not answer
        """

    @abstractmethod
    def get_owner_id(self, hotel_id: str) -> str:
        """
        Identity of the hotel's owner.

        Raises:
            HotelNotFound: The hotel does not exist
            ServiceUnavailable: The hotel service could not answer
        """


class HttpHotelDirectory(HotelDirectory):
    """HotelDirectory backed by the hotel service's REST API."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        http: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.http = http or httpx.Client(timeout=timeout)
        self.logger = logger or logging.getLogger("hotel_directory")

    def close(self) -> None:
        self.http.close()

    def _get(self, path: str) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            return self.http.get(url)
        except httpx.HTTPError as e:
            self.logger.error(f"Hotel service request failed: GET {url}: {e}")
            raise ServiceUnavailable(f"hotel service unreachable: {e}") from e

    def get_room_price(self, hotel_id: str, room_id: str) -> float:
        response = self._get(f"/api/hotels/{hotel_id}/rooms")
        if response.status_code == 404:
            raise RoomNotFound(hotel_id, room_id)
        if response.status_code != 200:
            raise ServiceUnavailable(
                f"hotel service returned status {response.status_code}: {response.text}"
            )

        # pydantic.ValidationError is a ValueError; the rest come from a body of the wrong shape
        try:
            rooms = [Room.model_validate(r) for r in response.json().get("rooms") or []]
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ServiceUnavailable(f"failed to parse hotel service response: {e}") from e

        for room in rooms:
            if room.id == room_id:
                return room.price_per_night
        raise RoomNotFound(hotel_id, room_id)

    def get_owner_id(self, hotel_id: str) -> str:
        response = self._get(f"/api/hotels/{hotel_id}")
        if response.status_code == 404:
            raise HotelNotFound(hotel_id)
        if response.status_code != 200:
            raise ServiceUnavailable(
                f"hotel service returned status {response.status_code}: {response.text}"
            )

        try:
            owner_id = response.json().get("owner_id")
        except (ValueError, TypeError, AttributeError) as e:
            raise ServiceUnavailable(f"failed to decode hotel: {e}") from e
        if not owner_id or not isinstance(owner_id, str):
            raise ServiceUnavailable(f"hotel {hotel_id} has no owner_id")
        return owner_id


class StaticHotelDirectory(HotelDirectory):
    """
    HotelDirectory answering from a fixed set of hotels.

    Hotels can be passed in directly or loaded from a hotels.json fixture
    (a list of {"id", "name", "owner_id", "rooms": [{"id", "price_per_night"}]}).
    """

    def __init__(self, hotels: Optional[list[Hotel]] = None):
        self._hotels: dict[str, Hotel] = {h.id: h for h in hotels or []}

    @classmethod
    def from_json(cls, data_dir: Path, filename: str = "hotels.json") -> "StaticHotelDirectory":
        """Load hotels from a JSON fixture file. A missing file means no hotels."""
        filepath = Path(data_dir) / filename
        if not filepath.exists():
            return cls()
        with open(filepath, "r", encoding="utf-8") as f:
            return cls([Hotel(**h) for h in json.load(f)])

    def add_hotel(self, hotel: Hotel) -> None:
        self._hotels[hotel.id] = hotel

    def get_hotels(self) -> list[Hotel]:
        return list(self._hotels.values())

    def get_room_price(self, hotel_id: str, room_id: str) -> float:
        hotel = self._hotels.get(hotel_id)
        room = hotel.find_room(room_id) if hotel else None
        if not room:
            raise RoomNotFound(hotel_id, room_id)
        return room.price_per_night

    def get_owner_id(self, hotel_id: str) -> str:
        hotel = self._hotels.get(hotel_id)
        if not hotel:
            raise HotelNotFound(hotel_id)
        return hotel.owner_id
