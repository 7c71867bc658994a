"""
Tests for hotel directory implementations.

The HTTP directory is tested against a mocked hotel service (respx).
"""

import httpx
import pytest
import respx

from booking.hotel_directory import HttpHotelDirectory, StaticHotelDirectory
from shared.errors import HotelNotFound, RoomNotFound, ServiceUnavailable

HOTEL_SERVICE = "http://hotel-service:8081"


@pytest.fixture
def hotel_api():
    with respx.mock(base_url=HOTEL_SERVICE, assert_all_called=False) as mock:
        yield mock


@pytest.fixture
def directory() -> HttpHotelDirectory:
    return HttpHotelDirectory(HOTEL_SERVICE + "/", timeout=1.0)


class TestHttpRoomPrice:
    """GET /api/hotels/{id}/rooms"""

    def test_price_found(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(200, json={
            "rooms": [
                {"id": "room-0", "price_per_night": 1000},
                {"id": "room-1", "price_per_night": 5000},
            ],
        })

        assert directory.get_room_price("hotel-1", "room-1") == 5000.0

    def test_room_missing_from_list(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(200, json={"rooms": []})

        with pytest.raises(RoomNotFound):
            directory.get_room_price("hotel-1", "room-1")

    def test_hotel_404(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-9/rooms").respond(404)

        with pytest.raises(RoomNotFound):
            directory.get_room_price("hotel-9", "room-1")

    def test_server_error(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(500, text="boom")

        with pytest.raises(ServiceUnavailable, match="500"):
            directory.get_room_price("hotel-1", "room-1")

    def test_unreachable(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(ServiceUnavailable):
            directory.get_room_price("hotel-1", "room-1")

    def test_not_json(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(200, text="<html>")

        with pytest.raises(ServiceUnavailable):
            directory.get_room_price("hotel-1", "room-1")

    @pytest.mark.parametrize("body", [
        {"rooms": [{"id": "room-1"}]},
        {"rooms": [{"id": "room-1", "price_per_night": "free"}]},
        {"rooms": ["room-1"]},
        {"rooms": 5},
        [{"id": "room-1", "price_per_night": 5000}],
    ], ids=["missing-price", "price-not-number", "room-not-object", "rooms-not-list", "body-is-list"])
    def test_malformed_body(self, hotel_api, directory, body):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(200, json=body)

        with pytest.raises(ServiceUnavailable, match="failed to parse"):
            directory.get_room_price("hotel-1", "room-1")

    def test_negative_price_rejected(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(200, json={
            "rooms": [{"id": "room-1", "price_per_night": -100}],
        })

        with pytest.raises(ServiceUnavailable):
            directory.get_room_price("hotel-1", "room-1")

    def test_extra_room_fields_ignored(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1/rooms").respond(200, json={
            "rooms": [{"id": "room-1", "price_per_night": 5000, "capacity": 2}],
        })

        assert directory.get_room_price("hotel-1", "room-1") == 5000.0


class TestHttpOwner:
    """GET /api/hotels/{id}"""

    def test_owner_found(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1").respond(200, json={"id": "hotel-1", "owner_id": "owner-1"})

        assert directory.get_owner_id("hotel-1") == "owner-1"

    def test_hotel_404(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-9").respond(404)

        with pytest.raises(HotelNotFound):
            directory.get_owner_id("hotel-9")

    def test_missing_owner(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1").respond(200, json={"id": "hotel-1"})

        with pytest.raises(ServiceUnavailable, match="no owner_id"):
            directory.get_owner_id("hotel-1")

    def test_body_is_list(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1").respond(200, json=[{"owner_id": "owner-1"}])

        with pytest.raises(ServiceUnavailable):
            directory.get_owner_id("hotel-1")

    def test_owner_not_a_string(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1").respond(200, json={"id": "hotel-1", "owner_id": {"id": 7}})

        with pytest.raises(ServiceUnavailable, match="no owner_id"):
            directory.get_owner_id("hotel-1")

    def test_timeout(self, hotel_api, directory):
        hotel_api.get("/api/hotels/hotel-1").mock(side_effect=httpx.ReadTimeout("slow"))

        with pytest.raises(ServiceUnavailable):
            directory.get_owner_id("hotel-1")


class TestStaticDirectory:
    """Tests for the fixture-backed directory."""

    def test_loads_fixture_file(self, data_dir):
        directory = StaticHotelDirectory.from_json(data_dir)

        assert directory.get_room_price("hotel-001", "room-101") == 5000.0
        assert directory.get_owner_id("hotel-001") == "owner-001"

    def test_missing_file_means_no_hotels(self, tmp_path):
        directory = StaticHotelDirectory.from_json(tmp_path)

        assert directory.get_hotels() == []
        with pytest.raises(HotelNotFound):
            directory.get_owner_id("hotel-001")

    def test_unknown_room(self, hotel_directory):
        with pytest.raises(RoomNotFound):
            hotel_directory.get_room_price("hotel-1", "room-404")

    def test_unknown_hotel_room(self, hotel_directory):
        with pytest.raises(RoomNotFound):
            hotel_directory.get_room_price("hotel-404", "room-1")
