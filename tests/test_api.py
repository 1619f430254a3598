"""
Travel Crew Backend — HTTP API Tests
======================================

What:  End-to-end tests through FastAPI: multipart parsing, status codes,
       camelCase bodies and the standard error format.
How:   HTTPX AsyncClient over ASGITransport with injected clients.
"""

import uuid

import pytest

TOUR_FORM = {
    "title": "Safari",
    "description": "d",
    "duration": "3 days",
    "price": "120",
    "maxParticipants": "4",
}

RENTAL_FORM = {
    "vehicleName": "Land Cruiser",
    "vehicleType": "Jeep",
    "seats": "4",
    "description": "Safari jeep with pop-up roof",
    "fuel": "Diesel",
    "features": "AC, Pop-up roof",
}


def jpeg(sample_image_bytes, name="photo.jpg"):
    return {"image": (name, sample_image_bytes, "image/jpeg")}


class TestStatusRoutes:

    @pytest.mark.asyncio
    async def test_root(self, test_client):
        response = await test_client.get("/")
        assert response.status_code == 200
        assert response.json() == {"status": "OK", "message": "Yala Travel Crew Backend is running"}

    @pytest.mark.asyncio
    async def test_health_healthy(self, test_client):
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
        assert body["asset_store"] == "available"

    @pytest.mark.asyncio
    async def test_health_degraded_when_asset_store_down(self, test_client, fake_assets):
        fake_assets.healthy = False
        response = await test_client.get("/api/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    @pytest.mark.asyncio
    async def test_request_id_header(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "trace-42"})
        assert response.headers["X-Request-ID"] == "trace-42"

    @pytest.mark.asyncio
    async def test_unknown_route_uses_error_format(self, test_client):
        response = await test_client.get("/api/hotels")
        assert response.status_code == 404
        assert response.json()["error"] == "http_error"


class TestTours:
    """Create / read / update / delete through /api/tours."""

    @pytest.mark.asyncio
    async def test_create_safari(self, test_client, fake_assets, sample_image_bytes):
        response = await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "Safari"
        assert body["price"] == 120
        assert body["maxParticipants"] == 4
        assert body["includes"] == []
        assert body["image"] == fake_assets.uploads[0].url
        assert body["assetId"] == "tours/fake-1"
        assert uuid.UUID(body["id"])
        assert "createdAt" in body and "updatedAt" in body

    @pytest.mark.asyncio
    async def test_timestamps_match_between_create_and_read(self, test_client, sample_image_bytes):
        created = (
            await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()

        fetched = (await test_client.get(f"/api/tours/{created['id']}")).json()
        listed = (await test_client.get("/api/tours")).json()[0]

        assert fetched["createdAt"] == created["createdAt"]
        assert fetched["updatedAt"] == created["updatedAt"]
        assert listed["createdAt"] == created["createdAt"]
        assert created["createdAt"].endswith("Z")

    @pytest.mark.asyncio
    async def test_create_without_image(self, test_client, fake_assets):
        response = await test_client.post("/api/tours", data=TOUR_FORM)

        assert response.status_code == 400
        assert response.json()["message"] == "image is required"
        assert fake_assets.uploads == []

    @pytest.mark.asyncio
    async def test_create_with_non_image_file(self, test_client, fake_assets):
        response = await test_client.post(
            "/api/tours",
            data=TOUR_FORM,
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Only image files are allowed"
        assert fake_assets.uploads == []
        assert (await test_client.get("/api/tours")).json() == []

    @pytest.mark.asyncio
    async def test_create_missing_field(self, test_client, fake_assets, sample_image_bytes):
        form = {k: v for k, v in TOUR_FORM.items() if k != "price"}
        response = await test_client.post("/api/tours", data=form, files=jpeg(sample_image_bytes))

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["message"] == "price is required"
        assert body["details"] == {"field": "price"}
        assert "request_id" in body
        assert fake_assets.uploads == []

    @pytest.mark.asyncio
    async def test_create_upload_failure_is_400(self, test_client, fake_assets, sample_image_bytes):
        fake_assets.fail_upload = True
        response = await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))

        assert response.status_code == 400
        assert response.json()["error"] == "asset_store_error"
        assert (await test_client.get("/api/tours")).json() == []

    @pytest.mark.asyncio
    async def test_list_round_trips_list_field(self, test_client, sample_image_bytes):
        await test_client.post(
            "/api/tours",
            data={**TOUR_FORM, "includes": "a, b ,,c"},
            files=jpeg(sample_image_bytes),
        )

        response = await test_client.get("/api/tours")

        assert response.status_code == 200
        tours = response.json()
        assert len(tours) == 1
        assert tours[0]["includes"] == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_update_partial(self, test_client, fake_assets, sample_image_bytes):
        created = (
            await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()

        response = await test_client.put(f"/api/tours/{created['id']}", data={"price": "150"})

        assert response.status_code == 200
        body = response.json()
        assert body["price"] == 150
        assert body["title"] == "Safari"
        assert body["image"] == created["image"]
        assert fake_assets.destroyed == []

    @pytest.mark.asyncio
    async def test_update_with_new_image(self, test_client, fake_assets, sample_image_bytes):
        created = (
            await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()

        response = await test_client.put(
            f"/api/tours/{created['id']}",
            data={"title": "Night Safari"},
            files=jpeg(sample_image_bytes, "night.jpg"),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Night Safari"
        assert body["assetId"] == "tours/fake-2"
        assert fake_assets.destroyed == ["tours/fake-1"]

    @pytest.mark.asyncio
    async def test_update_upload_failure_is_500(self, test_client, fake_assets, sample_image_bytes):
        created = (
            await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()
        fake_assets.fail_upload = True

        response = await test_client.put(
            f"/api/tours/{created['id']}",
            data={"title": "Night Safari"},
            files=jpeg(sample_image_bytes),
        )

        assert response.status_code == 500
        stored = (await test_client.get(f"/api/tours/{created['id']}")).json()
        assert stored["title"] == "Safari"

    @pytest.mark.asyncio
    async def test_get_unknown_is_404(self, test_client):
        response = await test_client.get(f"/api/tours/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_delete_then_get_is_404(self, test_client, fake_assets, sample_image_bytes):
        created = (
            await test_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()

        response = await test_client.delete(f"/api/tours/{created['id']}")

        assert response.status_code == 200
        assert response.json() == {"message": "Tour deleted successfully"}
        assert fake_assets.destroyed == [created["assetId"]]
        assert (await test_client.get(f"/api/tours/{created['id']}")).status_code == 404


class TestRentals:

    @pytest.mark.asyncio
    async def test_omitted_available_is_false(self, test_client, sample_image_bytes):
        response = await test_client.post("/api/rentals", data=RENTAL_FORM, files=jpeg(sample_image_bytes))

        assert response.status_code == 201
        body = response.json()
        assert body["vehicleName"] == "Land Cruiser"
        assert body["features"] == ["AC", "Pop-up roof"]
        assert body["available"] is False

    @pytest.mark.asyncio
    async def test_invalid_seats_update_leaves_document_unchanged(self, test_client, sample_image_bytes):
        created = (
            await test_client.post("/api/rentals", data=RENTAL_FORM, files=jpeg(sample_image_bytes))
        ).json()

        response = await test_client.put(f"/api/rentals/{created['id']}", data={"seats": "-2"})

        assert response.status_code == 400
        assert "seats" in response.json()["message"]
        stored = (await test_client.get(f"/api/rentals/{created['id']}")).json()
        assert stored["seats"] == 4


class TestPackages:

    @pytest.mark.asyncio
    async def test_delete_malformed_id_is_400(self, test_client, fake_assets):
        response = await test_client.delete("/api/packages/badid")

        assert response.status_code == 400
        assert response.json()["details"] == {"field": "id"}
        assert fake_assets.destroyed == []

    @pytest.mark.asyncio
    async def test_create_with_optional_fields(self, test_client, sample_image_bytes):
        response = await test_client.post(
            "/api/packages",
            data={"name": "South Coast", "price": "450", "destinations": "Galle, Mirissa"},
            files=jpeg(sample_image_bytes),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["destinations"] == ["Galle", "Mirissa"]
        assert body["description"] is None
        assert body["highlights"] == []


class TestGallery:

    @pytest.mark.asyncio
    async def test_newest_first(self, test_client, sample_image_bytes):
        for title in ("Leopard", "Elephants", "Sunset"):
            response = await test_client.post(
                "/api/gallery",
                data={"title": title, "type": "wildlife", "description": "Yala"},
                files=jpeg(sample_image_bytes),
            )
            assert response.status_code == 201

        listed = (await test_client.get("/api/gallery")).json()

        assert [item["title"] for item in listed] == ["Sunset", "Elephants", "Leopard"]


class TestLocalFiles:
    """Images written by LocalAssetStore are served back by /api/files."""

    @pytest.mark.asyncio
    async def test_uploaded_image_is_served(self, local_client, sample_image_bytes):
        created = (
            await local_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()

        assert created["image"].startswith("http://test/api/files/tours/")
        response = await local_client.get(f"/api/files/{created['assetId']}")

        assert response.status_code == 200
        assert response.content == sample_image_bytes

    @pytest.mark.asyncio
    async def test_deleted_image_is_gone(self, local_client, sample_image_bytes):
        created = (
            await local_client.post("/api/tours", data=TOUR_FORM, files=jpeg(sample_image_bytes))
        ).json()
        await local_client.delete(f"/api/tours/{created['id']}")

        response = await local_client.get(f"/api/files/{created['assetId']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_files_route_unavailable_with_hosted_store(self, test_client):
        response = await test_client.get("/api/files/tours/anything.jpg")
        assert response.status_code == 404
