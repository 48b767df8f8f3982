"""Tests for upload, download, health and styles endpoints."""

import io
import os

import pytest
from PIL import Image


def make_image(width, height, fmt="PNG"):
    buf = io.BytesIO()
    Image.new("RGB", (width, height), (120, 90, 60)).save(buf, format=fmt)
    return buf.getvalue()


class TestUpload:

    @pytest.mark.asyncio
    async def test_valid_photo_is_stored(self, uploads, api_client):
        content = make_image(600, 800)
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("me.png", content, "image/png")}
            )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["fileId"].startswith("upload-")
        assert data["fileName"] == "me.png"
        assert data["fileSize"] == len(content)
        assert data["dimensions"] == {"width": 600, "height": 800}
        assert os.path.exists(uploads.get_path(data["fileId"], ".png"))

    @pytest.mark.asyncio
    @pytest.mark.parametrize("size", [(512, 512), (4096, 512)])
    async def test_dimension_bounds_are_inclusive(self, uploads, api_client, size):
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("edge.png", make_image(*size), "image/png")}
            )

        assert response.status_code == 200
        assert response.json()["dimensions"] == {"width": size[0], "height": size[1]}

    @pytest.mark.asyncio
    async def test_too_small_is_rejected_and_removed(self, uploads, api_client):
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("tiny.png", make_image(511, 900), "image/png")}
            )

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "message": "Image too small. Minimum dimensions: 512x512px",
        }
        assert os.listdir(uploads.base_dir) == []

    @pytest.mark.asyncio
    async def test_too_large_is_rejected(self, uploads, api_client):
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("wide.png", make_image(4097, 600), "image/png")}
            )

        assert response.status_code == 400
        assert response.json()["message"] == "Image too large. Maximum dimensions: 4096x4096px"
        assert os.listdir(uploads.base_dir) == []

    @pytest.mark.asyncio
    async def test_wrong_mime_type_is_rejected(self, uploads, api_client):
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("notes.txt", b"hello", "text/plain")}
            )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid file type. Only JPEG, PNG, and WebP are allowed."

    @pytest.mark.asyncio
    async def test_undecodable_image_is_rejected(self, uploads, api_client):
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("broken.jpg", b"\xff\xd8garbage", "image/jpeg")}
            )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid image file"
        assert os.listdir(uploads.base_dir) == []

    @pytest.mark.asyncio
    async def test_missing_photo_field(self, uploads, api_client):
        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"other": ("a.png", make_image(600, 600), "image/png")}
            )

        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "No file uploaded"}

    @pytest.mark.asyncio
    async def test_oversized_file_is_rejected(self, uploads, api_client, monkeypatch):
        from app.config import settings
        monkeypatch.setattr(settings, "upload_max_size", 1024)

        async with api_client() as client:
            response = await client.post(
                "/api/upload", files={"photo": ("big.jpg", b"\xff" * 4096, "image/jpeg")}
            )

        assert response.status_code == 400
        assert response.json()["message"].startswith("File too large")
        assert os.listdir(uploads.base_dir) == []


class TestUploadStore:

    def test_cleanup_removes_only_old_files(self, uploads):
        old = uploads.get_path("upload-old", ".png")
        new = uploads.get_path("upload-new", ".png")
        for path in (old, new):
            with open(path, "wb") as f:
                f.write(b"x")
        stale = os.path.getmtime(old) - 25 * 3600
        os.utime(old, (stale, stale))

        assert uploads.cleanup_expired() == 1
        assert not os.path.exists(old)
        assert os.path.exists(new)


class TestDownload:

    @pytest.mark.asyncio
    async def test_download_points_at_placeholder(self, api_client):
        async with api_client() as client:
            response = await client.get("/api/download/result-123-abc")

        assert response.json() == {
            "success": True,
            "imageUrl": "/api/download/mock-image/result-123-abc",
            "message": "Image ready for download",
        }

    @pytest.mark.asyncio
    async def test_placeholder_svg_embeds_result_id(self, api_client):
        async with api_client() as client:
            response = await client.get("/api/download/mock-image/result-123-abc")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("image/svg+xml")
        assert "result-123-abc" in response.text
        assert response.text.startswith("<svg")


class TestMeta:

    @pytest.mark.asyncio
    async def test_health(self, api_client):
        async with api_client() as client:
            response = await client.get("/api/health")

        data = response.json()
        assert data["status"] == "OK"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_styles_catalog(self, api_client):
        async with api_client() as client:
            response = await client.get("/api/styles")

        data = response.json()
        assert data["count"] == 3
        assert [s["id"] for s in data["styles"]] == ["corporate", "creative", "executive"]
        assert data["styles"][0]["name"] == "Corporate Classic"
