"""Tests for the HTTP API."""

import base64
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from py_bulge.api.main import app


class TestAPIEndpoints:
    """Test the pattern API endpoints."""

    def setup_method(self):
        """Set up test client."""
        self.client = TestClient(app)

    def test_root(self):
        response = self.client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_default_pattern(self):
        response = self.client.get("/patterns/default", params={"seed": 5})
        assert response.status_code == 200
        data = response.json()
        assert data["seed"] == 5.0
        assert data["grid_size"] == 40.0
        assert data["bulge_count"] == 3

    def test_random_pattern_reproducible(self):
        first = self.client.get("/patterns/random", params={"seed": 1}).json()
        second = self.client.get("/patterns/random", params={"seed": 1}).json()
        assert first == second
        required_fields = ["grid_size", "bulge_strength", "bulge_count", "seed", "line_opacity", "rotation"]
        for field in required_fields:
            assert field in first

    def test_presets(self):
        response = self.client.get("/patterns/presets")
        assert response.status_code == 200
        assert "default" in response.json()

        response = self.client.get("/patterns/presets/tilted")
        assert response.status_code == 200
        assert response.json()["rotation"] == 30.0

    def test_unknown_preset(self):
        response = self.client.get("/patterns/presets/nope")
        assert response.status_code == 404

    def test_render_png(self):
        response = self.client.post(
            "/patterns/render",
            json={"config": {"grid_size": 30, "seed": 7, "bulge_count": 2}, "width": 120, "height": 90},
        )
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert "attachment; filename=pattern-" in response.headers["content-disposition"]

        with Image.open(io.BytesIO(response.content)) as image:
            assert image.size == (120, 90)

    def test_render_pixel_ratio(self):
        response = self.client.post(
            "/patterns/render", json={"width": 60, "height": 40, "pixel_ratio": 2}
        )
        assert response.status_code == 200
        with Image.open(io.BytesIO(response.content)) as image:
            assert image.size == (120, 80)

    def test_render_deterministic(self):
        body = {"config": {"seed": 11, "grid_size": 25}, "width": 80, "height": 60}
        first = self.client.post("/patterns/render", json=body)
        second = self.client.post("/patterns/render", json=body)
        assert first.content == second.content

    @pytest.mark.parametrize(
        "body",
        [
            {"config": {"grid_size": 0}},
            {"config": {"line_opacity": 2}},
            {"config": {"bulge_count": -1}},
            {"width": 0},
        ],
    )
    def test_render_invalid(self, body):
        response = self.client.post("/patterns/render", json=body)
        assert response.status_code == 422

    def test_gallery(self):
        response = self.client.post(
            "/patterns/gallery", json={"count": 2, "width": 60, "height": 40, "seed": 1}
        )
        assert response.status_code == 200
        items = response.json()
        assert len(items) == 2

        for item in items:
            assert 2 <= item["config"]["bulge_count"] <= 5
            png = base64.b64decode(item["image_base64"])
            with Image.open(io.BytesIO(png)) as image:
                assert image.size == (60, 40)

    def test_gallery_too_large(self):
        response = self.client.post("/patterns/gallery", json={"count": 10000})
        assert response.status_code == 422


class TestBackingSizeLimit:
    """Test that request sizes are bounded by the oversampled image size."""

    def setup_method(self):
        self.client = TestClient(app)

    def test_render_rejects_oversized_backing_image(self):
        response = self.client.post(
            "/patterns/render", json={"width": 4096, "height": 4096, "pixel_ratio": 4}
        )
        assert response.status_code == 422
        assert "backing pixels" in response.text

    def test_gallery_rejects_oversized_backing_image(self):
        response = self.client.post(
            "/patterns/gallery", json={"count": 1, "width": 4096, "height": 4096}
        )
        assert response.status_code == 422

    def test_default_size_accepted(self):
        response = self.client.post("/patterns/render", json={"width": 200, "height": 150, "pixel_ratio": 2})
        assert response.status_code == 200
