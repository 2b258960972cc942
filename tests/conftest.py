"""
Shared fixtures: a canned PixelLab API behind httpx.MockTransport and small
Pillow-made test images.
"""

import asyncio
import io
import json
from typing import Any, List, Optional

import httpx
import pytest
from PIL import Image

from pixellab.client import PixelLabClient
from pixellab.image import Base64Image


TEST_SECRET = "test-secret"
TEST_BASE_URL = "https://api.test/v1"


def make_png(size=(32, 32), color=(255, 0, 0, 255)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeAPI:
    """Answers every request with one canned response and records requests."""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        text: Optional[str] = None,
    ):
        self.status_code = status_code
        self.json_body = json_body
        self.text = text
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.json_body)

    def client(self, base_url: str = TEST_BASE_URL) -> PixelLabClient:
        return PixelLabClient(
            TEST_SECRET, base_url, transport=httpx.MockTransport(self.handler)
        )

    def call(self, operation: str, *args, **kwargs) -> Any:
        async def _run():
            async with self.client() as client:
                return await getattr(client, operation)(*args, **kwargs)

        return asyncio.run(_run())

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_body(self) -> Any:
        return json.loads(self.last_request.content)


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


@pytest.fixture
def sample_image(png_bytes) -> Base64Image:
    return Base64Image.from_bytes(png_bytes)


@pytest.fixture
def usage() -> dict:
    return {"type": "usd", "usd": 0.01}


@pytest.fixture
def image_response(sample_image, usage) -> dict:
    return {"image": sample_image.to_wire(), "usage": usage}


@pytest.fixture
def animation_response(usage) -> dict:
    frames = [
        Base64Image.from_bytes(make_png(color=(0, i * 60, 0, 255))).to_wire()
        for i in range(3)
    ]
    return {"images": frames, "usage": usage}


@pytest.fixture
def keypoints() -> list:
    return [
        {"x": 16, "y": 4, "label": "NOSE"},
        {"x": 16, "y": 8, "label": "NECK", "z_index": 1},
        {"x": 12, "y": 20, "label": "LEFT HIP"},
    ]


@pytest.fixture
def fake_api():
    """Factory for FakeAPI instances."""
    return FakeAPI
