import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Type, TypeVar, Union

import httpx

from pixellab.config import (
    BASE_URL_KEY,
    DEFAULT_BASE_URL,
    Settings,
    load_env_file,
    resolve_secret,
)
from pixellab.errors import ConfigurationError, PixelLabError, error_from_response
from pixellab.models import (
    AnimateResponse,
    AnimateWithSkeletonRequest,
    AnimateWithTextRequest,
    BalanceResponse,
    EstimateSkeletonRequest,
    EstimateSkeletonResponse,
    GenerateImageBitforgeRequest,
    GenerateImagePixfluxRequest,
    GenerateImageResponse,
    InpaintRequest,
    RotateRequest,
    WireRequest,
)

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=WireRequest)


def _build_request(
    request_cls: Type[RequestT],
    request: Union[RequestT, Mapping[str, Any], None],
    options: Dict[str, Any],
) -> RequestT:
    if request is None:
        return request_cls.model_validate(options)
    if options:
        raise TypeError(
            f"Pass either a {request_cls.__name__} or keyword options, not both."
        )
    return request_cls.model_validate(request)


class PixelLabClient:
    """Async client for the PixelLab API.

    Every operation accepts either a ready request model or keyword options::

        async with PixelLabClient.from_env() as client:
            result = await client.generate_image_pixflux(
                description="a small robot",
                image_size={"width": 32, "height": 32},
            )
            result.image.save("robot.png")

    The client holds no per-call state and can serve any number of concurrent
    calls. It performs no retries and sets no timeout of its own.
    """

    def __init__(
        self,
        secret: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: Optional[float] = None,
    ):
        if not secret:
            raise ConfigurationError("A PixelLab secret is required.")
        self.secret = secret
        self.base_url = base_url.rstrip("/")
        self.async_client = httpx.AsyncClient(transport=transport, timeout=timeout)

    @classmethod
    def from_env(cls, **kwargs: Any) -> "PixelLabClient":
        """Builds a client from PIXELLAB_SECRET (or the legacy PIXELLAB_API_KEY)
        and PIXELLAB_BASE_URL."""
        settings = Settings()
        if not settings.secret:
            raise ConfigurationError(
                "PIXELLAB_SECRET or PIXELLAB_API_KEY environment variable is not set"
            )
        return cls(settings.secret, settings.base_url, **kwargs)

    @classmethod
    def from_env_file(cls, env_file: Union[str, Path], **kwargs: Any) -> "PixelLabClient":
        """Builds a client from the same keys, read from a dotenv file only."""
        values = load_env_file(env_file)
        secret = resolve_secret(values)
        if not secret:
            raise ConfigurationError(
                f"PIXELLAB_SECRET or PIXELLAB_API_KEY not found in {env_file}"
            )
        base_url = values.get(BASE_URL_KEY) or DEFAULT_BASE_URL
        return cls(secret, base_url, **kwargs)

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret}",
            "Content-Type": "application/json",
        }

    async def close(self):
        await self.async_client.aclose()

    async def __aenter__(self) -> "PixelLabClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # ----- dispatch -----

    async def _request(
        self, method: str, path: str, body: Optional[Dict[str, Any]] = None
    ) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug(f"{method} {url}")
        try:
            response = await self.async_client.request(
                method, url, headers=self.headers, json=body
            )
        except httpx.RequestError as e:
            logger.error(f"Transport error on {method} {path}: {e}")
            raise
        return self._handle_response(response, path)

    def _handle_response(self, response: httpx.Response, path: str) -> Any:
        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise PixelLabError(
                    f"Invalid JSON in response from {path}: {e}",
                    response.status_code,
                    response.text,
                ) from e
        error = error_from_response(response)
        logger.error(
            f"PixelLab API error {response.status_code} on {path}: {error.message}"
        )
        raise error

    async def post_json(self, path: str, body: Dict[str, Any]) -> Any:
        return await self._request("POST", path, body)

    async def get_json(self, path: str) -> Any:
        return await self._request("GET", path)

    # ----- operations -----

    async def get_balance(self) -> BalanceResponse:
        data = await self.get_json("/balance")
        return BalanceResponse.model_validate(data)

    async def generate_image_pixflux(
        self, request: Optional[GenerateImagePixfluxRequest] = None, **options: Any
    ) -> GenerateImageResponse:
        """Generates an image from a text description."""
        request = _build_request(GenerateImagePixfluxRequest, request, options)
        data = await self.post_json("/generate-image-pixflux", request.to_wire())
        return GenerateImageResponse.model_validate(data)

    async def generate_image_bitforge(
        self, request: Optional[GenerateImageBitforgeRequest] = None, **options: Any
    ) -> GenerateImageResponse:
        """Generates an image guided by a style image and an optional skeleton."""
        request = _build_request(GenerateImageBitforgeRequest, request, options)
        data = await self.post_json("/generate-image-bitforge", request.to_wire())
        return GenerateImageResponse.model_validate(data)

    async def estimate_skeleton(
        self, request: Optional[EstimateSkeletonRequest] = None, **options: Any
    ) -> EstimateSkeletonResponse:
        request = _build_request(EstimateSkeletonRequest, request, options)
        data = await self.post_json("/estimate-skeleton", request.to_wire())
        return EstimateSkeletonResponse.model_validate(data)

    async def inpaint(
        self, request: Optional[InpaintRequest] = None, **options: Any
    ) -> GenerateImageResponse:
        request = _build_request(InpaintRequest, request, options)
        data = await self.post_json("/inpaint", request.to_wire())
        return GenerateImageResponse.model_validate(data)

    async def rotate(
        self, request: Optional[RotateRequest] = None, **options: Any
    ) -> GenerateImageResponse:
        """Re-renders a sprite from another view and/or direction."""
        request = _build_request(RotateRequest, request, options)
        data = await self.post_json("/rotate", request.to_wire())
        return GenerateImageResponse.model_validate(data)

    async def animate_with_text(
        self, request: Optional[AnimateWithTextRequest] = None, **options: Any
    ) -> AnimateResponse:
        request = _build_request(AnimateWithTextRequest, request, options)
        data = await self.post_json("/animate-with-text", request.to_wire())
        return AnimateResponse.model_validate(data)

    async def animate_with_skeleton(
        self, request: Optional[AnimateWithSkeletonRequest] = None, **options: Any
    ) -> AnimateResponse:
        """Animates a character following one skeleton frame per output frame."""
        request = _build_request(AnimateWithSkeletonRequest, request, options)
        data = await self.post_json("/animate-with-skeleton", request.to_wire())
        return AnimateResponse.model_validate(data)
