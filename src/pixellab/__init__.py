__version__ = "0.1.0"

from pixellab.client import PixelLabClient
from pixellab.errors import (
    AuthenticationError,
    BadRequestError,
    ConfigurationError,
    DecodeError,
    PixelLabError,
    ValidationError,
)
from pixellab.image import Base64Image
from pixellab.models import (
    AnimateResponse,
    AnimateWithSkeletonRequest,
    AnimateWithTextRequest,
    BalanceResponse,
    CameraView,
    Detail,
    Direction,
    EstimateSkeletonRequest,
    EstimateSkeletonResponse,
    GenerateImageBitforgeRequest,
    GenerateImagePixfluxRequest,
    GenerateImageResponse,
    ImageSize,
    InpaintRequest,
    Keypoint,
    Outline,
    RotateRequest,
    Shading,
    SkeletonFrame,
    SkeletonLabel,
    Usage,
)

Client = PixelLabClient

__all__ = [
    "AnimateResponse",
    "AnimateWithSkeletonRequest",
    "AnimateWithTextRequest",
    "AuthenticationError",
    "BadRequestError",
    "BalanceResponse",
    "Base64Image",
    "CameraView",
    "Client",
    "ConfigurationError",
    "DecodeError",
    "Detail",
    "Direction",
    "EstimateSkeletonRequest",
    "EstimateSkeletonResponse",
    "GenerateImageBitforgeRequest",
    "GenerateImagePixfluxRequest",
    "GenerateImageResponse",
    "ImageSize",
    "InpaintRequest",
    "Keypoint",
    "Outline",
    "PixelLabClient",
    "PixelLabError",
    "RotateRequest",
    "Shading",
    "SkeletonFrame",
    "SkeletonLabel",
    "Usage",
    "ValidationError",
]
