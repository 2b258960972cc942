from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from pixellab.image import Base64Image
from pixellab.utils import convert_keys_to_snake_case

CameraView = Literal["side", "low top-down", "high top-down"]

Direction = Literal[
    "south",
    "south-east",
    "east",
    "north-east",
    "north",
    "north-west",
    "west",
    "south-west",
]

Outline = Literal[
    "single color black outline",
    "single color outline",
    "selective outline",
    "lineless",
]

Shading = Literal[
    "flat shading",
    "basic shading",
    "medium shading",
    "detailed shading",
    "highly detailed shading",
]

Detail = Literal["low detail", "medium detail", "highly detailed"]

SkeletonLabel = Literal[
    "NOSE",
    "NECK",
    "RIGHT SHOULDER",
    "RIGHT ELBOW",
    "RIGHT ARM",
    "LEFT SHOULDER",
    "LEFT ELBOW",
    "LEFT ARM",
    "RIGHT HIP",
    "RIGHT KNEE",
    "RIGHT LEG",
    "LEFT HIP",
    "LEFT KNEE",
    "LEFT LEG",
    "RIGHT EYE",
    "LEFT EYE",
    "RIGHT EAR",
    "LEFT EAR",
]


class ImageSize(BaseModel):
    width: int
    height: int


class Keypoint(BaseModel):
    x: float
    y: float
    label: SkeletonLabel
    z_index: Optional[float] = Field(
        None, validation_alias=AliasChoices("z_index", "zIndex")
    )

    @model_serializer(mode="wrap")
    def _omit_unset_z_index(self, handler):
        data = handler(self)
        if data.get("z_index") is None:
            data.pop("z_index", None)
        return data


class SkeletonFrame(BaseModel):
    """One pose at one time step."""

    keypoints: List[Keypoint]


# A pose is accepted either wrapped in a frame or as a bare keypoint list.
SkeletonInput = Union[SkeletonFrame, List[Keypoint]]


def normalize_skeleton_frame(frame: SkeletonInput) -> SkeletonFrame:
    if isinstance(frame, SkeletonFrame):
        return frame
    return SkeletonFrame(keypoints=list(frame))


class Usage(BaseModel):
    type: Literal["usd"] = "usd"
    usd: float


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class WireRequest(BaseModel):
    """Base for operation options.

    Fields are declared in wire order with their defaults, so each subclass is
    the default table for its operation. Options may be passed in snake_case
    or in the camelCase used by the service's other SDKs; an option given as
    ``None`` is treated as omitted.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="forbid"
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_none_options(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_wire(self) -> Dict[str, Any]:
        return convert_keys_to_snake_case(self.model_dump(by_alias=True))


class GenerateImagePixfluxRequest(WireRequest):
    description: str
    image_size: ImageSize
    negative_description: str = ""
    text_guidance_scale: float = 8
    outline: Optional[Outline] = None
    shading: Optional[Shading] = None
    detail: Optional[Detail] = None
    view: Optional[CameraView] = None
    direction: Optional[Direction] = None
    isometric: bool = False
    no_background: bool = False
    coverage_percentage: Optional[float] = None
    init_image: Optional[Base64Image] = None
    init_image_strength: int = 300
    color_image: Optional[Base64Image] = None
    seed: int = 0


class GenerateImageBitforgeRequest(WireRequest):
    description: str
    image_size: ImageSize
    negative_description: str = ""
    text_guidance_scale: float = 3.0
    extra_guidance_scale: float = 3.0
    skeleton_guidance_scale: float = 1.0
    style_strength: float = 0.0
    no_background: bool = False
    seed: int = 0
    outline: Optional[Outline] = None
    shading: Optional[Shading] = None
    detail: Optional[Detail] = None
    view: Optional[CameraView] = None
    direction: Optional[Direction] = None
    isometric: bool = False
    oblique_projection: bool = False
    coverage_percentage: Optional[float] = None
    init_image: Optional[Base64Image] = None
    init_image_strength: int = 300
    style_image: Optional[Base64Image] = None
    inpainting_image: Optional[Base64Image] = None
    mask_image: Optional[Base64Image] = None
    skeleton_keypoints: Optional[SkeletonInput] = None
    color_image: Optional[Base64Image] = None

    @field_validator("skeleton_keypoints")
    @classmethod
    def _wrap_skeleton(cls, value: Optional[SkeletonInput]) -> Optional[SkeletonFrame]:
        return None if value is None else normalize_skeleton_frame(value)


class EstimateSkeletonRequest(WireRequest):
    image: Base64Image


class InpaintRequest(WireRequest):
    description: str
    image_size: ImageSize
    inpainting_image: Base64Image
    mask_image: Base64Image
    negative_description: str = ""
    text_guidance_scale: float = 3.0
    extra_guidance_scale: float = 3.0
    outline: Optional[Outline] = None
    shading: Optional[Shading] = None
    detail: Optional[Detail] = None
    view: Optional[CameraView] = None
    direction: Optional[Direction] = None
    isometric: bool = False
    oblique_projection: bool = False
    no_background: bool = False
    init_image: Optional[Base64Image] = None
    init_image_strength: int = 300
    color_image: Optional[Base64Image] = None
    seed: int = 0


class RotateRequest(WireRequest):
    image_size: ImageSize
    from_image: Base64Image
    from_view: Optional[CameraView] = None
    to_view: Optional[CameraView] = None
    from_direction: Optional[Direction] = None
    to_direction: Optional[Direction] = None
    view_change: Optional[float] = None
    direction_change: Optional[float] = None
    image_guidance_scale: float = 3.0
    isometric: bool = False
    oblique_projection: bool = False
    init_image: Optional[Base64Image] = None
    init_image_strength: int = 300
    mask_image: Optional[Base64Image] = None
    color_image: Optional[Base64Image] = None
    seed: int = 0


class AnimateWithTextRequest(WireRequest):
    image_size: ImageSize
    description: str
    action: str
    reference_image: Base64Image
    view: CameraView = "side"
    direction: Direction = "east"
    negative_description: Optional[str] = None
    text_guidance_scale: float = 7.5
    image_guidance_scale: float = 1.5
    n_frames: int = 4
    start_frame_index: int = 0
    init_images: Optional[List[Optional[Base64Image]]] = None
    init_image_strength: int = 300
    inpainting_images: Optional[List[Optional[Base64Image]]] = None
    mask_images: Optional[List[Optional[Base64Image]]] = None
    color_image: Optional[Base64Image] = None
    seed: int = 0

    @model_validator(mode="after")
    def _fill_inpainting_slots(self) -> "AnimateWithTextRequest":
        # Every frame gets an explicit, possibly empty, inpainting slot.
        if self.inpainting_images is None:
            self.inpainting_images = [None] * self.n_frames
        return self


class AnimateWithSkeletonRequest(WireRequest):
    image_size: ImageSize
    skeleton_keypoints: List[SkeletonInput]
    view: CameraView
    direction: Direction
    reference_guidance_scale: float = 1.1
    pose_guidance_scale: float = 3.0
    isometric: bool = False
    oblique_projection: bool = False
    init_images: Optional[List[Optional[Base64Image]]] = None
    init_image_strength: int = 300
    reference_image: Optional[Base64Image] = None
    inpainting_images: Optional[List[Optional[Base64Image]]] = None
    mask_images: Optional[List[Optional[Base64Image]]] = None
    color_image: Optional[Base64Image] = None
    seed: int = 0

    @field_validator("skeleton_keypoints")
    @classmethod
    def _wrap_frames(cls, value: List[SkeletonInput]) -> List[SkeletonFrame]:
        return [normalize_skeleton_frame(frame) for frame in value]


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class GenerateImageResponse(BaseModel):
    image: Base64Image
    usage: Usage


class AnimateResponse(BaseModel):
    images: List[Base64Image]
    usage: Usage


class EstimateSkeletonResponse(BaseModel):
    keypoints: List[Keypoint]
    usage: Usage


class BalanceResponse(BaseModel):
    type: Literal["usd"] = "usd"
    usd: float
