import binascii
import io
import logging
from base64 import b64decode, b64encode
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Union

from PIL import Image
from pydantic import BaseModel, ConfigDict

from pixellab.errors import DecodeError

logger = logging.getLogger(__name__)


class Base64Image(BaseModel):
    """An encoded image in the ``{type, base64, format}`` shape the service
    uses for every image field, in requests and responses alike.

    The payload is not checked when the image is built; invalid base64 only
    surfaces as a :class:`DecodeError` when converting to bytes.
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["base64"] = "base64"
    base64: str
    format: str = "png"

    @classmethod
    def from_bytes(cls, data: bytes, format: str = "png") -> "Base64Image":
        return cls(base64=b64encode(data).decode("ascii"), format=format)

    @classmethod
    def from_base64(cls, text: str, format: str = "png") -> "Base64Image":
        return cls(base64=text, format=format)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Base64Image":
        path = Path(path)
        format = path.suffix[1:].lower() or "png"
        return cls.from_bytes(path.read_bytes(), format=format)

    @classmethod
    def from_pil(cls, image: Image.Image, format: str = "png") -> "Base64Image":
        buffer = io.BytesIO()
        image.save(buffer, format="JPEG" if format in ("jpg", "jpeg") else format)
        return cls.from_bytes(buffer.getvalue(), format=format)

    @classmethod
    def from_wire(cls, data: Mapping[str, Any]) -> "Base64Image":
        return cls(base64=data["base64"], format=data.get("format", "png"))

    def to_bytes(self) -> bytes:
        try:
            return b64decode(self.base64, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Invalid base64 image data: {e}", detail=str(e)) from e

    def to_pil(self) -> Image.Image:
        return Image.open(io.BytesIO(self.to_bytes()))

    def to_wire(self) -> Dict[str, str]:
        return {"type": self.type, "base64": self.base64, "format": self.format}

    def to_data_url(self) -> str:
        if self.format == "png":
            mime_type = "image/png"
        elif self.format in ("jpg", "jpeg"):
            mime_type = "image/jpeg"
        else:
            mime_type = f"image/{self.format}"
        return f"data:{mime_type};base64,{self.base64}"

    def save(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(self.to_bytes())
        logger.info(f"Image saved to {path}")
        return path
