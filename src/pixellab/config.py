from pathlib import Path
from typing import Dict, Optional, Union

from dotenv import dotenv_values
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.pixellab.ai/v1"

# Looked up in order; the second name is the legacy one.
SECRET_KEYS = ("PIXELLAB_SECRET", "PIXELLAB_API_KEY")
BASE_URL_KEY = "PIXELLAB_BASE_URL"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PIXELLAB_",
        env_ignore_empty=True,
        extra="ignore",
    )

    secret: Optional[str] = Field(
        None,
        validation_alias=AliasChoices(*SECRET_KEYS),
        description="Bearer secret for the PixelLab API.",
    )
    base_url: str = Field(
        DEFAULT_BASE_URL, description="Base URL of the PixelLab API."
    )
    output_dir: str = Field(
        "generated_images", description="Default directory to save generated images."
    )


def load_env_file(env_file: Union[str, Path]) -> Dict[str, Optional[str]]:
    """Reads ``KEY=value`` pairs from a dotenv-style file.

    Surrounding quotes are removed, blank lines and ``#`` comments are skipped
    and no ``${VAR}`` interpolation is done. A missing file raises
    ``FileNotFoundError``.
    """
    with open(env_file, encoding="utf-8") as stream:
        return dict(dotenv_values(stream=stream, interpolate=False))


def resolve_secret(values: Dict[str, Optional[str]]) -> Optional[str]:
    for key in SECRET_KEYS:
        if values.get(key):
            return values[key]
    return None
