import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

_CAPITAL_LETTER = re.compile(r"[A-Z]")


def to_snake_case(name: str) -> str:
    """Turns a camelCase name into the service's snake_case wire name."""
    return _CAPITAL_LETTER.sub(lambda match: f"_{match.group(0).lower()}", name)


def convert_keys_to_snake_case(data: Mapping[str, Any]) -> Dict[str, Any]:
    # Top level only; nested values are already in wire shape.
    return {to_snake_case(key): value for key, value in data.items()}


def sanitize_filename(name: str) -> str:
    """Sanitizes a string to be a valid filename."""
    name = re.sub(r'[<>:"/\\|?*\x00-\x1F]', "_", name)
    name = re.sub(r"\s+", "_", name)
    name = name[:100]
    return name


def generate_filename(prompt: Optional[str] = None, extension: str = "png") -> str:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    if prompt:
        sane_prompt = "".join(
            c if c.isalnum() or c in (" ", "-") else "_" for c in prompt[:30]
        ).rstrip()
        sane_prompt = sane_prompt.replace(" ", "_")
        return f"{sane_prompt}_{timestamp}.{extension}"
    return f"image_{timestamp}.{extension}"


def numbered_paths(
    output_dir: Path,
    count: int,
    prompt: Optional[str] = None,
    output_filename: Optional[str] = None,
    extension: str = "png",
) -> List[Path]:
    """Builds one output path per image, suffixing ``_1``, ``_2``... when
    more than one image is written."""
    base_filename = sanitize_filename(output_filename) if output_filename else (
        generate_filename(prompt=prompt, extension=extension)
    )
    if count == 1:
        return [output_dir / base_filename]
    stem, suffix = Path(base_filename).stem, Path(base_filename).suffix
    return [output_dir / f"{stem}_{i + 1}{suffix}" for i in range(count)]
