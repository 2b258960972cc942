import typer
from typing_extensions import Annotated
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.panel import Panel
from pydantic import ValidationError as OptionsError
from pathlib import Path
from typing import Any, Awaitable, Callable, List, Optional
import asyncio

from pixellab import __version__
from pixellab.client import PixelLabClient
from pixellab.config import Settings
from pixellab.errors import PixelLabError
from pixellab.image import Base64Image
from pixellab.models import Usage
from pixellab.utils import numbered_paths

app = typer.Typer(
    name="pixellab",
    help="🎨 A CLI tool for the PixelLab pixel-art generation API.",
    add_completion=False,
)
console = Console()
state = {"env_file": None}


def version_callback(value: bool):
    if value:
        console.print(f"PixelLab Version: [bold green]{__version__}[/bold green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    env_file: Annotated[
        Optional[Path],
        typer.Option(
            "--env-file",
            help="Read PIXELLAB_SECRET / PIXELLAB_BASE_URL from this file instead of the environment.",
        ),
    ] = None,
):
    state["env_file"] = env_file


def _make_client() -> PixelLabClient:
    if state["env_file"]:
        return PixelLabClient.from_env_file(state["env_file"])
    return PixelLabClient.from_env()


def _run(operation: Callable[[PixelLabClient], Awaitable[Any]]) -> Any:
    async def _call():
        async with _make_client() as client:
            return await operation(client)

    try:
        with console.status("[spinner]Processing...", spinner="dots"):
            return asyncio.run(_call())
    except (PixelLabError, OptionsError, FileNotFoundError) as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(code=1)


def print_usage(usage: Usage) -> None:
    table = Table(
        title="API Usage & Cost Info",
        show_header=True,
        header_style="bold magenta",
    )
    table.add_column("Category", style="cyan", width=15)
    table.add_column("Attribute", style="green", width=20)
    table.add_column("Value", style="yellow")
    table.add_row("Usage", "type", usage.type)
    table.add_row("Usage", "usd", f"{usage.usd:.4f}")
    console.print(table)


def save_results(
    images: List[Base64Image],
    description: Optional[str],
    output: Optional[str],
    output_dir: Optional[Path],
) -> List[Path]:
    if not images:
        return []
    directory = output_dir or Path(Settings().output_dir)
    paths = numbered_paths(
        directory,
        len(images),
        prompt=description,
        output_filename=output,
        extension=images[0].format,
    )
    saved = [image.save(path) for image, path in zip(images, paths)]
    for i, path in enumerate(saved):
        width, height = images[i].to_pil().size
        console.print(
            Panel(
                f"Image {i + 1} ({width}x{height}) saved to: [green]{escape(str(path))}[/green]",
                title="[bold green]Success ✨[/bold green]",
                expand=False,
            )
        )
    return saved


OutputOption = Annotated[
    Optional[str],
    typer.Option(
        "--output",
        "-o",
        help="Output filename (e.g., robot.png). If not provided, one will be generated.",
    ),
]
OutputDirOption = Annotated[
    Optional[Path],
    typer.Option("--output-dir", help="Directory to save images to."),
]
SeedOption = Annotated[
    Optional[int], typer.Option("--seed", help="Seed for reproducibility.")
]
ImageArgument = Annotated[
    Path, typer.Argument(exists=True, dir_okay=False, help="Source image file.")
]


@app.command()
def balance():
    """Show the remaining account balance."""
    result = _run(lambda client: client.get_balance())
    console.print(f"💰 Balance: [bold green]${result.usd:.2f}[/bold green]")


@app.command()
def generate(
    description: Annotated[
        Optional[str],
        typer.Option(
            "--description",
            "-d",
            help="What to draw. If not provided, you will be asked to enter it.",
            show_default=False,
        ),
    ] = None,
    width: Annotated[int, typer.Option(min=16, help="Image width in pixels.")] = 64,
    height: Annotated[int, typer.Option(min=16, help="Image height in pixels.")] = 64,
    negative_description: Annotated[
        Optional[str],
        typer.Option("--negative-description", help="What should be avoided."),
    ] = None,
    no_background: Annotated[
        bool,
        typer.Option("--no-background", help="Transparent background.", is_flag=True),
    ] = False,
    isometric: Annotated[
        bool, typer.Option("--isometric", help="Isometric projection.", is_flag=True)
    ] = False,
    outline: Annotated[
        Optional[str], typer.Option(help="e.g. 'single color black outline'.")
    ] = None,
    shading: Annotated[Optional[str], typer.Option(help="e.g. 'basic shading'.")] = None,
    detail: Annotated[Optional[str], typer.Option(help="e.g. 'medium detail'.")] = None,
    view: Annotated[Optional[str], typer.Option(help="Camera view, e.g. 'side'.")] = None,
    direction: Annotated[
        Optional[str], typer.Option(help="Facing direction, e.g. 'east'.")
    ] = None,
    init_image: Annotated[
        Optional[Path],
        typer.Option(exists=True, dir_okay=False, help="Starting image."),
    ] = None,
    seed: SeedOption = None,
    output: OutputOption = None,
    output_dir: OutputDirOption = None,
):
    """Generate a pixel-art image from a text description."""
    if description is None:
        description = typer.prompt("Please enter the description of the image")
    console.print(f'📜 Description: "{escape(description)}"')
    options = dict(
        description=description,
        image_size={"width": width, "height": height},
        negative_description=negative_description,
        no_background=no_background,
        isometric=isometric,
        outline=outline,
        shading=shading,
        detail=detail,
        view=view,
        direction=direction,
        init_image=Base64Image.from_file(init_image) if init_image else None,
        seed=seed,
    )
    result = _run(lambda client: client.generate_image_pixflux(**options))
    save_results([result.image], description, output, output_dir)
    print_usage(result.usage)


@app.command(name="estimate-skeleton")
def estimate_skeleton(image: ImageArgument):
    """Estimate the skeleton keypoints of a character image."""
    source = Base64Image.from_file(image)
    result = _run(lambda client: client.estimate_skeleton(image=source))
    table = Table(title="🦴 Skeleton Keypoints")
    table.add_column("Label", style="cyan", no_wrap=True)
    table.add_column("X", style="green")
    table.add_column("Y", style="green")
    table.add_column("Z Index", style="yellow")
    for keypoint in result.keypoints:
        table.add_row(
            keypoint.label,
            f"{keypoint.x:g}",
            f"{keypoint.y:g}",
            "N/A" if keypoint.z_index is None else f"{keypoint.z_index:g}",
        )
    console.print(table)
    print_usage(result.usage)


@app.command()
def rotate(
    image: ImageArgument,
    to_direction: Annotated[
        Optional[str], typer.Option("--to-direction", help="Target direction.")
    ] = None,
    to_view: Annotated[
        Optional[str], typer.Option("--to-view", help="Target camera view.")
    ] = None,
    from_direction: Annotated[
        Optional[str], typer.Option("--from-direction", help="Source direction.")
    ] = None,
    from_view: Annotated[
        Optional[str], typer.Option("--from-view", help="Source camera view.")
    ] = None,
    image_guidance_scale: Annotated[
        Optional[float], typer.Option(help="How closely to follow the source image.")
    ] = None,
    seed: SeedOption = None,
    output: OutputOption = None,
    output_dir: OutputDirOption = None,
):
    """Re-render a sprite facing another direction or from another view."""
    source = Base64Image.from_file(image)
    width, height = source.to_pil().size
    result = _run(
        lambda client: client.rotate(
            image_size={"width": width, "height": height},
            from_image=source,
            from_view=from_view,
            to_view=to_view,
            from_direction=from_direction,
            to_direction=to_direction,
            image_guidance_scale=image_guidance_scale,
            seed=seed,
        )
    )
    save_results([result.image], image.stem, output, output_dir)
    print_usage(result.usage)


@app.command()
def animate(
    reference_image: Annotated[
        Path,
        typer.Option(
            "--reference-image",
            "-r",
            exists=True,
            dir_okay=False,
            help="Character to animate.",
        ),
    ],
    action: Annotated[str, typer.Option("--action", "-a", help="e.g. 'walk'.")],
    description: Annotated[
        Optional[str],
        typer.Option(
            "--description",
            "-d",
            help="Character description. If not provided, you will be asked to enter it.",
            show_default=False,
        ),
    ] = None,
    n_frames: Annotated[
        Optional[int], typer.Option("--frames", "-n", min=1, help="Number of frames.")
    ] = None,
    view: Annotated[Optional[str], typer.Option(help="Camera view, e.g. 'side'.")] = None,
    direction: Annotated[
        Optional[str], typer.Option(help="Facing direction, e.g. 'east'.")
    ] = None,
    seed: SeedOption = None,
    output: OutputOption = None,
    output_dir: OutputDirOption = None,
):
    """Animate a character from a text action."""
    if description is None:
        description = typer.prompt("Please enter the description of the character")
    reference = Base64Image.from_file(reference_image)
    width, height = reference.to_pil().size
    result = _run(
        lambda client: client.animate_with_text(
            image_size={"width": width, "height": height},
            description=description,
            action=action,
            reference_image=reference,
            n_frames=n_frames,
            view=view,
            direction=direction,
            seed=seed,
        )
    )
    save_results(result.images, f"{description} {action}", output, output_dir)
    print_usage(result.usage)


if __name__ == "__main__":
    app()
