"""CLI interface."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer
from PIL import Image

from glint.emotions import list_emotions
from glint.push import frames_to_gif_base64, frames_to_gif_bytes, push_to_tidbyt
from glint.registry import STYLE_REF_RE, RegistryClient, RegistryError
from glint.styles import RenderedEmotion, StyleCatalog
from glint.utils.config import DEFAULT_INSTALLATION_ID, DEFAULT_STYLE, AppConfig
from glint.utils.file_utils import ensure_dir, read_text_file
from glint.validate import validate_style_directory

app = typer.Typer(add_completion=False, help="Express emotional status on a Tidbyt display via eyes & eyebrows.")
auth_app = typer.Typer(add_completion=False, help="Authenticate with the community registry.")
app.add_typer(auth_app, name="auth")

logger = logging.getLogger(__name__)

# requests' exceptions derive from OSError
RENDER_ERRORS = (ValueError, RuntimeError, OSError)
REGISTRY_ERRORS = (RegistryError, OSError)


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.find_root().obj


def _render(ctx: typer.Context, style: Optional[str], emotion: str, fps: float, duration: float) -> RenderedEmotion:
    config = _config(ctx)
    style_name = config.resolve(style, "style", DEFAULT_STYLE)
    try:
        rendered = StyleCatalog(config.styles_dir).render_emotion_frames(style_name, emotion, fps=fps, duration=duration)
    except RENDER_ERRORS as exc:
        logger.debug("render failed", exc_info=True)
        _fail(str(exc))
    typer.echo(f"Rendered {emotion} ({style_name}, {len(rendered.frames)} frame(s))")
    return rendered


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if ctx.obj is None:
        ctx.obj = AppConfig.load()


@app.command()
def show(
    ctx: typer.Context,
    emotion: str = typer.Argument(..., help="Emotion to display (e.g. happy, sad, angry)."),
    style: Optional[str] = typer.Option(None, "--style", "-s", help="Style name."),
    token: Optional[str] = typer.Option(None, "--token", "-t", help="Tidbyt API token (or TIDBYT_TOKEN)."),
    device_id: Optional[str] = typer.Option(None, "--device-id", "-d", help="Tidbyt device ID (or TIDBYT_DEVICE_ID)."),
    installation_id: Optional[str] = typer.Option(None, "--installation-id", "-i", help="Tidbyt installation ID."),
    label: bool = typer.Option(False, "--label", help="Overlay the emotion name."),
    fps: float = typer.Option(15, "--fps", help="Frame rate for animated styles."),
    duration: float = typer.Option(3, "--duration", help="Seconds of animation to render."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the GIF here instead of pushing."),
):
    """Display an emotion on your Tidbyt."""
    config = _config(ctx)
    resolved_token = config.resolve(token, "token")
    resolved_device = config.resolve(device_id, "device_id")
    if output is None and (not resolved_token or not resolved_device):
        _fail("TIDBYT_TOKEN and TIDBYT_DEVICE_ID are required (use --token/--device-id, config or env)")

    rendered = _render(ctx, style, emotion, fps, duration)
    caption = emotion.lower() if label else None

    if output is not None:
        output.write_bytes(frames_to_gif_bytes(rendered.frames, rendered.delay_ms, caption))
        typer.echo(f"Wrote {output}")
        return

    typer.echo("Pushing to Tidbyt...")
    try:
        push_to_tidbyt(
            frames_to_gif_base64(rendered.frames, rendered.delay_ms, caption),
            token=resolved_token,
            device_id=resolved_device,
            installation_id=config.resolve(installation_id, "installation_id", DEFAULT_INSTALLATION_ID),
        )
    except RENDER_ERRORS as exc:
        _fail(str(exc))
    typer.echo(f'Emotion "{emotion}" displayed successfully')


@app.command("list")
def list_command():
    """List available emotions."""
    typer.echo("Available emotions:")
    for name in list_emotions():
        typer.echo(f"  - {name}")


@app.command()
def styles(ctx: typer.Context):
    """List available styles."""
    for s in StyleCatalog(_config(ctx).styles_dir).list_styles():
        typer.echo(f"  {s.name:<14} {s.type.value:<13} {s.description}")


@app.command()
def validate(directory: Path = typer.Argument(..., help="Style directory to check.")):
    """Validate a style directory."""
    result = validate_style_directory(directory)
    for warning in result.warnings:
        typer.echo(f"Warning: {warning}")
    for error in result.errors:
        typer.echo(f"Error: {error}", err=True)
    if not result.valid:
        raise typer.Exit(code=1)
    typer.echo("Style is valid")


@app.command()
def render(
    ctx: typer.Context,
    emotion: str = typer.Argument(...),
    output: Path = typer.Option(..., "--output", "-o", help="PNG (first frame) or GIF path."),
    style: Optional[str] = typer.Option(None, "--style", "-s"),
    scale: int = typer.Option(1, "--scale", min=1, help="Nearest-neighbour upscale factor."),
    fps: float = typer.Option(15, "--fps"),
    duration: float = typer.Option(3, "--duration"),
):
    """Render an emotion to a local file for previews."""
    rendered = _render(ctx, style, emotion, fps, duration)
    frames = rendered.frames
    if scale > 1:
        frames = [frame.repeat(scale, axis=0).repeat(scale, axis=1) for frame in frames]

    if output.suffix.lower() == ".gif":
        output.write_bytes(frames_to_gif_bytes(frames, rendered.delay_ms))
    else:
        Image.fromarray(frames[0]).save(output)
    typer.echo(f"Wrote {output}")


@app.command()
def frames(
    svg_file: Path = typer.Argument(..., help="Animated SVG to sample."),
    output_dir: Path = typer.Option(Path("frames"), "--output-dir", "-o"),
    fps: float = typer.Option(15, "--fps"),
    duration: float = typer.Option(3, "--duration"),
    width: int = typer.Option(64, "--width"),
    height: int = typer.Option(32, "--height"),
):
    """Dump every animation frame of an SVG as numbered PNGs."""
    from glint.animation import render_animated_frames

    try:
        rendered = render_animated_frames(read_text_file(svg_file), fps, duration, width, height)
    except RENDER_ERRORS as exc:
        _fail(str(exc))
    out = ensure_dir(output_dir)
    for i, frame in enumerate(rendered):
        Image.fromarray(frame).save(out / f"frame_{i:03d}.png")
    typer.echo(f"Wrote {len(rendered)} frames to {out}")


@app.command()
def search(
    ctx: typer.Context,
    query: Optional[str] = typer.Argument(None),
    author: Optional[str] = typer.Option(None, "--author"),
):
    """Search the community registry."""
    try:
        result = RegistryClient(_config(ctx)).search(query, author)
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(json.dumps(result, indent=2))


@app.command()
def info(ctx: typer.Context, ref: str = typer.Argument(..., help="@author/name")):
    """Show registry details for a style."""
    match = STYLE_REF_RE.match(ref)
    if not match:
        _fail(f"Invalid style reference: {ref}. Use @author/name")
    author, slug = match.groups()
    try:
        result = RegistryClient(_config(ctx)).get_style_info(author, slug)
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(json.dumps(result, indent=2))


@app.command()
def install(ctx: typer.Context, ref: str = typer.Argument(..., help="@author/name")):
    """Install a style from the community registry."""
    try:
        path = RegistryClient(_config(ctx)).install(ref)
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(f"Installed to {path}")


@app.command()
def publish(ctx: typer.Context, style: str = typer.Argument(..., help="Name of a style in the user styles directory.")):
    """Publish a local style to the community registry."""
    try:
        result = RegistryClient(_config(ctx)).publish(style)
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(json.dumps(result, indent=2))


@auth_app.command()
def login(ctx: typer.Context):
    """Log in with a device code."""

    def prompt(url: str, code: str) -> None:
        typer.echo(f"\nOpen this URL in your browser:\n  {url}\n")
        typer.echo(f"Enter code: {code}\n")
        typer.echo("Waiting for authorization...")

    try:
        username = RegistryClient(_config(ctx)).login(prompt)
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(f"Logged in as {username}")


@auth_app.command()
def whoami(ctx: typer.Context):
    """Show the authenticated user."""
    try:
        me = RegistryClient(_config(ctx)).whoami()
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(me.get("username", ""))


@auth_app.command()
def token(ctx: typer.Context, name: str = typer.Argument(..., help="Label for the new API token.")):
    """Create an API token for CI use."""
    try:
        created = RegistryClient(_config(ctx)).create_token(name)
    except REGISTRY_ERRORS as exc:
        _fail(str(exc))
    typer.echo(created.get("token", ""))


if __name__ == "__main__":
    app()
