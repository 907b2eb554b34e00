"""
Command-line interface for the sprite compiler.
Provides the standalone build-step command and the inline code generator.
"""

import os
import sys
from pathlib import Path
from typing import Optional
import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import CompilerConfig, ENV_OVERRIDES
from .errors import SpriteCompilerError
from .pipeline import SpriteCompiler

# Initialize typer app and rich console
app = typer.Typer(
    name="sprite-compiler",
    help="Sprite compiler - Turn sprite sheets into an indexed palette and 8×8 tile constants",
    add_completion=False,
    rich_markup_mode="rich",
    epilog="""
[bold]Examples:[/bold]
  [cyan]sprite-compiler compile assets src/sprites.rs[/cyan]          Compile opaque sprite sheets to a file
  [cyan]sprite-compiler compile assets out.json --format json[/cyan]  Compile to JSON
  [cyan]sprite-compiler inline assets > src/sprites.rs[/cyan]         Generate source with include markers

[bold]Environment Variables:[/bold]
  Use [cyan]sprite-compiler config --env-vars[/cyan] to see all available variables.
    """
)
console = Console()
err_console = Console(stderr=True)


@app.command()
def compile(
    assets_dir: Path = typer.Argument(..., help="Find assets in this directory, recursively"),
    out_file: Path = typer.Argument(..., help="Write compiled assets to this file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    output_format: Optional[str] = typer.Option(None, "--format", help="Output format: rust or json"),
    alpha: Optional[bool] = typer.Option(None, "--alpha/--no-alpha", help="Read RGBA images with transparent index 0"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """Compile sprite sheets into a source file."""
    config = _load_config(CompilerConfig.standalone(), config_file, output_format, alpha, verbose)
    console.print(f"[bold blue]Compiling sprites from {assets_dir}...[/bold blue]")
    
    try:
        result = SpriteCompiler(config).compile_to_file(assets_dir, out_file)
    except SpriteCompilerError as e:
        console.print(f"[red]Compilation failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    except OSError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    
    console.print(f"[green]✓[/green] Compiled {result.sprite_count} sprites, "
                  f"{result.asset_set.tile_count} tiles, {result.palette_size} colors")
    console.print(f"  • Output file: {out_file}")


@app.command()
def inline(
    assets_dir: Path = typer.Argument(..., help="Find assets in this directory, recursively"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    output_format: Optional[str] = typer.Option(None, "--format", help="Output format: rust or json"),
    include_prefix: Optional[str] = typer.Option(None, "--include-prefix", help="Prefix for include marker paths"),
    alpha: Optional[bool] = typer.Option(None, "--alpha/--no-alpha", help="Read RGBA images with transparent index 0")
):
    """Generate source text for embedding, marking every input file read."""
    config = _load_config(CompilerConfig.inline(), config_file, output_format, alpha, False, quiet=True)
    if include_prefix is not None:
        config.include_prefix = include_prefix
    
    try:
        result = SpriteCompiler(config).compile_inline(assets_dir)
    except (SpriteCompilerError, OSError) as e:
        # the embedding build reports this at the invocation site
        typer.echo(f'compile_error!("{_rust_string(str(e))}");')
        err_console.print(f"[red]Compilation failed:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    
    typer.echo(result.source, nl=False)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show current configuration"),
    validate_config: bool = typer.Option(False, "--validate", help="Validate configuration file"),
    config_file: Optional[Path] = typer.Option(None, "--config", "-c", help="Configuration file path"),
    env_vars: bool = typer.Option(False, "--env-vars", help="Show available environment variables")
):
    """Manage compiler configuration."""
    if env_vars:
        _display_env_vars()
        return
    
    if not (show or validate_config):
        console.print("Use --show to display configuration, --validate to check it, or --env-vars to see environment variables.")
        return
    
    config = _load_config(CompilerConfig.standalone(), config_file, None, None, False)
    
    if show:
        _display_config(config)
    
    if validate_config:
        errors = config.validate()
        if errors:
            console.print("[red]Configuration validation errors:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            raise typer.Exit(1)
        console.print("[green]✓ Configuration is valid[/green]")


@app.command()
def version():
    """Show sprite compiler version information."""
    console.print("[bold]Sprite Compiler[/bold]")
    console.print(f"Version: {__version__}")
    console.print("Python: " + sys.version.split()[0])
    
    import PIL
    import numpy
    import jinja2
    import yaml
    
    table = Table(show_header=False)
    table.add_column("Package", style="cyan")
    table.add_column("Version", style="green")
    for name, module_version in [
        ("Pillow", PIL.__version__),
        ("NumPy", numpy.__version__),
        ("Jinja2", jinja2.__version__),
        ("PyYAML", yaml.__version__),
        ("Typer", typer.__version__),
    ]:
        table.add_row(name, module_version)
    
    console.print("\n[bold]Dependencies:[/bold]")
    console.print(table)


def _load_config(base: CompilerConfig, config_file: Optional[Path], output_format: Optional[str],
                 alpha: Optional[bool], verbose: bool, quiet: bool = False) -> CompilerConfig:
    """Load configuration: preset, then config file, then environment, then command-line options."""
    out = err_console if quiet else console
    config = base
    
    if config_file is None:
        for candidate in (Path("sprite_compiler.toml"), Path("sprite_compiler.json")):
            if candidate.exists():
                config_file = candidate
                break
    
    if config_file is not None:
        if not config_file.exists():
            out.print(f"[red]Configuration file not found:[/red] {config_file}")
            raise typer.Exit(1)
        try:
            config = config.merged_with_file(config_file)
        except ValueError as e:
            out.print(f"[red]Error loading configuration:[/red] {escape(str(e))}")
            raise typer.Exit(1)
        out.print(f"[dim]Using configuration: {config_file}[/dim]")
    
    config = CompilerConfig.default(config)
    
    env_vars_used = [key for key in os.environ if key in ENV_OVERRIDES]
    if env_vars_used:
        out.print(f"[dim]Environment overrides: {', '.join(sorted(env_vars_used))}[/dim]")
    
    if output_format is not None:
        config.output_format = output_format
    if alpha is not None:
        config.pixel_model = "rgba" if alpha else "rgb"
    if verbose:
        config.log_level = "DEBUG"
    
    errors = config.validate()
    if errors:
        out.print("[red]Configuration validation errors:[/red]")
        for error in errors:
            out.print(f"  • {error}")
        raise typer.Exit(1)
    
    return config


def _rust_string(message: str) -> str:
    return message.replace('\\', '\\\\').replace('"', '\\"')


def _display_config(config: CompilerConfig) -> None:
    """Display configuration in a formatted table."""
    table = Table(title="Sprite Compiler Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    
    table.add_row("Pixel Model", config.pixel_model)
    table.add_row("Descriptor Extension", config.descriptor_extension)
    table.add_row("Image Extension", config.image_extension)
    table.add_row("Output Format", config.output_format)
    table.add_row("Color Type", config.color_type)
    table.add_row("Palette Name", config.palette_name)
    table.add_row("Include Prefix", config.include_prefix)
    table.add_row("Log Level", config.log_level)
    
    console.print(table)


def _display_env_vars() -> None:
    """Display available environment variables for configuration."""
    table = Table(title="Sprite Compiler Environment Variables")
    table.add_column("Environment Variable", style="cyan", no_wrap=True)
    table.add_column("Description", style="white")
    table.add_column("Example", style="green")
    
    env_vars = [
        ("SPRITE_COMPILER_PIXEL_MODEL", "Pixel model (rgb/rgba)", "rgba"),
        ("SPRITE_COMPILER_DESCRIPTOR_EXTENSION", "Descriptor file extension", ".yml"),
        ("SPRITE_COMPILER_IMAGE_EXTENSION", "Image file extension", ".png"),
        ("SPRITE_COMPILER_OUTPUT_FORMAT", "Output format (rust/json)", "rust"),
        ("SPRITE_COMPILER_COLOR_TYPE", "Color type imported by Rust output", "crate::Color"),
        ("SPRITE_COMPILER_PALETTE_NAME", "Name of the palette constant", "PALETTE"),
        ("SPRITE_COMPILER_INCLUDE_PREFIX", "Prefix for include marker paths", "../"),
        ("SPRITE_COMPILER_LOG_LEVEL", "Log level", "INFO"),
    ]
    
    for var_name, description, example in env_vars:
        table.add_row(var_name, description, example)
    
    console.print(table)
    console.print("\n[dim]Set these environment variables to override configuration file settings.[/dim]")


if __name__ == "__main__":
    app()
