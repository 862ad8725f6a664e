import json
from pathlib import Path

import click

from ..config import get_config_path, get_default_config, load_config, save_config


@click.group("config")
def config_cmd():
    """Configuration management commands."""
    pass


@config_cmd.command("generate")
@click.option("-o", "--output", type=click.Path(dir_okay=False), default=None,
              help="File to write (default: user config path; .toml/.yaml/.json by suffix)")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def generate_config(output, force):
    """Write the default configuration to a file."""
    config = get_default_config()
    # TOML has no null value, an absent max_depth means unbounded
    del config["version"]["max_depth"]

    config_path = Path(output) if output else get_config_path()
    if config_path.exists() and not force:
        click.echo(f"Configuration already exists at {config_path}, use --force to overwrite", err=True)
        print(json.dumps({"config_path": str(config_path), "written": False}))
        return

    written = save_config(config, config_path)
    print(json.dumps({"config_path": str(written), "written": True}))


@config_cmd.command("show")
@click.option("--pretty", is_flag=True, help="Display as formatted JSON instead of single-line JSONL")
@click.option("--path", is_flag=True, help="Show the config file path being used")
@click.option("-C", "--project", "project_dir", default=None, type=click.Path(file_okay=False),
              help="Also merge the project's .tagver.toml")
def show_config(pretty, path, project_dir):
    """Show the current configuration with all merges applied.

    By default, outputs single-line JSON (JSONL format).
    Use --pretty for human-readable formatted output.
    Use --path to see which config file is being used.
    """
    if path:
        print(json.dumps({"config_path": str(get_config_path())}))
        return

    config = load_config(project_dir=project_dir)

    if pretty:
        print(json.dumps(config, indent=2, ensure_ascii=False))
    else:
        print(json.dumps(config, ensure_ascii=False))
