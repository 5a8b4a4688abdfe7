"""Command-line interface for HiveX."""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from hivex import __version__
from hivex import schemas
from hivex.config import HivexConfig, get_default_config
from hivex.pipelines import AggregationPipeline
from hivex.writer import OutputError, save_results

CONTEXT_SETTINGS = {
    'help_option_names': ['-h', '--help'],
    'max_content_width': 120
}

LOG_FORMAT = "%(asctime)s %(levelname)s: %(message)s"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option('--log-level', type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              default='INFO', show_default=True, help='Logging level for progress and warnings')
@click.pass_context
def cli(ctx, log_level: str):
    """HiveX: aggregate project reports into an index, result bundles and a leaderboard."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT, datefmt="%H:%M:%S")


@cli.command()
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output config file path')
@click.option('--overwrite', is_flag=True, help='Replace an existing config file')
def config(output: Optional[str], overwrite: bool):
    """Generate a configuration file with default settings."""
    cfg = get_default_config()

    if output:
        output_path = Path(output)
        if output_path.exists() and not overwrite:
            raise click.ClickException(f"{output_path} already exists. Use --overwrite to replace it.")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        cfg.to_yaml(output_path)
        click.echo(f"Configuration saved to {output_path}")
    else:
        yaml.dump(cfg.to_dict(), sys.stdout, default_flow_style=False, sort_keys=False)


@cli.command()
@click.option('--config', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file')
@click.option('--project-dir', type=click.Path(file_okay=False), help='Override paths.project_dir')
@click.option('--output-dir', type=click.Path(file_okay=False), help='Override paths.output_dir')
@click.option('--quiet', '-q', is_flag=True, help='Disable the progress bar')
def aggregate(
    config_path: Optional[str],
    project_dir: Optional[str],
    output_dir: Optional[str],
    quiet: bool
):
    """Aggregate project reports and write index, results and leaderboard JSON."""
    cfg = HivexConfig.from_yaml(config_path) if config_path else get_default_config()

    # Override config from command line
    if project_dir:
        cfg.paths.project_dir = project_dir
    if output_dir:
        cfg.paths.output_dir = output_dir

    pipeline = AggregationPipeline(cfg)
    result = pipeline.run(progress=not quiet)

    try:
        save_results(result, cfg.paths.output_dir, indent=cfg.output.indent)
    except OutputError as exc:
        raise click.ClickException(str(exc))

    for line in pipeline.summarize(result).lines():
        click.echo(line)
    click.echo(f"Results saved to {cfg.paths.output_dir}")


@cli.command('schemas')
@click.argument('output_dir', type=click.Path(file_okay=False))
def export_schemas(output_dir: str):
    """Export JSON schemas for project.json, result.json and the config."""
    written = schemas.export(Path(output_dir))
    click.echo(f"Wrote {len(written)} schemas to {output_dir}")


if __name__ == '__main__':
    cli()
