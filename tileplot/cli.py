"""
Command line interface for tileplot.

    tileplot plot points.csv out.png --shape point --width 800
    tileplot legend scale.png --value-range 0,100
    tileplot combine overview.png runs/a runs/b --boundaries
"""

from pathlib import Path

import click

from .abstractions.types import BoundingBox, ValueRange
from .config import Config, PlotConfig
from .datasource import ShapeSource, compute_dataset_mbr
from .exceptions import PlotError
from .infrastructure.logging import setup_logging
from .rendering import CombineSource, Compositor, ShapeKind, check_output_path, commit_image, draw_scale


SHAPE_CHOICES = ['point', 'rectangle', 'polygon', 'valued_point', 'valuedPoint']


def _parse_value_range(ctx, param, value):
    if value is None:
        return None
    try:
        return ValueRange.from_string(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _parse_bbox(ctx, param, value):
    if value is None:
        return None
    try:
        return BoundingBox.from_string(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


@click.group()
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML file overriding the default settings')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Console log level')
@click.option('--log-file', type=click.Path(dir_okay=False), help='Write JSON logs to this file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose output')
@click.pass_context
def cli(ctx, config_file, log_level, log_file, verbose):
    """Render large spatial datasets into images, one grid cell per task."""
    settings = Config(config_file)
    if verbose:
        log_level = 'DEBUG'
    setup_logging(settings, log_file=log_file, log_level=log_level)
    ctx.obj = settings


@cli.command('plot')
@click.argument('input_path', type=click.Path())
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.option('--shape', 'shape_kind', required=True,
              type=click.Choice(SHAPE_CHOICES, case_sensitive=False),
              help='Kind of record stored in the input')
@click.option('--width', type=int, help='Maximum image width in pixels')
@click.option('--height', type=int, help='Maximum image height in pixels')
@click.option('--color', help='Stroke color (any Pillow color name or #rrggbb)')
@click.option('--vflip', 'vertical_flip', is_flag=True,
              help='Flip the image vertically (larger Y at the top)')
@click.option('--no-keep-ratio', is_flag=True,
              help='Use width and height as given instead of matching the data aspect ratio')
@click.option('--value-range', callback=_parse_value_range,
              help='min,max of values for valued points')
@click.option('--rect', 'plot_range', callback=_parse_bbox,
              help='Only plot shapes intersecting x1,y1,x2,y2')
@click.option('--borders', 'show_borders', is_flag=True,
              help='Outline every grid cell')
@click.option('--overwrite', is_flag=True, help='Replace an existing output')
@click.option('--local', 'force_local', is_flag=True, help='Force a single local pass')
@click.option('--distributed', 'force_distributed', is_flag=True,
              help='Force one task per grid cell')
@click.option('--workers', 'max_workers', type=int, help='Number of render workers')
@click.option('--executor', type=click.Choice(['process', 'thread']), help='Worker pool kind')
@click.option('--point-size', type=int, help='Side of a point marker in pixels')
@click.pass_obj
def plot_command(settings, input_path, output_path, shape_kind, **options):
    """Plot every shape of INPUT_PATH into OUTPUT_PATH."""
    from .pipelines import PlotOrchestrator

    # Unset flags fall back to the configuration
    for flag in ('vertical_flip', 'show_borders', 'overwrite', 'force_local', 'force_distributed'):
        if not options[flag]:
            options.pop(flag)
    if options.pop('no_keep_ratio'):
        options['keep_aspect_ratio'] = False

    try:
        plot_config = PlotConfig.from_config(settings, input_path, output_path,
                                             shape_kind=shape_kind, **options)
    except ValueError as e:
        raise click.BadParameter(str(e))

    try:
        result = PlotOrchestrator().run(plot_config)
    except PlotError as e:
        click.echo(f"❌ Plot failed: {e}", err=True)
        raise click.exceptions.Exit(1)

    click.echo(f"✅ Wrote {result.width}x{result.height} image to {result.output_path} "
               f"({result.mode.value}, {result.tile_count} tiles, {result.shape_count} shapes)")


@cli.command('legend')
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.option('--value-range', required=True, callback=_parse_value_range,
              help='min,max of the values shown')
@click.option('--width', default=200, show_default=True, type=int)
@click.option('--height', default=600, show_default=True, type=int)
@click.option('--overwrite', is_flag=True, help='Replace an existing output')
def legend_command(output_path, value_range, width, height, overwrite):
    """Draw the color scale used for valued points."""
    try:
        check_output_path(output_path, overwrite=overwrite)
        draw_scale(output_path, value_range, width, height)
    except PlotError as e:
        click.echo(f"❌ Legend failed: {e}", err=True)
        raise click.exceptions.Exit(1)
    click.echo(f"✅ Wrote legend to {output_path}")


@cli.command('combine')
@click.argument('output_path', type=click.Path(dir_okay=False))
@click.argument('datasets', nargs=-1, required=True, type=click.Path(exists=True, file_okay=False))
@click.option('--shape', 'shape_kind', required=True,
              type=click.Choice(SHAPE_CHOICES, case_sensitive=False),
              help='Kind of record stored in the datasets')
@click.option('--width', default=1000, show_default=True, type=int)
@click.option('--height', default=1000, show_default=True, type=int)
@click.option('--boundaries', is_flag=True, help='Overlay each dataset\'s partition image')
@click.option('--vflip', 'vertical_flip', is_flag=True)
@click.option('--overwrite', is_flag=True, help='Replace an existing output')
def combine_command(output_path, datasets, shape_kind, width, height, boundaries,
                    vertical_flip, overwrite):
    """Combine the _data.png images of several plotted DATASETS directories."""
    kind = ShapeKind.parse(shape_kind)
    try:
        check_output_path(output_path, overwrite=overwrite)
        sources = [
            CombineSource.from_directory(d, compute_dataset_mbr(ShapeSource(d, kind)))
            for d in datasets
        ]
        image = Compositor().combine_images(sources, width, height,
                                            include_boundaries=boundaries,
                                            vertical_flip=vertical_flip)
        commit_image(image, output_path)
    except PlotError as e:
        click.echo(f"❌ Combine failed: {e}", err=True)
        raise click.exceptions.Exit(1)
    click.echo(f"✅ Combined {len(datasets)} datasets into {Path(output_path)}")


def main():
    cli()


if __name__ == '__main__':
    main()
