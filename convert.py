#!/usr/bin/env python3

import click

from flatscene import flatten_scene, import_scene, write_asset, \
    SceneImportError


def _fail(ctx, legacy_exit_codes: bool):
    ctx.exit(0 if legacy_exit_codes else 1)


@click.command(context_settings={"help_option_names": ["--help"]})
@click.option("--source", help="file to be imported")
@click.option("--out", help="exported file name")
@click.option("--normals", is_flag=True, help="store vertex normals too")
@click.option("--quiet", is_flag=True, help="don't print the mesh summary")
@click.option(
    "--legacy-exit-codes",
    is_flag=True,
    help="exit with status 0 on missing arguments or failed imports",
)
@click.pass_context
def cli(ctx, source: str, out: str, normals: bool, quiet: bool,
        legacy_exit_codes: bool):
    """
    Convert a 3D model into a flat mesh/vertex/index asset file.
    """

    incomplete_arguments = False

    if source is None:
        incomplete_arguments = True
        click.echo("Source was not set.")

    if out is None:
        incomplete_arguments = True
        click.echo("Output was not set.")

    if incomplete_arguments:
        _fail(ctx, legacy_exit_codes)

    # The output is truncated before importing, so a failed import
    # leaves an empty file behind.
    try:
        output_file = open(out, "wb")
    except OSError as e:
        click.echo(f"Failed to open output file: {e}")

        _fail(ctx, legacy_exit_codes)

    with output_file:
        try:
            scene = import_scene(source)
        except SceneImportError as e:
            click.echo(f"Failed to load model. Import error: {e}")

            _fail(ctx, legacy_exit_codes)

        result = flatten_scene(scene, copy_normals=normals)

        if not quiet:
            for line in result.summary_lines():
                click.echo(line)

        write_asset(
            output_file, result.meshes, result.vertices, result.indices
        )


if __name__ == "__main__":
    cli()
