import json
import logging
from pathlib import Path

import click

from .config import SUPPORTED_LANGUAGES, CodeGeneratorConfig
from .errors import GeneratorError
from .generator import PipelineGenerator

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--language", "-l", default="java", type=click.Choice(SUPPORTED_LANGUAGES))
@click.option("--withers", is_flag=True, default=False, help="Generate the copy-with protocol for every record")
@click.option("--builder-annotation", is_flag=True, default=False, help="Attach the external builder annotation to records")
@click.option("--nullability-marker", default=None, type=str, help="Fully-qualified nullability annotation")
@click.option("--package", "-p", default=None, type=str, help="Java package of the generated sources")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log resolution details")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def schema_to_records(config, language, withers, builder_annotation, nullability_marker, package, verbose, path, output):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    try:
        with open(path) as f:
            schema = json.load(f)

        if config is not None:
            with open(config) as f:
                config = CodeGeneratorConfig.from_dict(json.load(f))
        else:
            config = CodeGeneratorConfig()
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}") from e

    # CLI flags override the config file
    if withers:
        config.enable_withers = True
    if builder_annotation:
        config.enable_external_builder_annotation = True
    if nullability_marker is not None:
        config.nullability_marker = nullability_marker
    if package is not None:
        config.java_package = package

    try:
        files = PipelineGenerator(schema, config, language).generate()
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    # Nothing is written unless the whole run succeeded
    output_dir = Path(output)
    for relative_path, content in files.items():
        target = output_dir / relative_path
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "w") as f:
            f.write(content)
        logger.info("Wrote %s", target)
