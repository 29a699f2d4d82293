"""Main CLI entry point for CBOMkit."""

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import click

from cbomkit import __version__
from cbomkit.cli.display import (
    ConsoleProgressDispatcher,
    console,
    show_cbom_stats,
    show_error,
    show_modules,
    show_scan_result,
    show_success,
)
from cbomkit.core.config.settings import get_settings
from cbomkit.core.exceptions.errors import CBOMKitError
from cbomkit.core.logger.logger import setup_logging
from cbomkit.layers.indexing import SUPPORTED_LANGUAGES, ModuleIndexer, get_strategy
from cbomkit.layers.scanning import (
    SCANNER_SERVICES,
    CBOMDocument,
    JavaScannerService,
    load_detector,
    read_git_provenance,
)


@contextmanager
def handle_errors(title: str) -> Iterator[None]:
    """Show CBOMkit errors in a panel and exit with status 1."""
    try:
        yield
    except CBOMKitError as e:
        show_error(title, str(e))
        sys.exit(1)


def _build_indexer(
    path: Path,
    language: str,
    exclude: tuple[str, ...],
    dispatcher: ConsoleProgressDispatcher | None = None,
) -> ModuleIndexer:
    settings = get_settings()
    patterns = list(exclude) if exclude else settings.indexing.exclude_patterns_for(language)
    return ModuleIndexer(
        path,
        get_strategy(language),
        progress_dispatcher=dispatcher,
        exclude_patterns=patterns,
    )


language_option = click.option(
    "--language",
    "-l",
    type=click.Choice(SUPPORTED_LANGUAGES, case_sensitive=False),
    default="python",
    show_default=True,
    help="Language of the modules to index",
)
package_folder_option = click.option(
    "--package-folder",
    type=click.Path(file_okay=False, path_type=Path),
    help="Sub-folder of PATH to index instead of the whole tree",
)
exclude_option = click.option(
    "--exclude",
    "-x",
    multiple=True,
    help="Regular expression excluding paths (repeatable; replaces the defaults)",
)


@click.group()
@click.version_option(version=__version__, prog_name="CBOMkit")
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool) -> None:
    """CBOMkit - Cryptography Bill of Materials generator."""
    logging_settings = get_settings().logging
    if debug:
        logging_settings = logging_settings.model_copy(update={"level": "DEBUG"})
    setup_logging(logging_settings)


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@language_option
@package_folder_option
@exclude_option
def index(path: Path, language: str, package_folder: Path | None, exclude: tuple[str, ...]) -> None:
    """List the project modules found under PATH.

    Example:
        cbomkit index ./repo --language java
    """
    with handle_errors("Indexing Failed"):
        indexer = _build_indexer(path, language.lower(), exclude)
        modules = indexer.index(package_folder)

    if not modules:
        console.print(f"[yellow]No {language} modules found under {path}[/]")
        return
    show_modules(modules, indexer.main_build_kind)


@main.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@language_option
@click.option(
    "--detector",
    "-d",
    "detector_ref",
    required=True,
    help="Detector to run, as 'package.module:Name'",
)
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="CBOM output file")
@click.option("--workers", "-w", type=click.IntRange(1, 64), help="Modules scanned in parallel")
@click.option(
    "--require-build/--no-require-build",
    default=None,
    help="Refuse Java scans without class directories or dependency jars",
)
@click.option("--java-jar", multiple=True, help="Dependency jar or jar glob (repeatable)")
@click.option("--java-classes", multiple=True, help="Compiled class directory (repeatable)")
@click.option("--git-metadata", is_flag=True, help="Stamp git provenance of PATH into the CBOM")
@click.option("--show-detections", is_flag=True, help="Print every new detection")
@package_folder_option
@exclude_option
def scan(
    path: Path,
    language: str,
    detector_ref: str,
    output: Path | None,
    workers: int | None,
    require_build: bool | None,
    java_jar: tuple[str, ...],
    java_classes: tuple[str, ...],
    git_metadata: bool,
    show_detections: bool,
    package_folder: Path | None,
    exclude: tuple[str, ...],
) -> None:
    """Scan PATH for cryptographic assets and write a CBOM.

    Example:
        cbomkit scan ./repo -l python -d my_detectors.python:PythonDetector
    """
    settings = get_settings()
    language = language.lower()
    output = output or settings.output.cbom_file
    dispatcher = ConsoleProgressDispatcher(show_detections=show_detections)

    with handle_errors("Scan Failed"):
        detector = load_detector(detector_ref)
        modules = _build_indexer(path, language, exclude, dispatcher).index(package_folder)

        service_class = SCANNER_SERVICES[language]
        kwargs = {}
        if service_class is JavaScannerService:
            kwargs["require_build"] = (
                require_build if require_build is not None else settings.scanning.require_build
            )
        service = service_class(
            path,
            detector,
            progress_dispatcher=dispatcher,
            workers=workers or settings.scanning.workers,
            **kwargs,
        )
        if isinstance(service, JavaScannerService):
            for jar in [*settings.scanning.java_dependency_jars, *java_jar]:
                service.add_java_dependency_jar(jar)
            for class_dir in [*settings.scanning.java_class_dirs, *java_classes]:
                service.add_java_class_dir(class_dir)

        result = service.scan(modules)
        cbom = result.cbom or CBOMDocument()

        if git_metadata:
            read_git_provenance(path, package_folder).stamp(cbom)
        else:
            cbom.add_metadata(subfolder=package_folder.as_posix() if package_folder else None)
        cbom.write(output)

    show_scan_result(result, str(output))


@main.command()
@click.argument("inputs", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False, path_type=Path), help="Merged CBOM file")
def merge(inputs: tuple[Path, ...], output: Path) -> None:
    """Union-merge CBOM files into one.

    Example:
        cbomkit merge a.json b.json -o merged.json
    """
    with handle_errors("Merge Failed"):
        merged = CBOMDocument()
        for input_path in inputs:
            merged.merge(CBOMDocument.read(input_path))
        merged.add_metadata()
        merged.write(output)

    show_success(
        "Merge Complete",
        f"Merged {len(inputs)} CBOM(s) with {merged.finding_count()} findings into {output}",
    )


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--git-url", help="Repository URL")
@click.option("--revision", help="Branch or tag")
@click.option("--commit", help="Commit sha")
@click.option("--subfolder", help="Scanned sub-folder")
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path), help="Write to this file instead of FILE")
def stamp(
    file: Path,
    git_url: str | None,
    revision: str | None,
    commit: str | None,
    subfolder: str | None,
    output: Path | None,
) -> None:
    """Replace the metadata of a CBOM file with tool and provenance data."""
    with handle_errors("Stamp Failed"):
        document = CBOMDocument.read(file)
        document.add_metadata(git_url=git_url, revision=revision, commit=commit, subfolder=subfolder)
        document.write(output or file)

    show_success("Stamped", f"Metadata written to {output or file}")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def stats(file: Path) -> None:
    """Show component and finding counts of a CBOM file."""
    with handle_errors("Invalid CBOM"):
        document = CBOMDocument.read(file)

    show_cbom_stats(document)


if __name__ == "__main__":
    main()
