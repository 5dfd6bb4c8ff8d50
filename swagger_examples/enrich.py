#!/usr/bin/env python3
"""Example payload enrichment for Swagger/OpenAPI specifications.

Resolves schema references, then attaches synthesized request and response
examples to every operation. Usable as a library (add_examples) or as a
batch command over a directory of specification files.
"""

import argparse
import asyncio
import copy
import json
import sys
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from openapi_spec_validator import validate
from openapi_spec_validator.validation.exceptions import OpenAPIValidationError
from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from swagger_examples.utils import ExampleEnricher, ReferenceResolver, build_lookup_table

console = Console()

SPEC_SUFFIXES = (".json", ".yaml", ".yml")

# Default configuration
DEFAULT_CONFIG = {
    "paths": {
        "input": "specs/original",
        "output": "specs/enriched",
        "reports": "reports",
    },
    "examples_config": "config/examples.yaml",
    "validation": {
        "validate_before_enrichment": False,
    },
    "processing": {
        "parallel_workers": 4,
        "continue_on_error": True,
    },
    "output": {
        "json_indent": 2,
        "sort_keys": False,
    },
}


async def add_examples(
    spec: dict[str, Any],
    resolver: ReferenceResolver | None = None,
    enricher: ExampleEnricher | None = None,
) -> dict[str, Any]:
    """Return a copy of ``spec`` with example payloads on every operation.

    Args:
        spec: Swagger/OpenAPI specification dictionary
        resolver: Reference resolver. Defaults to LocalReferenceResolver.
        enricher: Configured enricher. Defaults to ExampleEnricher().

    Returns:
        Enriched specification; ``spec`` itself is left untouched

    Raises:
        ReferenceResolutionError: If the spec holds an unresolvable reference
    """
    lookup_table = await build_lookup_table(spec, resolver)

    if enricher is None:
        enricher = ExampleEnricher()

    return enricher.enrich_spec(spec, lookup_table)


@dataclass
class EnrichmentStats:
    """Statistics for enrichment processing."""

    files_processed: int = 0
    files_succeeded: int = 0
    files_failed: int = 0
    operations_processed: int = 0
    request_examples_added: int = 0
    simple_request_examples_added: int = 0
    response_examples_added: int = 0
    validation_passed: int = 0
    validation_failed: int = 0
    errors: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class EnrichmentResult:
    """Result of enriching a single specification file."""

    filename: str
    success: bool
    changes: dict[str, int] = field(default_factory=dict)
    validation_passed: bool = True
    error: str | None = None


def load_config(config_path: Path | None = None) -> dict:
    """Load configuration from YAML file or use defaults."""
    if config_path and config_path.exists():
        with config_path.open() as f:
            config = yaml.safe_load(f) or {}
            # Deep merge with defaults
            return _deep_merge(copy.deepcopy(DEFAULT_CONFIG), config)
    return copy.deepcopy(DEFAULT_CONFIG)


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_spec(spec_path: Path) -> dict[str, Any]:
    """Load an OpenAPI specification from a JSON or YAML file."""
    with spec_path.open() as f:
        if spec_path.suffix in (".yaml", ".yml"):
            return yaml.safe_load(f) or {}
        return json.load(f)


def save_spec(
    spec: dict[str, Any],
    output_path: Path,
    indent: int = 2,
    sort_keys: bool = False,
) -> None:
    """Save an OpenAPI specification, as YAML or JSON depending on the suffix."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w") as f:
        if output_path.suffix in (".yaml", ".yml"):
            yaml.safe_dump(spec, f, sort_keys=sort_keys, allow_unicode=True)
            return
        json.dump(spec, f, indent=indent, sort_keys=sort_keys, ensure_ascii=False)
        f.write("\n")


def validate_spec(spec: dict[str, Any]) -> tuple[bool, str | None]:
    """Validate an OpenAPI specification."""
    try:
        validate(spec)
        return True, None
    except OpenAPIValidationError as e:
        return False, str(e)
    except Exception as e:
        return False, f"Validation error: {e}"


def enrich_spec_file(
    spec_path: Path,
    output_path: Path,
    config: dict,
) -> EnrichmentResult:
    """Enrich a single specification file.

    Args:
        spec_path: Path to the original specification file.
        output_path: Path to save the enriched specification.
        config: Enrichment configuration.

    Returns:
        EnrichmentResult with processing details.
    """
    filename = spec_path.name

    try:
        spec = load_spec(spec_path)

        # Example fields are not OpenAPI keywords, so only the input is validated
        validation_passed = True
        validation_error = None
        if config.get("validation", {}).get("validate_before_enrichment", False):
            validation_passed, validation_error = validate_spec(spec)

        enricher = ExampleEnricher(Path(config.get("examples_config", "config/examples.yaml")))
        enriched = asyncio.run(add_examples(spec, enricher=enricher))

        output_config = config.get("output", {})
        save_spec(
            enriched,
            output_path,
            indent=output_config.get("json_indent", 2),
            sort_keys=output_config.get("sort_keys", False),
        )

        example_stats = enricher.get_stats()

        return EnrichmentResult(
            filename=filename,
            success=True,
            changes={
                "operations_processed": example_stats.get("operations_processed", 0),
                "request_examples_added": example_stats.get("request_examples_added", 0),
                "simple_request_examples_added": example_stats.get(
                    "simple_request_examples_added",
                    0,
                ),
                "response_examples_added": example_stats.get("response_examples_added", 0),
            },
            validation_passed=validation_passed,
            error=validation_error if not validation_passed else None,
        )

    except Exception as e:
        return EnrichmentResult(
            filename=filename,
            success=False,
            error=str(e),
            validation_passed=False,
        )


def process_spec_wrapper(args: tuple) -> EnrichmentResult:
    """Wrapper for multiprocessing."""
    spec_path, output_path, config = args
    return enrich_spec_file(spec_path, output_path, config)


def find_spec_files(input_dir: Path) -> list[Path]:
    """Find JSON and YAML specification files in a directory."""
    return sorted(p for p in input_dir.iterdir() if p.is_file() and p.suffix in SPEC_SUFFIXES)


def enrich_all_specs(
    input_dir: Path,
    output_dir: Path,
    config: dict,
    parallel: bool = True,
) -> EnrichmentStats:
    """Enrich all specification files in a directory.

    Args:
        input_dir: Directory containing original specifications.
        output_dir: Directory to save enriched specifications.
        config: Enrichment configuration.
        parallel: Enable parallel processing.

    Returns:
        EnrichmentStats with processing summary.
    """
    stats = EnrichmentStats()

    spec_files = find_spec_files(input_dir)
    if not spec_files:
        console.print(f"[yellow]No specification files found in {input_dir}[/yellow]")
        return stats

    console.print(f"[blue]Found {len(spec_files)} specification files to enrich[/blue]")

    output_dir.mkdir(parents=True, exist_ok=True)

    processing_config = config.get("processing", {})
    workers = processing_config.get("parallel_workers", 4) if parallel else 1
    continue_on_error = processing_config.get("continue_on_error", True)

    process_args = [(spec_file, output_dir / spec_file.name, config) for spec_file in spec_files]

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Adding examples...", total=len(spec_files))

        if parallel and workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(process_spec_wrapper, args): args[0].name
                    for args in process_args
                }

                for future in as_completed(futures):
                    filename = futures[future]
                    try:
                        result = future.result()
                        _update_stats(stats, result)
                    except Exception as e:
                        stats.files_failed += 1
                        stats.errors.append({"file": filename, "error": str(e)})
                        if not continue_on_error:
                            raise

                    stats.files_processed += 1
                    progress.update(task, advance=1)
        else:
            for args in process_args:
                result = process_spec_wrapper(args)
                _update_stats(stats, result)
                stats.files_processed += 1
                progress.update(task, advance=1)

                if not result.success and not continue_on_error:
                    break

    return stats


def _update_stats(stats: EnrichmentStats, result: EnrichmentResult) -> None:
    """Update statistics from an enrichment result."""
    if result.success:
        stats.files_succeeded += 1
        stats.operations_processed += result.changes.get("operations_processed", 0)
        stats.request_examples_added += result.changes.get("request_examples_added", 0)
        stats.simple_request_examples_added += result.changes.get(
            "simple_request_examples_added",
            0,
        )
        stats.response_examples_added += result.changes.get("response_examples_added", 0)
        if result.validation_passed:
            stats.validation_passed += 1
        else:
            stats.validation_failed += 1
            if result.error:
                stats.errors.append({"file": result.filename, "error": result.error})
    else:
        stats.files_failed += 1
        if result.error:
            stats.errors.append({"file": result.filename, "error": result.error})


def generate_report(stats: EnrichmentStats, output_path: Path) -> None:
    """Generate enrichment report."""
    report = {
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
        "summary": {
            "files_processed": stats.files_processed,
            "files_succeeded": stats.files_succeeded,
            "files_failed": stats.files_failed,
            "operations_processed": stats.operations_processed,
            "request_examples_added": stats.request_examples_added,
            "simple_request_examples_added": stats.simple_request_examples_added,
            "response_examples_added": stats.response_examples_added,
            "validation_passed": stats.validation_passed,
            "validation_failed": stats.validation_failed,
        },
        "errors": stats.errors,
    }

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with output_path.open("w") as f:
        json.dump(report, f, indent=2)
        f.write("\n")

    console.print(f"[green]Report saved to {output_path}[/green]")


def print_summary(stats: EnrichmentStats) -> None:
    """Print enrichment summary to console."""
    table = Table(title="Example Enrichment Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Files Processed", str(stats.files_processed))
    table.add_row("Files Succeeded", str(stats.files_succeeded))
    table.add_row("Files Failed", str(stats.files_failed))
    table.add_row("Operations Processed", str(stats.operations_processed))
    table.add_row("Request Examples", str(stats.request_examples_added))
    table.add_row("Simple Request Examples", str(stats.simple_request_examples_added))
    table.add_row("Response Examples", str(stats.response_examples_added))
    table.add_row("Validation Failed", str(stats.validation_failed))

    console.print(table)

    if stats.errors:
        console.print(f"\n[red]Errors ({len(stats.errors)}):[/red]")
        for error in stats.errors[:10]:  # Show first 10 errors
            console.print(f"  - {error['file']}: {error['error'][:100]}")
        if len(stats.errors) > 10:
            console.print(f"  ... and {len(stats.errors) - 10} more errors")


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Add synthesized example payloads to Swagger/OpenAPI specifications",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("config/enrichment.yaml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--input-dir",
        type=Path,
        help="Override input directory for original specs",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Override output directory for enriched specs",
    )
    parser.add_argument(
        "--report-dir",
        type=Path,
        help="Override directory for reports",
    )
    parser.add_argument(
        "--no-parallel",
        action="store_true",
        help="Disable parallel processing",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of parallel workers",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Validate each spec with openapi-spec-validator before enrichment",
    )

    args = parser.parse_args(argv)

    config = load_config(args.config)

    input_dir = args.input_dir or Path(config["paths"]["input"])
    output_dir = args.output_dir or Path(config["paths"]["output"])
    report_dir = args.report_dir or Path(config["paths"]["reports"])

    if args.workers:
        config["processing"]["parallel_workers"] = args.workers

    if args.validate:
        config["validation"]["validate_before_enrichment"] = True

    console.print("[bold blue]Swagger/OpenAPI Example Enrichment[/bold blue]")
    console.print(f"  Input:  {input_dir}")
    console.print(f"  Output: {output_dir}")

    if not input_dir.exists():
        console.print(f"[red]Input directory not found: {input_dir}[/red]")
        return 1

    stats = enrich_all_specs(
        input_dir=input_dir,
        output_dir=output_dir,
        config=config,
        parallel=not args.no_parallel,
    )

    generate_report(stats, report_dir / "examples-report.json")

    print_summary(stats)

    if stats.files_failed > 0:
        console.print(f"\n[yellow]Completed with {stats.files_failed} failures[/yellow]")
        return 1

    console.print(
        f"\n[bold green]Added examples to {stats.files_succeeded} specifications![/bold green]",
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
