# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""CLI harness for file collection and license tag scanning."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, TextIO

from rich.console import Console
from rich.logging import RichHandler
from rich.style import Style
from rich.table import Table

from license_expr import ParseError, extract_expressions
from sfc.checksums import read_file_bytes
from sfc.collector import CollectionResult, collect_config
from sfc.config import CollectorConfig, FileSet, load_collector_config
from sfc.errors import CollectionError, ConfigurationError, ReadError
from sfc.model import FileRecord, VerificationCode

logger = logging.getLogger(__name__)

TABLE_COLUMN_RATIOS: dict[str, int] = {
    "name": 4,
    "file_type": 1,
    "sha1": 3,
    "declared_license": 2,
    "concluded_license": 2,
}


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application logging with Rich handler.

    Args:
        level: Logging severity threshold.
    """
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser instance.
    """
    parser = argparse.ArgumentParser(prog="sfc")
    subparsers = parser.add_subparsers(dest="command", required=True)

    collect_parser = subparsers.add_parser("collect")
    collect_parser.add_argument(
        "--path", required=False, help="Project root to collect files from."
    )
    collect_parser.add_argument(
        "--config", required=False, help="JSON collector configuration file."
    )
    collect_parser.add_argument(
        "--include",
        action="append",
        default=[],
        help="Gitignore-style include pattern (repeatable).",
    )
    collect_parser.add_argument(
        "--exclude",
        action="append",
        default=[],
        help="Gitignore-style exclude pattern (repeatable).",
    )
    collect_parser.add_argument(
        "--algorithm",
        action="append",
        default=[],
        help="Additional checksum algorithm (repeatable).",
    )
    collect_parser.add_argument(
        "--manifest-name",
        required=False,
        help="Manifest file path excluded from the verification code.",
    )
    collect_parser.add_argument(
        "--package-ref", default=None, help="Owning package element id."
    )
    collect_parser.add_argument(
        "--relationship-type", default=None, help="File to package relationship type."
    )
    collect_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    collect_parser.add_argument(
        "--output",
        required=False,
        help="Optional output file path for raw JSON when --format json is used.",
    )

    scan_parser = subparsers.add_parser("scan-licenses")
    scan_parser.add_argument("--file", required=True, help="File to scan.")
    scan_parser.add_argument(
        "--format",
        choices=("table", "json"),
        default="table",
        help="Output format.",
    )
    return parser


def run(argv: list[str], stdout: TextIO, stderr: TextIO) -> int:
    """Run CLI command.

    Args:
        argv: CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit:
        logger.warning(f"Argument parsing failed (argv={argv})")
        return 2
    if args.command == "collect":
        return _run_collect(args=args, stdout=stdout, stderr=stderr)
    if args.command == "scan-licenses":
        return _run_scan_licenses(args=args, stdout=stdout, stderr=stderr)

    logger.warning(f"Unsupported command (command={args.command})")
    stderr.write(f"Unsupported command: {args.command}\n")
    return 2


def _run_collect(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run collect command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    try:
        config = _build_config(args)
        result, registry = collect_config(config)
    except (ConfigurationError, CollectionError) as exc:
        logger.warning(f"Collection failed (error={exc})")
        stderr.write(f"Collection failed: {exc}\n")
        return 2

    verification = result.verification_code(manifest_name=config.manifest_name)
    payload = _collection_payload(result=result, verification_code=verification)
    payload["extracted_licenses"] = [
        {
            "license_id": info.license_id,
            "element_id": info.element_id,
            "name": info.name,
            "implicit": info.implicit,
        }
        for info in registry.extracted_licenses()
    ]
    if args.format == "json":
        if args.output:
            try:
                _write_json_file(payload=payload, output_path=Path(args.output))
            except OSError as exc:
                logger.warning(
                    f"Failed to write JSON output file (output_path={args.output} error={exc})"
                )
                stderr.write(f"Failed to write JSON output file: {args.output}\n")
                return 2
        else:
            _write_json(payload=payload, stdout=stdout)
    else:
        _write_table(
            files=list(result.files),
            root_path=config.project_root,
            verification_code=verification.value,
            stdout=stdout,
        )
    return 0


def _run_scan_licenses(args: argparse.Namespace, stdout: TextIO, stderr: TextIO) -> int:
    """Run scan-licenses command.

    Args:
        args: Parsed CLI arguments.
        stdout: Standard output stream.
        stderr: Standard error stream.

    Returns:
        Exit code.
    """
    file_path = Path(args.file)
    try:
        data = read_file_bytes(file_path)
        expressions = extract_expressions(data.decode("utf-8", errors="replace"))
    except ReadError as exc:
        logger.warning(f"Failed to read file (path={file_path} error={exc})")
        stderr.write(f"Failed to read file: {file_path}\n")
        return 2
    except ParseError as exc:
        logger.warning(f"License scan failed (path={file_path} kind={exc.kind})")
        stderr.write(f"License scan failed: {exc}\n")
        return 2

    logger.info(f"License scan completed (path={file_path} expressions={len(expressions)})")
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    if args.format == "json":
        console.print(
            json.dumps({"expressions": [str(item) for item in expressions]}, indent=2),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )
        return 0
    table = Table(show_header=True, expand=True)
    table.add_column("index", justify="right")
    table.add_column("expression", overflow="fold")
    for index, expression in enumerate(expressions):
        table.add_row(str(index), str(expression))
    console.print(table)
    return 0


def _build_config(args: argparse.Namespace) -> CollectorConfig:
    """Build collector configuration from a config file and CLI flags.

    Args:
        args: Parsed CLI arguments.

    Returns:
        Collector configuration; command-line flags win over file values.

    Raises:
        ConfigurationError: If neither a path nor a config file is given.
    """
    project_root = Path(args.path).resolve() if args.path else None
    if args.config:
        config = load_collector_config(Path(args.config), project_root=project_root)
    elif project_root is not None:
        config = CollectorConfig(
            project_root=project_root, file_sets=(FileSet(root_directory=project_root),)
        )
    else:
        raise ConfigurationError("Either --path or --config is required")

    overrides: dict[str, Any] = {}
    if args.include or args.exclude:
        overrides["file_sets"] = tuple(
            replace(
                item,
                include_patterns=tuple(args.include) or item.include_patterns,
                exclude_patterns=item.exclude_patterns + tuple(args.exclude),
            )
            for item in config.file_sets
        )
    if args.algorithm:
        overrides["checksum_algorithms"] = config.checksum_algorithms + tuple(args.algorithm)
    if args.manifest_name:
        overrides["manifest_name"] = args.manifest_name
    if args.package_ref:
        overrides["package_ref"] = args.package_ref
    if args.relationship_type:
        overrides["relationship_type"] = args.relationship_type
    return replace(config, **overrides)


def _file_payload(record: FileRecord) -> dict[str, Any]:
    return {
        "name": record.name,
        "spdx_id": record.spdx_id,
        "file_type": record.file_type,
        "checksums": {item.algorithm: item.value for item in record.checksums},
        "concluded_license": str(record.concluded_license),
        "declared_license": str(record.declared_license),
        "license_info_from_files": sorted(str(item) for item in record.license_info_from_files),
        "license_comment": record.license_comment,
        "copyright_text": record.copyright_text,
        "comment": record.comment,
        "notice_text": record.notice_text,
        "contributors": list(record.contributors),
        "relationships": [
            {
                "element_id": item.element_id,
                "relationship_type": item.relationship_type,
                "related_element": item.related_element,
            }
            for item in record.relationships
        ],
        "snippet_ids": list(record.snippet_ids),
    }


def _collection_payload(
    result: CollectionResult, verification_code: VerificationCode
) -> dict[str, Any]:
    """Build the JSON payload for a collection result.

    Args:
        result: Collection result.
        verification_code: Package verification code.

    Returns:
        JSON-serializable payload.
    """
    return {
        "files": [_file_payload(record) for record in result.files],
        "snippets": [
            {
                "spdx_id": snippet.spdx_id,
                "name": snippet.name,
                "file_name": snippet.file_name,
                "byte_range": list(snippet.byte_range),
                "line_range": list(snippet.line_range) if snippet.line_range else None,
                "concluded_license": str(snippet.concluded_license),
                "license_info_in_snippet": sorted(
                    str(item) for item in snippet.license_info_in_snippet
                ),
                "license_comment": snippet.license_comment,
                "copyright_text": snippet.copyright_text,
                "comment": snippet.comment,
            }
            for snippet in result.snippets
        ],
        "license_info_from_files": sorted(str(item) for item in result.license_info_from_files),
        "verification_code": {
            "value": verification_code.value,
            "excluded_names": list(verification_code.excluded_names),
        },
    }


def _write_json(payload: dict[str, Any], stdout: TextIO) -> None:
    """Write the collection payload in JSON format.

    Args:
        payload: JSON-serializable payload.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.print(
        json.dumps(payload, indent=2, sort_keys=True),
        markup=False,
        highlight=False,
        soft_wrap=True,
    )


def _write_json_file(payload: dict[str, Any], output_path: Path) -> None:
    """Write raw JSON payload to an output file.

    Args:
        payload: JSON-serializable payload.
        output_path: Target file path.

    Raises:
        OSError: If directory creation or file writing fails.
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def _write_table(
    files: list[FileRecord], root_path: Path, verification_code: str, stdout: TextIO
) -> None:
    """Write collected files as a table.

    Args:
        files: Collected file records.
        root_path: Project root used for collection.
        verification_code: Package verification code value.
        stdout: Standard output stream.
    """
    console = Console(file=stdout, force_terminal=False, color_system="truecolor")
    console.rule(f"{root_path}", style=Style(color="cyan"), characters="-")
    table = Table(show_header=True, show_lines=True, expand=True)
    for column, ratio in TABLE_COLUMN_RATIOS.items():
        table.add_column(column, ratio=ratio, overflow="fold")
    for record in files:
        table.add_row(
            record.name,
            record.file_type,
            record.sha1,
            str(record.declared_license),
            str(record.concluded_license),
        )
    console.print(table)
    console.print(f"files={len(files)} verification_code={verification_code}")


def main() -> None:
    """Run the CLI application and exit."""
    configure_logging()
    exit_code = run(sys.argv[1:], stdout=sys.stdout, stderr=sys.stderr)
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
