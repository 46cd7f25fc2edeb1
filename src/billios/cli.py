"""billios CLI - deterministic command-line interface for field test sheets.

Usage:
    billios compute [--input PATH]
    billios formulas
    billios constants
    billios --log-level DEBUG compute --input sheet.json

A measurement sheet is a JSON object with the FieldTestMeasurements fields,
read from PATH or from stdin.

Exit codes:
    0: Success
    1: Internal error
    2: Invalid input (unreadable JSON, invalid sheet, bad configuration)
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from pydantic import ValidationError

from billios.config import LabConstantsConfigError, get_lab_constants
from billios.field_test.registry import FormulaRegistry, register_field_test_formulas
from billios.field_test.report import FieldTestMeasurements, run_field_test
from billios.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _make_error_result(code: str, message: str) -> dict[str, Any]:
    """Create a failed result dict with a single error."""
    return {
        "errors": [{"code": code, "message": message, "path": "$"}],
        "pass": False,
    }


def _error_path(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as a JSON path."""
    if not loc:
        return "$"
    return "$." + ".".join(str(part) for part in loc)


def _load_json_input(input_path: str | None) -> tuple[Any, str | None]:
    """Load JSON from file or stdin.

    Returns:
        Tuple of (parsed_data, error_message). If error_message is not None,
        parsed_data should be ignored.
    """
    try:
        if input_path:
            with open(input_path, encoding="utf-8") as f:
                content = f.read()
        else:
            content = sys.stdin.read()

        if not content.strip():
            return None, "Empty input"

        return json.loads(content), None
    except FileNotFoundError:
        return None, f"File not found: {input_path}"
    except json.JSONDecodeError as e:
        return None, f"Invalid JSON: {e}"
    except OSError as e:
        return None, f"Cannot read input: {e}"


def cmd_compute(args: argparse.Namespace) -> int:
    """Execute compute command with deterministic JSON output.

    Exit codes:
        0: report printed
        2: invalid JSON, invalid measurement sheet or invalid lab constants
    """
    data, error_msg = _load_json_input(args.input)
    if error_msg is not None:
        _output_json(_make_error_result("INVALID_JSON", error_msg))
        return 2

    try:
        measurements = FieldTestMeasurements.model_validate(data)
    except ValidationError as e:
        errors = [
            {
                "code": "INVALID_MEASUREMENT",
                "message": err["msg"],
                "path": _error_path(err["loc"]),
            }
            for err in e.errors()
        ]
        _output_json({"errors": errors, "pass": False})
        return 2

    try:
        report = run_field_test(measurements)
    except LabConstantsConfigError as e:
        _output_json(_make_error_result("INVALID_CONFIG", str(e)))
        return 2

    logger.info("Computed field test report %s", report.reproducibility_hash[:16])
    _output_json(report.model_dump(mode="json"))
    return 0


def cmd_formulas(args: argparse.Namespace) -> int:
    """List registered formulas with precision, version and hash."""
    registry = register_field_test_formulas(FormulaRegistry())
    formulas = []
    for formula_type in registry.list_registered():
        spec = registry.get_or_raise(formula_type)
        formulas.append(
            {
                "defaults": list(spec.defaults),
                "expression_id": spec.expression_id,
                "formula_hash": spec.formula_hash,
                "formula_type": spec.formula_type.value,
                "output_precision": spec.output_precision,
                "version": spec.version,
            }
        )
    _output_json({"formulas": formulas})
    return 0


def cmd_constants(args: argparse.Namespace) -> int:
    """Print the lab constants in effect."""
    try:
        constants = get_lab_constants()
    except LabConstantsConfigError as e:
        _output_json(_make_error_result("INVALID_CONFIG", str(e)))
        return 2
    _output_json(constants.model_dump())
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="billios",
        description="billios - sand-cone field test calculations",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level written to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    compute_parser = subparsers.add_parser(
        "compute",
        help="Compute every formula for one field test sheet",
    )
    compute_parser.add_argument(
        "--input",
        required=False,
        default=None,
        metavar="PATH",
        help="Path to JSON measurement sheet (reads from stdin if omitted)",
    )

    subparsers.add_parser(
        "formulas",
        help="List registered formulas with precision and formula hash",
    )
    subparsers.add_parser(
        "constants",
        help="Show the lab constants in effect (defaults plus BILLIOS_* overrides)",
    )

    return parser


COMMAND_DISPATCH = {
    "compute": cmd_compute,
    "formulas": cmd_formulas,
    "constants": cmd_constants,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success
        1: Internal error (unexpected)
        2: Invalid input
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        setup_logging(args.log_level)

        if args.command is None:
            parser.print_help()
            return 0

        return COMMAND_DISPATCH[args.command](args)

    except Exception as e:
        logger.exception("Unexpected error")
        _output_json(_make_error_result("INTERNAL_ERROR", str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
