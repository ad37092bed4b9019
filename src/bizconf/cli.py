"""bizconf CLI - deterministic command-line interface to the confidence model.

Usage:
    bizconf aggregate --input PATH [--weights PATH | --default-weights]
    bizconf prominence --confidence X [--component ID]
    bizconf seed --research PATH --name NAME [--places PATH] [--address A]
                 [--phone P] [--out FILE]
    bizconf validate --input PATH

All output is JSON on stdout with sorted keys.

Exit codes:
    0: Success / validation passed
    1: Internal error
    2: Invalid input / validation failed
"""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from bizconf.config import ConfigError, load_config
from bizconf.models.tree import iter_leaves
from bizconf.observability.tracing import configure_tracing, traced_span
from bizconf.services.confidence.aggregate import SECTION_WEIGHTS, compute_aggregate_confidence
from bizconf.services.prominence.policy import (
    get_component_min_confidence,
    get_prominence_level,
    should_show_component,
)
from bizconf.services.seed.transformer import build_seed
from bizconf.validators.conf_tree import validate_conf_tree

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class InputError(Exception):
    """Raised when a CLI input file cannot be read or parsed."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def _output_json(data: dict[str, Any]) -> None:
    """Output JSON to stdout with deterministic ordering."""
    print(json.dumps(data, sort_keys=True, indent=2))


def _make_error_result(code: str, message: str) -> dict[str, Any]:
    """Create a failed result dict with a single error."""
    return {
        "errors": [{"code": code, "message": message, "path": "$"}],
        "pass": False,
        "warnings": [],
    }


def _load_json(path: str | None, *, label: str = "input") -> Any:
    """Load JSON from a file, or stdin when ``path`` is None or "-".

    Raises:
        InputError: If the file is missing, unreadable, empty or not JSON.
    """
    try:
        if path and path != "-":
            with open(path, encoding="utf-8") as f:
                content = f.read()
        else:
            content = sys.stdin.read()
    except FileNotFoundError as e:
        raise InputError("INVALID_INPUT", f"File not found: {path}") from e
    except OSError as e:
        raise InputError("INVALID_INPUT", f"Cannot read {label}: {e}") from e

    if not content.strip():
        raise InputError("INVALID_INPUT", f"Empty {label}")

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise InputError("INVALID_JSON", f"Invalid JSON in {label}: {e}") from e


def _resolve_weights(args: argparse.Namespace) -> dict[str, float] | None:
    if args.weights:
        raw = _load_json(args.weights, label="weights")
        if not isinstance(raw, dict) or not all(
            isinstance(v, int | float) and not isinstance(v, bool) for v in raw.values()
        ):
            raise InputError("INVALID_INPUT", "Weights must be a JSON object of numbers")
        weights = {str(k): float(v) for k, v in raw.items()}
        for section, weight in weights.items():
            if not math.isfinite(weight) or weight < 0:
                raise InputError(
                    "INVALID_INPUT", f"Weight for '{section}' must be a finite number >= 0"
                )
        return weights
    if args.default_weights:
        return dict(SECTION_WEIGHTS)
    config = load_config()
    if config.section_weights is not None:
        return dict(config.section_weights)
    return None


def cmd_aggregate(args: argparse.Namespace) -> int:
    """Compute aggregate confidence of a persisted tree."""
    tree = _load_json(args.input)
    weights = _resolve_weights(args)

    with traced_span("bizconf.cli.aggregate") as span:
        confidence = compute_aggregate_confidence(tree, weights)
        leaf_count = sum(1 for _ in iter_leaves(tree))
        if span.is_recording():
            span.set_attribute("aggregate.confidence", confidence)
            span.set_attribute("aggregate.leaf_count", leaf_count)

    _output_json(
        {
            "confidence": confidence,
            "leaf_count": leaf_count,
            "prominence": get_prominence_level(confidence).value,
        }
    )
    return 0


def cmd_prominence(args: argparse.Namespace) -> int:
    """Map a confidence score to a prominence level and component decision."""
    confidence: float = args.confidence
    if not 0.0 <= confidence <= 1.0:
        _output_json(
            _make_error_result("INVALID_INPUT", f"Confidence must be in [0, 1], got {confidence}")
        )
        return 2

    result: dict[str, Any] = {
        "confidence": confidence,
        "level": get_prominence_level(confidence).value,
    }
    if args.component:
        result["component"] = args.component
        result["min_confidence"] = get_component_min_confidence(args.component)
        result["show"] = should_show_component(args.component, confidence)
    _output_json(result)
    return 0


def cmd_seed(args: argparse.Namespace) -> int:
    """Build a seed document from research outputs."""
    research = _load_json(args.research, label="research")
    places = _load_json(args.places, label="places") if args.places else None
    user_inputs = {
        "business_name": args.name,
        "business_address": args.address,
        "business_phone": args.phone,
    }

    with traced_span("bizconf.cli.seed"):
        try:
            seed = build_seed(research, places, user_inputs)
        except PydanticValidationError as e:
            _output_json(_make_error_result("INVALID_INPUT", str(e)))
            return 2

    document = seed.model_dump(mode="json")
    if args.out:
        Path(args.out).write_text(
            json.dumps(document, sort_keys=True, indent=2) + "\n", encoding="utf-8"
        )
        logger.info("Wrote seed document to %s", args.out)
        _output_json({"out": args.out, "provenance": document["provenance"]})
    else:
        _output_json(document)
    return 0


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate a persisted tree against the conf schema."""
    data = _load_json(args.input)
    result = validate_conf_tree(data)
    _output_json(result.to_dict())
    return 0 if result.passed else 2


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="bizconf",
        description="Confidence-weighted business attribute scoring",
    )
    subparsers = parser.add_subparsers(dest="command")

    aggregate = subparsers.add_parser("aggregate", help="Aggregate confidence of a tree")
    aggregate.add_argument("--input", metavar="PATH", help="Tree JSON file (default: stdin)")
    weights_group = aggregate.add_mutually_exclusive_group()
    weights_group.add_argument(
        "--weights", metavar="PATH", help="JSON object of section weights"
    )
    weights_group.add_argument(
        "--default-weights",
        action="store_true",
        default=False,
        help="Use the built-in section weights",
    )

    prominence = subparsers.add_parser("prominence", help="Prominence level for a score")
    prominence.add_argument("--confidence", type=float, required=True, metavar="X")
    prominence.add_argument("--component", metavar="ID", help="UI component id, e.g. contact.phone")

    seed = subparsers.add_parser("seed", help="Build a confidence-wrapped seed document")
    seed.add_argument("--research", required=True, metavar="PATH", help="Research outputs JSON")
    seed.add_argument("--places", metavar="PATH", help="Places API result JSON")
    seed.add_argument("--name", required=True, help="Business name")
    seed.add_argument("--address", help="Business address as typed by the user")
    seed.add_argument("--phone", help="Business phone as typed by the user")
    seed.add_argument("--out", metavar="FILE", help="Write the document here instead of stdout")

    validate = subparsers.add_parser("validate", help="Validate a persisted tree")
    validate.add_argument("--input", metavar="PATH", help="Tree JSON file (default: stdin)")

    return parser


COMMANDS = {
    "aggregate": cmd_aggregate,
    "prominence": cmd_prominence,
    "seed": cmd_seed,
    "validate": cmd_validate,
}


def _configure_logging() -> None:
    config = load_config()
    logging.basicConfig(level=config.log_level_number, format=LOG_FORMAT, stream=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Exit codes:
        0: Success / validation passed
        1: Internal error (unexpected)
        2: Invalid input / validation failed / invalid configuration
    """
    try:
        parser = create_parser()
        args = parser.parse_args(argv)

        if args.command is None:
            parser.print_help()
            return 0

        _configure_logging()
        configure_tracing()
        return COMMANDS[args.command](args)

    except InputError as e:
        _output_json(_make_error_result(e.code, e.message))
        return 2
    except ConfigError as e:
        _output_json(_make_error_result("INVALID_CONFIG", str(e)))
        return 2
    except Exception as e:
        logger.exception("Unexpected error")
        _output_json(_make_error_result("INTERNAL_ERROR", str(e)))
        return 1


if __name__ == "__main__":
    sys.exit(main())
