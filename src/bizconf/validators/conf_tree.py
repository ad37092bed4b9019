"""Persisted attribute tree validator.

Walks a JSON attribute tree, validates every node tagged
``node_type: "conf"`` against conf.schema.json, and flags untagged
mappings that look like wrappers (they would be ignored by aggregation).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from bizconf.models.conf import CONF_NODE_TYPE
from bizconf.validators.schema_validator import SchemaValidator, ValidationError, ValidationResult

CONF_SCHEMA = "conf"

_WRAPPER_FIELDS = frozenset({"confidence", "value", "sources"})


class ConfTreeValidator:
    """Validates persisted attribute trees."""

    def __init__(self, schema_validator: SchemaValidator | None = None) -> None:
        self._schemas = schema_validator or SchemaValidator()

    def validate(self, data: Any) -> ValidationResult:
        """Validate a persisted tree.

        Args:
            data: Parsed JSON document

        Returns:
            ValidationResult. Fails on schema violations; untagged
            wrapper-shaped mappings and trees with no wrappers are warnings.
        """
        if data is None:
            return ValidationResult.fail_closed("Data is None - cannot validate")

        errors: list[ValidationError] = []
        warnings: list[ValidationError] = []
        leaf_count = self._walk(data, "$", errors, warnings)

        if leaf_count == 0:
            warnings.append(
                ValidationError(
                    code="NO_CONF_NODES",
                    message="Tree contains no conf nodes; aggregate confidence will be 0",
                    path="$",
                )
            )

        if errors:
            return ValidationResult.fail(errors, warnings)
        return ValidationResult.success(warnings)

    def _walk(
        self,
        node: Any,
        path: str,
        errors: list[ValidationError],
        warnings: list[ValidationError],
    ) -> int:
        if isinstance(node, Mapping):
            if node.get("node_type") == CONF_NODE_TYPE:
                errors.extend(self._schemas.iter_errors(CONF_SCHEMA, dict(node), path))
                return 1
            if _WRAPPER_FIELDS <= node.keys():
                warnings.append(
                    ValidationError(
                        code="UNTAGGED_CONF",
                        message="Mapping has wrapper fields but no node_type tag",
                        path=path,
                    )
                )
            return sum(
                self._walk(child, f"{path}.{key}", errors, warnings)
                for key, child in node.items()
            )
        if isinstance(node, list):
            return sum(
                self._walk(child, f"{path}[{i}]", errors, warnings) for i, child in enumerate(node)
            )
        return 0


def validate_conf_tree(data: Any) -> ValidationResult:
    """Validate a persisted attribute tree (see ConfTreeValidator)."""
    return ConfTreeValidator().validate(data)
