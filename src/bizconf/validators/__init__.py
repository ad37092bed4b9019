"""bizconf validators - fail-closed validation of persisted attribute trees."""

from bizconf.validators.conf_tree import ConfTreeValidator, validate_conf_tree
from bizconf.validators.schema_validator import (
    SchemaValidator,
    ValidationError,
    ValidationResult,
)

__all__ = [
    "ConfTreeValidator",
    "SchemaValidator",
    "ValidationError",
    "ValidationResult",
    "validate_conf_tree",
]
