"""
Utility Functions
=================
Archive extraction and schema validation helpers.
"""

from .schema_validation import (
    validate_against_schema,
    validate_naming_conventions,
    validate_icon_set_export,
    is_valid_icon_set_export,
)

from .zip_safety import (
    ZipExtractionResult,
    extract_zip_bytes_safely,
    extract_zip_file_safely,
)

__all__ = [
    # Schema validation
    "validate_against_schema",
    "validate_naming_conventions",
    "validate_icon_set_export",
    "is_valid_icon_set_export",
    # Archives
    "ZipExtractionResult",
    "extract_zip_bytes_safely",
    "extract_zip_file_safely",
]
