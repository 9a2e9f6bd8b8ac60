"""
Packaging errors for ngpackager.

Every error here is fatal: services raise them and never downgrade them
to warnings. The CLI maps each one to its exit code.
"""

from typing import Optional

from .exit_codes import CommandError, DATA_ERROR, IO_ERROR, USAGE_ERROR


class PackagingError(CommandError):
    """Base class for errors that abort a packaging run."""
    error_type = "packaging_error"

    def __init__(self, message: str, exit_code: int = DATA_ERROR):
        super().__init__(message, exit_code)


class UnrecognizedBundleIndexExtension(PackagingError):
    """A bundle index file is neither .d.ts nor .metadata.json."""
    error_type = "unrecognized_bundle_index_extension"

    def __init__(self, path: str):
        super().__init__(
            f"Bundle index files should be .d.ts or .metadata.json: {path}"
        )
        self.path = path


class DescriptorParseError(PackagingError):
    """The package descriptor is not a JSON object with a string name."""
    error_type = "descriptor_parse_error"

    def __init__(self, message: str, path: Optional[str] = None):
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class StampFieldMissing(PackagingError):
    """Stamp data was given but does not carry the version key."""
    error_type = "stamp_field_missing"

    def __init__(self, key: str, path: Optional[str] = None):
        where = f" in {path}" if path else ""
        super().__init__(f"Stamp key {key} not found{where}")
        self.key = key
        self.path = path


class MissingPrimaryEntryPoint(PackagingError):
    """A bundle index needs the primary entry point but no FESM set it."""
    error_type = "missing_primary_entry_point"

    def __init__(self, path: str):
        super().__init__(
            f"Cannot place bundle index {path}: no primary entry point "
            "(no FESM artifacts were given)"
        )
        self.path = path


class StorageError(PackagingError):
    """Reading, writing, copying or listing a file failed."""
    error_type = "storage_error"

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, IO_ERROR)
        self.path = path


class ParameterFileError(PackagingError):
    """The run parameter file is truncated or malformed."""
    error_type = "parameter_file_error"

    def __init__(self, message: str):
        super().__init__(message, USAGE_ERROR)
