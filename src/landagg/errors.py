class MissingVariableError(KeyError):
    """
    Error raised when none of the requested variables exists in the store.
    """


class MappingError(ValueError):
    """
    Error raised when a spatial mapping does not cover the data to remap.
    """


class MissingFileError(OSError):
    """
    Error raised when a mapping or raster file is missing from a directory.
    """


class StrictModeError(ValueError):
    """
    Error raised for a diagnostic when diagnostics are treated as fatal.
    """

    def __init__(self, diagnostic):
        super().__init__(f"[{diagnostic.kind}] {diagnostic.message}")
        self.diagnostic = diagnostic
