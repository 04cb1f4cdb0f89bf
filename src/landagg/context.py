from pathlib import Path

from attrs import define, field

from ._io import RunControl
from .mapping import SpatialMapping


@define
class ReportingContext:
    """
    State shared by the reporting calls of one run.

    Attributes
    ----------
    rc : RunControl
        configuration, defaults to `RC_DEFAULTS`
    mappings : dict
        spatial mappings by resolved output directory, each loaded on first
        use and read-only afterwards

    Notes
    -----
    Passed explicitly to `land` and the reports instead of a module-level
    cache, so tests can inject synthetic mappings with `register`.
    """

    rc: RunControl = field(factory=RunControl)
    mappings: dict[Path, SpatialMapping] = field(factory=dict)

    @property
    def global_region(self):
        return self.rc["global_region"]

    def register(self, directory, mapping: SpatialMapping) -> None:
        self.mappings[Path(directory).resolve()] = mapping

    def mapping(self, directory, required: bool = True) -> SpatialMapping | None:
        """
        Mapping of the output `directory`, loaded on first use.

        With `required=False` a missing mapping file yields None.
        """
        key = Path(directory).resolve()
        if key not in self.mappings:
            if not required and not any(
                Path(directory).glob(self.rc["files"]["mapping"])
            ):
                return None
            self.mappings[key] = SpatialMapping.from_directory(
                directory,
                pattern=self.rc["files"]["mapping"],
                weight=self.rc["mapping"]["weight"],
            )
        return self.mappings[key]
