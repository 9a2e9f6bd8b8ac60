"""
Run parameters for ngpackager.

The build rule hands the packager a newline-delimited parameter file:

    out
    src_dir
    bin_dir
    readme
    fesm2015 list (comma separated)
    fesm5 list
    bundle list
    source list
    stamp data path
    license file path

A line holding just ``''`` stands for an empty value. Trailing lines may
be omitted.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .errors import ParameterFileError, StorageError

EMPTY_MARKER = "''"
FIELD_ORDER = (
    'out', 'src_dir', 'bin_dir', 'readme',
    'fesms2015', 'fesms5', 'bundles', 'srcs',
    'stamp_data', 'license_file',
)
REQUIRED_LINES = 3


def _split_list(value: str) -> List[Path]:
    return [Path(item) for item in value.split(',') if item]


def _optional_path(value: str) -> Optional[Path]:
    return Path(value) if value else None


@dataclass
class RunParameters:
    """Everything one packaging run needs to know about its inputs."""
    out: Path
    src_dir: Path
    bin_dir: Path
    readme: Optional[Path] = None
    fesms2015: List[Path] = field(default_factory=list)
    fesms5: List[Path] = field(default_factory=list)
    bundles: List[Path] = field(default_factory=list)
    srcs: List[Path] = field(default_factory=list)
    stamp_data: Optional[Path] = None
    license_file: Optional[Path] = None

    def __post_init__(self):
        self.out = Path(self.out)
        self.src_dir = Path(self.src_dir)
        self.bin_dir = Path(self.bin_dir)
        for name in ('readme', 'stamp_data', 'license_file'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                setattr(self, name, Path(value))
        for name in ('fesms2015', 'fesms5', 'bundles', 'srcs'):
            setattr(self, name, [Path(p) for p in getattr(self, name)])

    @classmethod
    def from_lines(cls, lines: Sequence[str]) -> 'RunParameters':
        """
        Build parameters from parameter file lines.

        Raises:
            ParameterFileError: fewer than three lines, or no output root
        """
        values = ['' if line == EMPTY_MARKER else line for line in lines]
        if len(values) < REQUIRED_LINES:
            raise ParameterFileError(
                f"Parameter file needs at least {REQUIRED_LINES} lines "
                f"(out, src_dir, bin_dir), got {len(values)}"
            )
        values += [''] * (len(FIELD_ORDER) - len(values))
        raw = dict(zip(FIELD_ORDER, values))

        if not raw['out']:
            raise ParameterFileError("Parameter file has an empty output directory")

        return cls(
            out=Path(raw['out']),
            src_dir=Path(raw['src_dir']),
            bin_dir=Path(raw['bin_dir']),
            readme=_optional_path(raw['readme']),
            fesms2015=_split_list(raw['fesms2015']),
            fesms5=_split_list(raw['fesms5']),
            bundles=_split_list(raw['bundles']),
            srcs=_split_list(raw['srcs']),
            stamp_data=_optional_path(raw['stamp_data']),
            license_file=_optional_path(raw['license_file']),
        )

    @classmethod
    def from_file(cls, path: Path) -> 'RunParameters':
        """Read and parse a parameter file."""
        try:
            text = Path(path).read_text(encoding='utf-8')
        except OSError as e:
            raise StorageError(f"Cannot read parameter file {path}: {e}", str(path)) from e
        return cls.from_lines(text.splitlines())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        def _str(value):
            return str(value) if value is not None else None

        return {
            'out': str(self.out),
            'src_dir': str(self.src_dir),
            'bin_dir': str(self.bin_dir),
            'readme': _str(self.readme),
            'fesms2015': [str(p) for p in self.fesms2015],
            'fesms5': [str(p) for p in self.fesms5],
            'bundles': [str(p) for p in self.bundles],
            'srcs': [str(p) for p in self.srcs],
            'stamp_data': _str(self.stamp_data),
            'license_file': _str(self.license_file),
        }
