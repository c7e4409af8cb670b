"""
Output adapters driven through the OutputInterface callbacks.

Available formats: HDF5 (particles and collisions tables in one file).
"""
from .base import OutputInterface
from .hdf5 import HDF5Output, read_tables
from .parameters import OnlyFinal, OutputParameters

OUTPUT_FORMATS = {
    "hdf5": HDF5Output,
}


def create_output(format_name: str, path, name: str, params: OutputParameters = None) -> OutputInterface:
    """Create an output adapter by format name.

    Raises:
        ValueError if the format is unknown
    """
    key = format_name.lower()
    if key not in OUTPUT_FORMATS:
        raise ValueError(
            f"Unknown output format: {format_name}. Choose from: {', '.join(OUTPUT_FORMATS)}"
        )
    return OUTPUT_FORMATS[key](path, name, params)


__all__ = [
    "OutputInterface",
    "HDF5Output",
    "OnlyFinal",
    "OutputParameters",
    "OUTPUT_FORMATS",
    "create_output",
    "read_tables",
]
