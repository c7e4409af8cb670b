"""
Particle records, particle snapshots and interaction descriptors.

SoA (Structure of Arrays) layout: a ParticleBank holds one contiguous numpy
array per particle field, which maps directly onto the column-oriented
output tables. Single records (ParticleData) are used for ad-hoc lists such
as the incoming/outgoing particles of an interaction.
"""
import enum
import numpy as np
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Sequence, Union

from .constants import PARTICLE_BASE_FIELDS, PARTICLE_EXTENDED_FIELDS, INT_FIELDS


PARTICLE_FIELDS = PARTICLE_BASE_FIELDS + PARTICLE_EXTENDED_FIELDS


class ProcessType(enum.IntEnum):
    """Process type codes attached to interactions and particle origins."""
    NONE = 0
    ELASTIC = 1
    TWO_TO_ONE = 2
    TWO_TO_TWO = 3
    DECAY = 5
    WALL = 6
    HYPERSURFACE_CROSSING = 7


@dataclass
class ParticleData:
    """State of a single particle."""
    t: float = 0.0              # fm
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0
    p0: float = 0.0             # GeV
    px: float = 0.0
    py: float = 0.0
    pz: float = 0.0
    pdgcode: int = 0
    charge: int = 0
    # extended
    formation_time: float = 0.0
    xsec_factor: float = 1.0
    time_last_collision: float = 0.0
    ncoll: int = 0
    proc_id_origin: int = 0
    proc_type_origin: int = 0
    pdg_mother1: int = 0
    pdg_mother2: int = 0


@dataclass
class ParticleBank:
    """Structure-of-Arrays snapshot of N particles.

    Float fields are float64, integer fields int32.
    """
    pdgcode: np.ndarray
    charge: np.ndarray
    p0: np.ndarray
    px: np.ndarray
    py: np.ndarray
    pz: np.ndarray
    t: np.ndarray
    x: np.ndarray
    y: np.ndarray
    z: np.ndarray
    formation_time: np.ndarray
    xsec_factor: np.ndarray
    time_last_collision: np.ndarray
    ncoll: np.ndarray
    proc_id_origin: np.ndarray
    proc_type_origin: np.ndarray
    pdg_mother1: np.ndarray
    pdg_mother2: np.ndarray

    def __post_init__(self):
        n = None
        for name in PARTICLE_FIELDS:
            dtype = np.int32 if name in INT_FIELDS else np.float64
            arr = np.asarray(getattr(self, name), dtype=dtype)
            if arr.ndim != 1:
                raise ValueError(f"ParticleBank field '{name}' must be one-dimensional")
            if n is None:
                n = len(arr)
            elif len(arr) != n:
                raise ValueError(
                    f"ParticleBank field '{name}' has length {len(arr)}, expected {n}"
                )
            setattr(self, name, arr)

    @property
    def n_particles(self):
        return len(self.t)

    def __len__(self):
        return self.n_particles

    def __iter__(self) -> Iterator[ParticleData]:
        for i in range(self.n_particles):
            yield self[i]

    def __getitem__(self, i) -> ParticleData:
        values = {}
        for name in PARTICLE_FIELDS:
            value = getattr(self, name)[i]
            values[name] = int(value) if name in INT_FIELDS else float(value)
        return ParticleData(**values)

    @classmethod
    def create_empty(cls, n):
        """Create bank with n zero-valued particles."""
        arrays = {}
        for name in PARTICLE_FIELDS:
            dtype = np.int32 if name in INT_FIELDS else np.float64
            arrays[name] = np.zeros(n, dtype=dtype)
        arrays["xsec_factor"][:] = 1.0
        return cls(**arrays)

    @classmethod
    def from_particles(cls, particles: Iterable[ParticleData]):
        """Build a bank from an iterable of ParticleData records."""
        records = list(particles)
        arrays = {}
        for name in PARTICLE_FIELDS:
            dtype = np.int32 if name in INT_FIELDS else np.float64
            arrays[name] = np.array([getattr(p, name) for p in records], dtype=dtype)
        return cls(**arrays)

    @classmethod
    def concatenate(cls, banks: Sequence["ParticleBank"]):
        """Join banks in order."""
        if not banks:
            return cls.create_empty(0)
        return cls(**{
            name: np.concatenate([getattr(b, name) for b in banks])
            for name in PARTICLE_FIELDS
        })


ParticleSource = Union[ParticleBank, Sequence[ParticleData]]


def as_bank(particles: ParticleSource) -> ParticleBank:
    """Return particles as a ParticleBank.

    Banks pass through unchanged; any other iterable of ParticleData is
    converted. Every writer operation goes through here, so snapshots and
    ad-hoc particle lists share one code path.
    """
    if isinstance(particles, ParticleBank):
        return particles
    return ParticleBank.from_particles(particles)


@dataclass
class Action:
    """Interaction descriptor: incoming and outgoing particles plus weights."""
    incoming: ParticleSource
    outgoing: ParticleSource
    weight: float = 0.0             # total weight (cross section or width)
    partial_weight: float = 0.0     # weight of the realised channel
    process_type: int = ProcessType.NONE

    @property
    def participants(self) -> ParticleBank:
        """Incoming particles followed by outgoing particles."""
        return ParticleBank.concatenate([as_bank(self.incoming), as_bank(self.outgoing)])


def particle_field_names(extended=False) -> List[str]:
    """Names of the per-particle fields written to the output tables."""
    if extended:
        return list(PARTICLE_FIELDS)
    return list(PARTICLE_BASE_FIELDS)
