"""
HDF5 output of particle and collision data.

File layout (<path>/<name>.h5):

  /                 attrs: schema_version, hictools_version, output options
  /particles        one row per particle per output block
  /collisions       one row per interaction

Every table is a group holding one resizable 1-D dataset per column; the
column order is stored in the group's "columns" attribute. Particle rows
carry the block tags
  ev          event number
  tcounter    number of the output block within the event
  npart       number of particles in the block
  impact_b    impact parameter [fm] (known at event end, 0 before)
  empty_event whether projectile and target did not interact
followed by pdgcode, charge, p0, px, py, pz, t, x, y, z and, with extended
output, formation_time, xsec_factor, time_last_collision, ncoll,
proc_id_origin, proc_type_origin, pdg_mother1, pdg_mother2.

Collision rows hold nin, nout, npart, ev, weight, partial_weight and the
same particle fields as variable-length arrays of length nin + nout
(incoming particles first).

While the run is in progress the file is called <name>.h5.unfinished and
it is renamed on close(). A file left with the unfinished name marks an
incomplete run; everything up to the last checkpoint can still be read.
"""
import logging
import os
from pathlib import Path
from typing import Dict, Optional

import h5py
import numpy as np

from .. import __version__
from ..constants import (
    OUTPUT_EXTENSION, UNFINISHED_SUFFIX, SCHEMA_VERSION,
    PARTICLES_TABLE, COLLISIONS_TABLE,
    PARTICLE_COLUMNS, PARTICLE_EXTENDED_COLUMNS,
    COLLISION_SCALAR_COLUMNS, COLLISION_COLUMNS, COLLISION_EXTENDED_COLUMNS,
    INT_FIELDS, BOOL_FIELDS,
)
from ..errors import AutosaveError, CapacityExceeded, OutputError
from ..particle import (
    Action, ParticleBank, ParticleSource, ProcessType, as_bank, particle_field_names,
)
from .base import OutputInterface
from .parameters import OnlyFinal, OutputParameters

logger = logging.getLogger(__name__)

CHUNK_ROWS = 4096


def _column_dtype(name):
    if name in BOOL_FIELDS:
        return np.bool_
    if name in INT_FIELDS:
        return np.int32
    return np.float64


def _decode(value):
    return value.decode() if isinstance(value, bytes) else str(value)


class HDF5Output(OutputInterface):
    """Writes particle blocks and collision records to an HDF5 file.

    Args:
        path: existing output directory
        name: base name of the output file (without extension)
        params: OutputParameters; defaults write the particles table only
        compression: HDF5 filter for fixed-size columns (None to disable)

    Raises:
        OutputError: directory missing or file cannot be created
    """

    def __init__(self, path, name: str, params: Optional[OutputParameters] = None,
                 compression: Optional[str] = "gzip"):
        self.params = params or OutputParameters()
        self.compression = compression

        path = Path(path)
        if not path.is_dir():
            raise OutputError(f"Output directory {path} does not exist")
        self._filename = path / f"{name}{OUTPUT_EXTENSION}"
        self._filename_unfinished = path / f"{name}{OUTPUT_EXTENSION}{UNFINISHED_SUFFIX}"

        try:
            self._file = h5py.File(self._filename_unfinished, "w")
        except OSError as exc:
            raise OutputError(
                f"Cannot create output file {self._filename_unfinished}: {exc}"
            ) from exc

        self.current_event = 0
        self.output_counter = 0
        self.impact_b = 0.0
        self.empty_event = False
        self._n_particle_rows = 0
        self._n_collision_rows = 0

        self._init_tables()
        logger.info("Opened %s (particles=%s, collisions=%s)",
                    self._filename_unfinished, self._has_particles, self.params.write_collisions)

    # -- setup ---------------------------------------------------------------

    @property
    def _has_particles(self):
        return self.params.write_particles or self.params.write_initial_conditions

    def _init_tables(self):
        self._file.attrs["schema_version"] = SCHEMA_VERSION
        self._file.attrs["hictools_version"] = __version__
        for key, value in self.params.to_dict().items():
            self._file.attrs[key] = value

        if self._has_particles:
            columns = (PARTICLE_EXTENDED_COLUMNS if self.params.particles_extended
                       else PARTICLE_COLUMNS)
            self._create_table(PARTICLES_TABLE, columns, vlen=())
        if self.params.write_collisions:
            columns = (COLLISION_EXTENDED_COLUMNS if self.params.collisions_extended
                       else COLLISION_COLUMNS)
            participant_columns = [c for c in columns if c not in COLLISION_SCALAR_COLUMNS]
            self._create_table(COLLISIONS_TABLE, columns, vlen=participant_columns)

    def _create_table(self, table, columns, vlen):
        group = self._file.create_group(table)
        group.attrs.create("columns", list(columns), dtype=h5py.string_dtype())
        for col in columns:
            if col in vlen:
                group.create_dataset(
                    col, shape=(0,), maxshape=(None,), chunks=(CHUNK_ROWS,),
                    dtype=h5py.vlen_dtype(_column_dtype(col)),
                )
            else:
                group.create_dataset(
                    col, shape=(0,), maxshape=(None,), chunks=(CHUNK_ROWS,),
                    dtype=_column_dtype(col), compression=self.compression,
                )

    # -- accessors -----------------------------------------------------------

    @property
    def filename(self) -> Path:
        """Final file name, valid once the output is closed."""
        return self._filename

    @property
    def filename_unfinished(self) -> Path:
        return self._filename_unfinished

    @property
    def closed(self) -> bool:
        return self._file is None

    @property
    def n_particle_rows(self) -> int:
        return self._n_particle_rows

    @property
    def n_collision_rows(self) -> int:
        return self._n_collision_rows

    @property
    def particles_table(self) -> Optional[h5py.Group]:
        """The particles group, owned by the open file (None if disabled)."""
        return self._table(PARTICLES_TABLE)

    @property
    def collisions_table(self) -> Optional[h5py.Group]:
        """The collisions group, owned by the open file (None if disabled)."""
        return self._table(COLLISIONS_TABLE)

    def _table(self, table):
        if self._file is None or table not in self._file:
            return None
        return self._file[table]

    def _require_table(self, table):
        if self._file is None:
            raise OutputError(f"Output file {self._filename} is already closed")
        group = self._table(table)
        if group is None:
            raise OutputError(f"Table '{table}' is not enabled for {self._filename}")
        return group

    # -- OutputInterface -----------------------------------------------------

    @property
    def _writes_particle_blocks(self):
        # initial-conditions output replaces the ordinary particle blocks
        return self.params.write_particles and not self.params.write_initial_conditions

    def on_event_start(self, particles: ParticleSource, event_number: int) -> None:
        """Reset per-event state and write the initial particle block."""
        self.current_event = event_number
        self.output_counter = 0
        self.impact_b = 0.0
        self.empty_event = False
        if self._writes_particle_blocks and self.params.particles_only_final is OnlyFinal.NO:
            self.write_particle_block(particles)

    def on_intermediate_time(self, particles: ParticleSource, clock=None, dens_param=None) -> None:
        """Write an intermediate particle block unless only final output is requested."""
        if self._writes_particle_blocks and self.params.particles_only_final is OnlyFinal.NO:
            self.write_particle_block(particles)

    def on_event_end(self, particles: ParticleSource, event_number: int,
                     impact_parameter: float, empty_event: bool) -> None:
        """Write the final particle block and checkpoint every autosave_frequency events."""
        self.impact_b = float(impact_parameter)
        self.empty_event = bool(empty_event)
        skip_empty = (self.params.particles_only_final is OnlyFinal.IF_NOT_EMPTY
                      and self.empty_event)
        if self._writes_particle_blocks and not skip_empty:
            self.write_particle_block(particles)

        self.current_event = event_number + 1
        if self.current_event > 0 and self.current_event % self.params.autosave_frequency == 0:
            self.checkpoint()

    def on_interaction(self, action: Action, density: float = 0.0) -> None:
        """Write the collision record; in IC mode also the particles crossing the hypersurface."""
        if self.params.write_collisions:
            self.write_collision_record(action.incoming, action.outgoing,
                                        action.weight, action.partial_weight)
        if (self.params.write_initial_conditions
                and action.process_type == ProcessType.HYPERSURFACE_CROSSING):
            self.write_particle_block(action.incoming)

    # -- writing -------------------------------------------------------------

    def write_particle_block(self, particles: ParticleSource) -> None:
        """Append one output block: a row per particle, tagged with event and block number.

        Raises:
            CapacityExceeded: more particles than params.max_buffer_size
        """
        group = self._require_table(PARTICLES_TABLE)
        bank = as_bank(particles)
        n = bank.n_particles
        if n > self.params.max_buffer_size:
            raise CapacityExceeded(n, self.params.max_buffer_size, "particle block")

        if n > 0:
            columns = {
                "ev": np.full(n, self.current_event, dtype=np.int32),
                "tcounter": np.full(n, self.output_counter, dtype=np.int32),
                "npart": np.full(n, n, dtype=np.int32),
                "impact_b": np.full(n, self.impact_b, dtype=np.float64),
                "empty_event": np.full(n, self.empty_event, dtype=np.bool_),
            }
            for name in particle_field_names(self.params.particles_extended):
                columns[name] = getattr(bank, name)
            self._append_rows(group, columns, n)
            self._n_particle_rows += n
        self.output_counter += 1

    def write_collision_record(self, incoming: ParticleSource, outgoing: ParticleSource,
                               weight: float, partial_weight: float) -> None:
        """Append one collision row with per-participant arrays.

        Raises:
            CapacityExceeded: nin + nout larger than params.max_buffer_size
        """
        group = self._require_table(COLLISIONS_TABLE)
        incoming = as_bank(incoming)
        outgoing = as_bank(outgoing)
        nin, nout = incoming.n_particles, outgoing.n_particles
        if nin + nout > self.params.max_buffer_size:
            raise CapacityExceeded(nin + nout, self.params.max_buffer_size, "collision")

        participants = ParticleBank.concatenate([incoming, outgoing])
        columns = {
            "nin": np.array([nin], dtype=np.int32),
            "nout": np.array([nout], dtype=np.int32),
            "npart": np.array([nin + nout], dtype=np.int32),
            "ev": np.array([self.current_event], dtype=np.int32),
            "weight": np.array([weight], dtype=np.float64),
            "partial_weight": np.array([partial_weight], dtype=np.float64),
        }
        for name in particle_field_names(self.params.collisions_extended):
            # one row: a list holding the nin + nout values of this column
            columns[name] = [getattr(participants, name)]
        self._append_rows(group, columns, 1)
        self._n_collision_rows += 1

    @staticmethod
    def _append_rows(group, columns: Dict[str, object], n: int):
        """Append n rows to every column of a table, all or nothing.

        Fixed-size columns take an array of length n, variable-length
        columns a sequence of n arrays. Values are converted before any
        dataset is resized; if a write still fails, every column is shrunk
        back to its previous length and the error is re-raised.
        """
        prepared = []
        start = None
        for col, values in columns.items():
            ds = group[col]
            if start is None:
                start = ds.shape[0]
            elif ds.shape[0] != start:
                raise OutputError(f"column {col!r} of {group.name} has {ds.shape[0]} rows, "
                                  f"expected {start}")
            base = h5py.check_vlen_dtype(ds.dtype)
            if base is not None:
                values = [np.ascontiguousarray(cell, dtype=base) for cell in values]
            else:
                values = np.asarray(values, dtype=ds.dtype)
            if len(values) != n:
                raise ValueError(f"column {col!r}: got {len(values)} values for {n} rows")
            prepared.append((ds, base is not None, values))

        grown = []
        try:
            for ds, is_vlen, values in prepared:
                ds.resize((start + n,))
                grown.append(ds)
                if is_vlen:
                    for i, cell in enumerate(values):
                        ds[start + i] = cell
                else:
                    ds[start:start + n] = values
        except Exception:
            for ds in grown:
                ds.resize((start,))
            raise

    # -- persistence ---------------------------------------------------------

    def checkpoint(self) -> None:
        """Flush all committed rows to disk so they survive a crash.

        Raises:
            AutosaveError: the flush failed; rows from earlier checkpoints stay readable
        """
        if self._file is None:
            raise OutputError(f"Output file {self._filename} is already closed")
        try:
            self._file.flush()
        except (OSError, RuntimeError) as exc:
            logger.error("Autosave of %s failed after event %d: %s",
                         self._filename_unfinished, self.current_event - 1, exc)
            raise AutosaveError(self.current_event - 1, str(exc)) from exc
        logger.debug("Checkpoint of %s after %d events (%d particle rows, %d collision rows)",
                     self._filename_unfinished, self.current_event,
                     self._n_particle_rows, self._n_collision_rows)

    def close(self) -> None:
        """Close the file and rename it to its final name. Safe to call twice."""
        if self._file is None:
            return
        h5file, self._file = self._file, None
        try:
            try:
                h5file.flush()
            finally:
                h5file.close()
        finally:
            try:
                os.replace(self._filename_unfinished, self._filename)
            except OSError as exc:
                raise OutputError(
                    f"Cannot rename {self._filename_unfinished} to {self._filename}: {exc}"
                ) from exc
            logger.info("Closed %s (%d particle rows, %d collision rows)",
                        self._filename, self._n_particle_rows, self._n_collision_rows)


def read_tables(filename) -> dict:
    """Read an output file (finished or unfinished) into memory.

    Returns:
        dict with "attrs" (root attributes) and, for every table present,
        a dict mapping column name to an ndarray. Variable-length collision
        columns are returned as lists of ndarrays, one per collision.
    """
    result = {}
    try:
        h5file = h5py.File(filename, "r")
    except OSError as exc:
        raise OutputError(f"Cannot read output file {filename}: {exc}") from exc
    with h5file as f:
        result["attrs"] = {key: value for key, value in f.attrs.items()}
        for table in (PARTICLES_TABLE, COLLISIONS_TABLE):
            if table not in f:
                continue
            group = f[table]
            data = {}
            for col in (_decode(c) for c in group.attrs["columns"]):
                ds = group[col]
                if h5py.check_vlen_dtype(ds.dtype) is not None:
                    data[col] = [np.asarray(v) for v in ds[...]]
                else:
                    data[col] = ds[...]
            result[table] = data
    return result
