"""
Output schema constants and writer limits.
Units follow the transport code: fm for space-time, GeV for momenta.
"""

# ---------------------------------------------------------------------------
# Writer limits
# ---------------------------------------------------------------------------
MAX_BUFFER_SIZE = 10000               # max entries per particle block / collision
DEFAULT_AUTOSAVE_FREQUENCY = 1000     # events between durable checkpoints

# ---------------------------------------------------------------------------
# File naming
# ---------------------------------------------------------------------------
OUTPUT_EXTENSION = ".h5"
UNFINISHED_SUFFIX = ".unfinished"     # present while the run is in progress

# ---------------------------------------------------------------------------
# Table schema (bump SCHEMA_VERSION on any column change)
# ---------------------------------------------------------------------------
SCHEMA_VERSION = 1

PARTICLES_TABLE = "particles"
COLLISIONS_TABLE = "collisions"

# Per-particle fields shared by both tables
PARTICLE_BASE_FIELDS = (
    "pdgcode", "charge",
    "p0", "px", "py", "pz",
    "t", "x", "y", "z",
)
PARTICLE_EXTENDED_FIELDS = (
    "formation_time", "xsec_factor", "time_last_collision", "ncoll",
    "proc_id_origin", "proc_type_origin", "pdg_mother1", "pdg_mother2",
)

# Block tags written on every particle row
PARTICLE_BLOCK_COLUMNS = ("ev", "tcounter", "npart", "impact_b", "empty_event")
PARTICLE_COLUMNS = PARTICLE_BLOCK_COLUMNS + PARTICLE_BASE_FIELDS
PARTICLE_EXTENDED_COLUMNS = PARTICLE_COLUMNS + PARTICLE_EXTENDED_FIELDS

# Scalar columns of a collision row; participant columns are variable length
COLLISION_SCALAR_COLUMNS = ("nin", "nout", "npart", "ev", "weight", "partial_weight")
COLLISION_COLUMNS = COLLISION_SCALAR_COLUMNS + PARTICLE_BASE_FIELDS
COLLISION_EXTENDED_COLUMNS = COLLISION_COLUMNS + PARTICLE_EXTENDED_FIELDS

INT_FIELDS = frozenset({
    "ev", "tcounter", "npart", "nin", "nout",
    "pdgcode", "charge", "ncoll",
    "proc_id_origin", "proc_type_origin", "pdg_mother1", "pdg_mother2",
})
BOOL_FIELDS = frozenset({"empty_event"})
