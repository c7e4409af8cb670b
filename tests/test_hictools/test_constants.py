"""
Tests for hictools.constants module.
"""
from hictools.constants import (
    COLLISION_COLUMNS,
    COLLISION_EXTENDED_COLUMNS,
    COLLISION_SCALAR_COLUMNS,
    INT_FIELDS,
    MAX_BUFFER_SIZE,
    OUTPUT_EXTENSION,
    PARTICLE_COLUMNS,
    PARTICLE_EXTENDED_COLUMNS,
    UNFINISHED_SUFFIX,
)


class TestSchemaConstants:
    def test_buffer_size(self):
        assert MAX_BUFFER_SIZE == 10000

    def test_file_suffixes(self):
        assert OUTPUT_EXTENSION == ".h5"
        assert UNFINISHED_SUFFIX == ".unfinished"

    def test_extended_columns_extend_base(self):
        assert PARTICLE_EXTENDED_COLUMNS[:len(PARTICLE_COLUMNS)] == PARTICLE_COLUMNS
        assert COLLISION_EXTENDED_COLUMNS[:len(COLLISION_COLUMNS)] == COLLISION_COLUMNS

    def test_collision_scalars_first(self):
        assert COLLISION_COLUMNS[:len(COLLISION_SCALAR_COLUMNS)] == COLLISION_SCALAR_COLUMNS
        assert COLLISION_SCALAR_COLUMNS == ("nin", "nout", "npart", "ev", "weight", "partial_weight")

    def test_no_duplicate_columns(self):
        for columns in (PARTICLE_EXTENDED_COLUMNS, COLLISION_EXTENDED_COLUMNS):
            assert len(set(columns)) == len(columns)

    def test_integer_columns(self):
        for name in ("ev", "tcounter", "pdgcode", "charge", "ncoll"):
            assert name in INT_FIELDS
