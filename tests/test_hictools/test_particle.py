"""
Tests for hictools.particle module.
"""
import numpy as np
import pytest

from hictools.particle import (
    PARTICLE_FIELDS,
    Action,
    ParticleBank,
    ParticleData,
    ProcessType,
    as_bank,
    particle_field_names,
)


class TestParticleBankCreateEmpty:
    def test_correct_count(self):
        bank = ParticleBank.create_empty(50)
        assert bank.n_particles == 50
        assert len(bank) == 50

    def test_array_shapes_and_dtypes(self):
        bank = ParticleBank.create_empty(5)
        for name in PARTICLE_FIELDS:
            assert getattr(bank, name).shape == (5,), f"Wrong shape for {name}"
        assert bank.pdgcode.dtype == np.int32
        assert bank.ncoll.dtype == np.int32
        assert bank.p0.dtype == np.float64

    def test_xsec_factor_defaults_to_one(self):
        np.testing.assert_array_equal(ParticleBank.create_empty(4).xsec_factor, 1.0)

    def test_mismatched_lengths_rejected(self):
        arrays = {name: np.zeros(3) for name in PARTICLE_FIELDS}
        arrays["px"] = np.zeros(4)
        with pytest.raises(ValueError):
            ParticleBank(**arrays)


class TestRecordConversion:
    def test_from_particles(self, pair):
        bank = ParticleBank.from_particles(pair)
        assert bank.n_particles == 2
        np.testing.assert_array_equal(bank.pdgcode, [211, 2212])
        np.testing.assert_allclose(bank.z, [2.0, -2.0])
        np.testing.assert_array_equal(bank.pdg_mother1, [2212, 0])

    def test_iteration_returns_records(self, pair):
        bank = ParticleBank.from_particles(pair)
        assert list(bank) == pair

    def test_getitem(self, bank):
        p = bank[3]
        assert isinstance(p, ParticleData)
        assert p.px == bank.px[3]
        assert isinstance(p.pdgcode, int)

    def test_as_bank_passes_banks_through(self, bank):
        assert as_bank(bank) is bank

    def test_as_bank_converts_lists(self, pair):
        bank = as_bank(pair)
        assert isinstance(bank, ParticleBank)
        assert bank.n_particles == 2

    def test_as_bank_empty_list(self):
        assert as_bank([]).n_particles == 0

    def test_concatenate_keeps_order(self, pair):
        bank = ParticleBank.concatenate([as_bank(pair[1:]), as_bank(pair[:1])])
        np.testing.assert_array_equal(bank.pdgcode, [2212, 211])

    def test_concatenate_nothing(self):
        assert ParticleBank.concatenate([]).n_particles == 0


class TestAction:
    def test_participants_incoming_first(self, pair):
        action = Action(pair[:1], pair[1:], weight=2.0, partial_weight=1.0,
                        process_type=ProcessType.ELASTIC)
        np.testing.assert_array_equal(action.participants.pdgcode, [211, 2212])

    def test_process_type_codes(self):
        assert ProcessType.HYPERSURFACE_CROSSING == 7
        assert ProcessType.ELASTIC == 1


class TestFieldNames:
    def test_base(self):
        assert particle_field_names() == [
            "pdgcode", "charge", "p0", "px", "py", "pz", "t", "x", "y", "z",
        ]

    def test_extended_appends(self):
        names = particle_field_names(extended=True)
        assert names[:10] == particle_field_names()
        assert names[10:] == [
            "formation_time", "xsec_factor", "time_last_collision", "ncoll",
            "proc_id_origin", "proc_type_origin", "pdg_mother1", "pdg_mother2",
        ]
