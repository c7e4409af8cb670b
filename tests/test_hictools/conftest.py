"""
Shared pytest fixtures for hictools test suite.
"""
import numpy as np
import pytest

from hictools.output import HDF5Output, OutputParameters
from hictools.particle import ParticleData
from hictools.synthetic import random_bank


@pytest.fixture
def rng():
    """Numpy Generator with fixed seed for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def bank(rng):
    """50-particle snapshot."""
    return random_bank(rng, 50)


@pytest.fixture
def pair():
    """Two hand-made particle records (pi+ and proton)."""
    return [
        ParticleData(t=1.0, x=0.5, y=-0.5, z=2.0, p0=0.5, px=0.1, py=0.2, pz=0.4,
                     pdgcode=211, charge=1, ncoll=2, pdg_mother1=2212),
        ParticleData(t=1.0, x=-0.5, y=0.5, z=-2.0, p0=1.0, px=-0.1, py=-0.2, pz=-0.2,
                     pdgcode=2212, charge=1, xsec_factor=0.5, proc_type_origin=3),
    ]


@pytest.fixture
def make_output(tmp_path):
    """Factory for HDF5Output in tmp_path; closes every output on teardown."""
    created = []

    def _make(name="run", **options):
        output = HDF5Output(tmp_path, name, OutputParameters(**options))
        created.append(output)
        return output

    yield _make
    for output in created:
        output.close()
