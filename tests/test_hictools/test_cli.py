"""
Tests for hictools.cli and hictools.synthetic modules.
"""
import numpy as np
import pytest

from hictools.cli import main
from hictools.output import HDF5Output, OutputParameters, create_output, read_tables
from hictools.synthetic import random_bank, run_synthetic_events


class TestSyntheticEvents:
    def test_block_count(self, tmp_path):
        with HDF5Output(tmp_path, "syn") as output:
            run = run_synthetic_events(output, n_events=2, n_particles=30, n_steps=3)
        assert run.n_blocks == 2 * (3 + 2)
        particles = read_tables(tmp_path / "syn.h5")["particles"]
        assert len(particles["ev"]) == run.n_blocks * 30

    def test_interactions_written(self, tmp_path):
        params = OutputParameters(write_collisions=True, extended_collision_output=True)
        with HDF5Output(tmp_path, "syn", params) as output:
            run = run_synthetic_events(output, n_events=1, n_particles=10,
                                       n_steps=2, n_interactions=4)
        assert run.n_interactions == 8
        collisions = read_tables(tmp_path / "syn.h5")["collisions"]
        assert collisions["nin"].tolist() == [2] * 8
        assert all(ncoll.tolist() == [0, 0, 1, 1] for ncoll in collisions["ncoll"])

    def test_random_bank_on_shell(self, rng):
        bank = random_bank(rng, 200)
        mass2 = bank.p0**2 - bank.px**2 - bank.py**2 - bank.pz**2
        assert np.all(mass2 > 0.0)
        assert np.all(np.abs(bank.charge) <= 1)


class TestCreateOutput:
    def test_hdf5_by_name(self, tmp_path):
        output = create_output("HDF5", tmp_path, "named")
        assert isinstance(output, HDF5Output)
        output.close()

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown output format"):
            create_output("root", tmp_path, "named")


class TestMain:
    def test_demo_and_summary(self, tmp_path, capsys):
        assert main(["--demo", "-o", str(tmp_path), "--events", "2", "--particles", "20",
                     "--collisions", "1", "-q"]) == 0
        assert (tmp_path / "demo.h5").exists()
        assert main(["--summary", str(tmp_path / "demo.h5")]) == 0
        out = capsys.readouterr().out
        assert "particles" in out and "collisions" in out

    def test_demo_writes_collisions(self, tmp_path):
        assert main(["--demo", "-o", str(tmp_path), "--name", "coll", "--events", "2",
                     "--particles", "10", "--collisions", "2", "--extended", "-q"]) == 0
        collisions = read_tables(tmp_path / "coll.h5")["collisions"]
        assert len(collisions["nin"]) > 0
        assert all(len(ncoll) == n for ncoll, n in zip(collisions["ncoll"], collisions["npart"]))

    def test_interpolate(self, tmp_path, capsys):
        table = tmp_path / "xy.txt"
        np.savetxt(table, np.column_stack([[0.0, 1.0, 2.0], [0.0, 1.0, 4.0]]))
        assert main(["--interpolate", str(table), "1.0", "5.0"]) == 0
        lines = capsys.readouterr().out.strip().splitlines()
        assert float(lines[0].split()[1]) == pytest.approx(1.0)
        assert float(lines[1].split()[1]) == pytest.approx(4.0)

    def test_interpolate_error_returns_1(self, tmp_path):
        table = tmp_path / "xy.txt"
        np.savetxt(table, np.column_stack([[0.0, 1.0], [0.0, 1.0]]))
        assert main(["--interpolate", str(table), "0.5"]) == 1

    def test_summary_missing_file(self, tmp_path):
        assert main(["--summary", str(tmp_path / "nope.h5")]) == 1
