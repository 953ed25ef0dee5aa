"""Tests for collision sampling and the event loop."""

import logging
from dataclasses import replace

import numpy as np
import pytest
from numpy.testing import assert_array_equal
from scipy import stats

from mcglauber.collider import (
    Collider,
    CollisionSample,
    determine_asymmetry,
    determine_bmax,
    run_collisions,
)
from mcglauber.config import CollisionConfig, ConfigurationError
from mcglauber.event import ParticipantProfile
from mcglauber.nucleon import NucleonCommon
from mcglauber.nucleus import Nucleus
from mcglauber.output import EventRecorder

from conftest import black_disk_mb


class TestConstruction:
    """Tests for b_max, asymmetry and validation at construction."""

    def test_asymmetry_symmetric(self, rng):
        a = Nucleus.create("Pb", rng=rng)
        b = Nucleus.create("Pb", rng=rng)
        assert determine_asymmetry(a, b) == 0.5

    def test_asymmetry_point_like(self, rng):
        assert determine_asymmetry(Nucleus.create("p", rng=rng), Nucleus.create("p", rng=rng)) == 0.5

    def test_asymmetry_radius_ratio(self, rng):
        a = Nucleus.create("d", rng=rng)
        b = Nucleus.create("Au", rng=rng)
        assert determine_asymmetry(a, b) == pytest.approx(a.radius() / (a.radius() + b.radius()))
        assert determine_asymmetry(Nucleus.create("p", rng=rng), b) == 0.0

    def test_default_bmax(self, rng):
        a = Nucleus.create("Au", rng=rng)
        b = Nucleus.create("Cu", rng=rng)
        nc = NucleonCommon(42.0, 0.5)
        assert determine_bmax(-1.0, a, b, nc) == pytest.approx(a.radius() + b.radius() + nc.max_impact())
        assert determine_bmax(8.0, a, b, nc) == 8.0

    def test_collider_default_bmax(self, pPb_config):
        collider = Collider(pPb_config)
        expected = (collider.nucleus_a.radius() + collider.nucleus_b.radius()
                    + collider.nucleon_common.max_impact())
        assert collider.b_max == pytest.approx(expected)

    def test_bmax_below_bmin_after_default(self, pp_config):
        with pytest.raises(ConfigurationError, match="below b_min"):
            Collider(replace(pp_config, b_min=100.0))

    def test_bmax_below_bmin_configured(self, pp_config):
        with pytest.raises(ConfigurationError, match="b_max"):
            Collider(replace(pp_config, b_min=3.0, b_max=2.0))

    def test_unknown_species(self, pp_config):
        with pytest.raises(ConfigurationError, match="Unknown species"):
            Collider(replace(pp_config, projectiles=("p", "Zz")))

    def test_deformation_sampled_from_config(self):
        cfg = CollisionConfig(projectiles=("Pb", "Pb"), beta2_mean=0.2, beta2_std=0.0,
                              gamma_mean=0.5, gamma_std=0.0, random_seed=3)
        collider = Collider(cfg)
        assert collider.nucleus_a.params.beta2 == pytest.approx(0.2)
        assert collider.nucleus_b.params.gamma == pytest.approx(0.5)


class TestSampleCollision:
    """Tests for the rejection sampler."""

    def test_point_like_end_to_end(self, pp_config):
        collider = Collider(pp_config)
        assert collider.b_max == pytest.approx(1.0)
        assert collider.asymmetry == 0.5

        for _ in range(pp_config.n_events):
            sample = collider.sample_collision()
            assert isinstance(sample, CollisionSample)
            assert 0.0 <= sample.b <= collider.b_max
            assert sample.ncoll == 1
            assert sample.n_attempts == 1
            assert collider.nucleus_a.npart == 1
            assert collider.nucleus_b.npart == 1

    def test_degenerate_bounds(self, pp_config):
        cfg = replace(pp_config, cross_section_mb=black_disk_mb(6.0), b_min=5.0, b_max=5.0)
        collider = Collider(cfg)
        b = [collider.sample_collision().b for _ in range(200)]
        assert all(x == 5.0 for x in b)

    def test_nuclei_offset_by_asymmetry(self, pp_config):
        collider = Collider(pp_config)
        sample = collider.sample_collision()
        assert collider.nucleus_a.x[0] == pytest.approx(0.5 * sample.b)
        assert collider.nucleus_b.x[0] == pytest.approx(-0.5 * sample.b)

    def test_b_within_bounds_gaussian(self, pPb_config):
        cfg = replace(pPb_config, b_min=1.0, b_max=9.0)
        collider = Collider(cfg)
        for _ in range(30):
            sample = collider.sample_collision()
            assert 1.0 <= sample.b <= 9.0
            assert sample.ncoll >= 1
            assert sample.n_attempts >= 1
            assert collider.nucleus_a.npart == 1
            assert collider.nucleus_b.npart >= 1

    @pytest.mark.parametrize("b_min", [0.0, 0.3])
    def test_flat_in_area(self, pp_config, b_min):
        """Accepted b follows 2b/(b_max^2 - b_min^2) when every draw collides."""
        collider = Collider(replace(pp_config, b_min=b_min, random_seed=77))
        b = np.array([collider.sample_collision().b for _ in range(3000)])
        lo, hi = collider.b_min, collider.b_max
        cdf = lambda x: (np.clip(x, lo, hi) ** 2 - lo * lo) / (hi * hi - lo * lo)
        assert stats.kstest(b, cdf).pvalue > 1e-3

    def test_rejection_discards_empty_events(self, pp_config):
        cfg = replace(pp_config, b_min=0.5, b_max=3.0, random_seed=5)
        collider = Collider(cfg)
        samples = [collider.sample_collision() for _ in range(300)]
        assert all(s.b < 1.0 for s in samples)
        assert all(s.ncoll == 1 for s in samples)
        assert max(s.n_attempts for s in samples) > 1

    def test_counting_disabled(self, pPb_config):
        cfg = replace(pPb_config, calc_ncoll=False, calc_attempts=False)
        collider = Collider(cfg)
        for _ in range(10):
            sample = collider.sample_collision()
            assert sample.ncoll == 0
            assert sample.n_attempts == 0
            assert collider.nucleus_b.npart >= 1

    def test_attempt_warning(self, pp_config, caplog):
        cfg = replace(pp_config, b_min=0.5, b_max=3.0, attempt_warning=1, random_seed=9)
        collider = Collider(cfg)
        with caplog.at_level(logging.WARNING, logger="mcglauber.collider"):
            for _ in range(40):
                collider.sample_collision()
        assert any("attempts without a collision" in r.message for r in caplog.records)


class TestLogging:
    """Tests for construction and per-event log records."""

    def test_construction_logged_at_info(self, pp_config, caplog):
        with caplog.at_level(logging.INFO, logger="mcglauber.collider"):
            Collider(pp_config)
        records = [r for r in caplog.records if r.name == "mcglauber.collider"]
        assert len(records) == 1
        assert records[0].levelno == logging.INFO
        assert "p+p" in records[0].getMessage()
        assert "asymmetry=0.500" in records[0].getMessage()

    def test_events_logged_at_debug(self, pp_config, caplog):
        collider = Collider(replace(pp_config, n_events=4))
        with caplog.at_level(logging.DEBUG, logger="mcglauber.collider"):
            collider.run_events()
        debug = [r for r in caplog.records
                 if r.name == "mcglauber.collider" and r.levelno == logging.DEBUG]
        assert [r.getMessage().split(":")[0] for r in debug] == [f"event {n}" for n in range(4)]
        assert all("ncoll=1" in r.getMessage() for r in debug)

    def test_no_debug_records_at_info(self, pp_config, caplog):
        collider = Collider(replace(pp_config, n_events=3))
        with caplog.at_level(logging.INFO, logger="mcglauber.collider"):
            collider.run_events()
        assert not any(r.levelno == logging.DEBUG for r in caplog.records)


class TestRunEvents:
    """Tests for the event loop."""

    def test_recorder_arrays(self, pPb_config):
        out = run_collisions(pPb_config)
        assert set(out) >= {"event", "b", "Ncoll", "n_attempts", "Npart", "S", "ecc2", "ecc3", "ecc4"}
        assert_array_equal(out["event"], np.arange(pPb_config.n_events))
        assert (out["Ncoll"] >= 1).all()
        assert (out["Npart"] >= 2).all()
        assert (out["Npart"] <= out["Ncoll"] + 1).all()

    def test_no_events_keeps_all_columns(self):
        out = run_collisions(CollisionConfig(projectiles=("p", "Pb"), n_events=0, random_seed=1))
        for key in ("event", "b", "Ncoll", "n_attempts", "Npart", "S", "ecc2", "ecc3", "ecc4"):
            assert key in out
            assert out[key].shape == (0,)

    def test_columns_follow_profile_harmonics(self, pPb_config):
        cfg = replace(pPb_config, n_events=3)
        out = run_collisions(cfg, profile=ParticipantProfile(harmonics=(2, 5)))
        assert {k for k in out if k.startswith("ecc")} == {"ecc2", "ecc5"}
        assert out["ecc5"].shape == (3,)

    def test_determinism(self):
        cfg = CollisionConfig(projectiles=("d", "Au"), n_events=15, random_seed=42)
        first = run_collisions(cfg)
        second = run_collisions(cfg)
        for key in ("b", "Ncoll", "n_attempts", "Npart", "S", "ecc2"):
            assert_array_equal(first[key], second[key])

    def test_injected_rng(self, pPb_config):
        a = Collider(pPb_config, rng=np.random.default_rng(8)).run_events().to_arrays()
        b = Collider(pPb_config, rng=np.random.default_rng(8)).run_events().to_arrays()
        assert_array_equal(a["b"], b["b"])

    def test_output_receives_every_event(self, pp_config):
        cfg = replace(pp_config, n_events=25)
        recorder = Collider(cfg).run_events(EventRecorder())
        assert len(recorder) == 25

    def test_output_error_is_fatal(self, pp_config):
        calls = []

        def failing_output(n, b, ncoll, n_attempts, event):
            calls.append(n)
            raise OSError("disk full")

        with pytest.raises(OSError, match="disk full"):
            Collider(pp_config).run_events(failing_output)
        assert calls == [0]

    def test_profile_stage_receives_accepted_nuclei(self, pp_config):
        seen = []

        class Spy:
            def compute(self, nucleus_a, nucleus_b, nucleon_common):
                seen.append((nucleus_a.npart, nucleus_b.npart))
                return None

        out = Collider(replace(pp_config, n_events=5), profile=Spy()).run_events().to_arrays()
        assert seen == [(1, 1)] * 5
        assert "Npart" not in out
