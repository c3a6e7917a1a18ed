"""Tests for per-worker random streams."""

import pytest
from pathforge.sampling import RandomStream


class TestRandomStream:
    """Test RandomStream seeding and sampling."""

    def test_random_float_range(self):
        stream = RandomStream(0)
        for _ in range(1000):
            value = stream.random_float()
            assert 0.0 <= value < 1.0

    def test_same_seed_same_sequence(self):
        a = RandomStream(7)
        b = RandomStream(7)
        assert [a.random_float() for _ in range(20)] == [b.random_float() for _ in range(20)]

    def test_different_seeds_differ(self):
        a = RandomStream(0)
        b = RandomStream(1)
        assert [a.random_float() for _ in range(5)] != [b.random_float() for _ in range(5)]

    def test_in_unit_sphere(self):
        stream = RandomStream(3)
        for _ in range(200):
            assert stream.in_unit_sphere().length_squared() <= 1.0

    def test_on_unit_sphere(self):
        stream = RandomStream(3)
        for _ in range(200):
            assert abs(stream.on_unit_sphere().length() - 1.0) < 1e-9

    def test_seed_recorded(self):
        assert RandomStream(5).seed == 5
