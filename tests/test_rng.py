import pytest

from runic.rng import DRand48, HashRandom, Lcg, Lcg2, rot_seed, tea


def test_hash_random_is_deterministic():
    a, b = HashRandom(1024), HashRandom(1024)
    assert [a.next_float() for _ in range(20)] == [b.next_float() for _ in range(20)]


def test_hash_random_default_seed_matches_explicit():
    assert HashRandom().next_float() == HashRandom(1024).next_float()


def test_hash_random_range_and_variation():
    rng = HashRandom(7)
    values = [rng.next_float() for _ in range(500)]
    assert all(0.0 <= v <= 1.0 for v in values)
    assert len(set(values)) > 400


def test_unit_sphere_points_inside():
    rng = HashRandom(99)
    for _ in range(200):
        assert rng.random_in_unit_sphere().length() <= 1.0 + 1e-9


def test_unit_disk_points_flat_and_inside():
    rng = HashRandom(5)
    for _ in range(200):
        p = rng.random_in_unit_disk()
        assert p.z == 0.0
        assert p.length() <= 1.0 + 1e-9


def test_drand48_deterministic_and_in_range():
    a, b = DRand48(3), DRand48(3)
    va = [a.next_float() for _ in range(100)]
    assert va == [b.next_float() for _ in range(100)]
    assert all(0.0 <= v < 1.0 for v in va)


def test_drand48_seeds_differ():
    assert DRand48(1).next_float() != DRand48(2).next_float() or \
        DRand48(1).state != DRand48(2).state


def test_lcg_first_value_from_zero():
    assert Lcg(0).next_int() == 0x6EF35F


def test_lcg_values_in_range():
    rng = Lcg(12345)
    for _ in range(200):
        assert 0 <= rng.next_int() < 2 ** 24
        assert 0.0 <= rng.next_float() < 1.0


def test_lcg2_first_value_from_zero():
    assert Lcg2(0).next_int() == 28411


def test_lcg2_values_in_range():
    rng = Lcg2(999)
    assert all(0 <= rng.next_int() < 134456 for _ in range(200))


def test_tea_zero_rounds_is_identity_on_first_word():
    assert tea(1234, 5678, 0) == 1234


def test_tea_deterministic_and_sensitive():
    assert tea(1, 2, 4) == tea(1, 2, 4)
    assert tea(1, 2, 4) != tea(1, 3, 4)
    assert 0 <= tea(0xFFFFFFFF, 0xFFFFFFFF, 16) <= 0xFFFFFFFF


def test_rot_seed_is_involution():
    seed, frame = 0xDEADBEEF, 42
    assert rot_seed(rot_seed(seed, frame), frame) == seed
    assert rot_seed(seed, 0) == seed