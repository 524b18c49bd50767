import pytest
from sage.all import QQ, RR, GF, NumberField, PolynomialRing, EllipticCurve

import stoll_bound.field_bound as field_bound
from stoll_bound import (
    StollBoundConfig, embedding_bound, stoll_bound, stoll_bound_ith_embedding,
    stoll_bounds_per_place, stoll_bound_with_places,
    UnsupportedFieldError, PrecisionInsufficientError, InvalidInputError
)


def test_rational_curve_equals_single_place(curve_11a1, config):
    b2, b4, b6 = curve_11a1.b_invariants()[:3]
    local = embedding_bound(b2, b4, b6, True, config)
    assert stoll_bound(curve_11a1, config) == RR(local)
    assert stoll_bound_ith_embedding(curve_11a1, 1, config) == local


def test_defaults_match_explicit_config(congruent_curve):
    assert stoll_bound(congruent_curve) == stoll_bound(congruent_curve, StollBoundConfig())


def test_overrides_replace_config_fields(curve_11a1):
    assert (stoll_bound(curve_11a1, geometric=True)
            == stoll_bound(curve_11a1, StollBoundConfig(geometric=True)))
    assert stoll_bound(curve_11a1, geometric=True) >= stoll_bound(curve_11a1)


def test_weighted_average_over_places(cubic_field, config):
    a = cubic_field.gen()
    E = EllipticCurve(cubic_field, [0, 0, 0, a, 1])
    per_place = stoll_bounds_per_place(E, config)
    assert [place.weight for place, _ in per_place] == [1, 2]
    total = sum(place.weight * bound for place, bound in per_place)
    assert stoll_bound(E, config) == RR(total / 3)
    assert stoll_bound_ith_embedding(E, 2, config) == per_place[1][1]


def test_complex_place_counts_once_with_weight_two(imaginary_quadratic_field, congruent_curve):
    E = congruent_curve.base_extend(imaginary_quadratic_field)
    # The only place is complex; over QQ the geometric bound uses the same branch.
    assert stoll_bound(E) == stoll_bound(congruent_curve, geometric=True)


def test_tower_fails_before_numeric_work(monkeypatch):
    def forbidden(*args, **kwargs):
        raise AssertionError("numeric work started")

    monkeypatch.setattr(field_bound, "StollEmbeddingBound", forbidden)
    x = PolynomialRing(QQ, 'x').gen()
    L = NumberField([x**2 - 2, x**2 - 3], 'a,b')
    E = EllipticCurve(L, [-1, 0])
    with pytest.raises(UnsupportedFieldError):
        stoll_bound(E)


def test_finite_field_curve_is_rejected():
    with pytest.raises(UnsupportedFieldError):
        stoll_bound(EllipticCurve(GF(7), [1, 1]))


def test_precision_failure_propagates_with_place():
    delta = QQ(10)**-20
    E = EllipticCurve(QQ, [0, -(2 + delta), 0, 1 + delta, 0])
    with pytest.raises(PrecisionInsufficientError) as excinfo:
        stoll_bound(E, precision=10)
    assert excinfo.value.place_index == 1


def test_invalid_settings_are_rejected(congruent_curve):
    with pytest.raises(InvalidInputError):
        stoll_bound(congruent_curve, epsilon=-1e-3)
    with pytest.raises(InvalidInputError):
        stoll_bound(congruent_curve, precision=0)
    with pytest.raises(InvalidInputError):
        stoll_bound_ith_embedding(congruent_curve, 2)


def test_progress_bar_does_not_change_the_bound(cubic_field):
    E = EllipticCurve(cubic_field, [0, 0, 0, cubic_field.gen(), 1])
    assert stoll_bound(E, progress=True) == stoll_bound(E)


def test_curve_with_tiny_two_torsion_at_default_precision():
    E = EllipticCurve(QQ, [-QQ(10)**-30, 0])
    assert stoll_bound(E) > 0


def test_bound_with_places_refines_each_place_once(monkeypatch, cubic_field):
    calls = []
    refine = field_bound.StollEmbeddingBound.refine

    def counting_refine(self):
        calls.append(self.place_index)
        return refine(self)

    monkeypatch.setattr(field_bound.StollEmbeddingBound, "refine", counting_refine)
    E = EllipticCurve(cubic_field, [0, 0, 0, cubic_field.gen(), 1])
    bound, per_place = stoll_bound_with_places(E)
    assert calls == [1, 2]
    assert bound == RR(sum(place.weight * local for place, local in per_place) / 3)
