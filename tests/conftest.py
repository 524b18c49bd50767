import pytest
from sage.all import QQ, NumberField, PolynomialRing, EllipticCurve

from stoll_bound import StollBoundConfig


@pytest.fixture
def config():
    return StollBoundConfig()


@pytest.fixture
def congruent_curve():
    # y^2 = x^3 - x, full rational two-torsion with x-coordinates -1, 0, 1
    return EllipticCurve(QQ, [-1, 0])


@pytest.fixture
def curve_11a1():
    return EllipticCurve(QQ, [0, -1, 1, -10, -20])


@pytest.fixture
def cubic_field():
    # signature (1, 1)
    x = PolynomialRing(QQ, 'x').gen()
    return NumberField(x**3 - 2, 'a')


@pytest.fixture
def imaginary_quadratic_field():
    x = PolynomialRing(QQ, 'x').gen()
    return NumberField(x**2 + 1, 'i')
