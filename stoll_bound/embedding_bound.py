"""
Archimedean local bound at a single place via the two-torsion subgroup.

Computes an upper bound for the archimedean part of the difference between
the naive and the canonical height at one embedding of the base field, using
the representation theory of E[2] and Stoll's refinement by a contracting map.

Key insight: write the squares of the x-coordinate forms (x1, x2) as
non-negative combinations of quadratic forms y_j, and the squares of the y_j
as combinations of the quartic duplication forms (delta_1, delta_2). This
gives a map phi on bounds for (delta_1, delta_2) whose n-fold iterate yields
the bound (4^n / (4^n - 1)) * log max|phi^n(1, 1)|, decreasing in n.
"""
from typing import NamedTuple

from sage.all import ComplexField, RealField, PolynomialRing, matrix

from .bound_config import (
    StollBoundConfig, vprint, ROOT_SEPARATION_BITS, ROUNDING_SLACK_BITS,
    PrecisionInsufficientError, InvariantViolatedError, InvalidInputError
)


class RefinementResult(NamedTuple):
    bound: object       # final bound, RealField(bits)
    iterations: int     # number of refinement steps after the unrefined bound
    bounds: list        # the whole bound sequence, unrefined bound first
    roots: tuple        # (r1, r2, r3), x-coordinates of the 2-torsion points


class StollEmbeddingBound:
    """
    Refined archimedean bound for E at one place.

    Usage:
        computer = StollEmbeddingBound(b2, b4, b6, is_real=True, config=config)
        result = computer.refine()
    """

    def __init__(self, b2, b4, b6, is_real, config=None, place_index=None):
        """
        Args:
            b2, b4, b6: b-invariants of E already mapped into RR or CC by the place
            is_real: whether the place is real
            config: StollBoundConfig (defaults if None)
            place_index: only used to give errors and traces context
        """
        self.config = (config or StollBoundConfig()).validate()
        self.bits = self.config.bits
        self.RF = RealField(self.bits)
        self.CF = ComplexField(self.bits)

        self.b2 = self.CF(b2)
        self.b4 = self.CF(b4)
        self.b6 = self.CF(b6)
        self.is_real = bool(is_real)
        self.place_index = place_index

        self.roots = self.two_torsion_roots()
        self.a_matrix = self._build_a_matrix()
        self.b_matrix = self._build_b_matrix()

    def _trace(self, level, message):
        vprint(self.config, level, message)

    def two_torsion_roots(self):
        """
        Roots of x^3 + b2/4 x^2 + b4/2 x + b6/4 over ComplexField(bits).

        Numerically found roots closer than the precision can separate are
        counted as one multiple root.
        """
        R = PolynomialRing(self.CF, 'x')
        f = R([self.b6 / 4, self.b4 / 2, self.b2 / 4, 1])

        found = []
        for rt, mult in f.roots():
            found.extend([rt] * mult)

        rel_tol = self.RF(2) ** (ROOT_SEPARATION_BITS - self.bits // 2)

        resolved = []
        for rt in found:
            if all(abs(rt - other) > rel_tol * max(abs(rt), abs(other)) for other in resolved):
                resolved.append(rt)

        if len(resolved) != 3:
            raise PrecisionInsufficientError(
                f"Found {len(resolved)} distinct two-torsion roots instead of 3 at "
                f"precision {self.config.precision}; increase the precision",
                place_index=self.place_index)
        return tuple(resolved)

    def _build_a_matrix(self):
        # Squares of x1, x2 as non-negative combinations of the quadratic forms y_j(x1, x2).
        r1, r2, r3 = self.roots
        b4 = self.b4
        a = matrix(self.RF, 2, 3)
        a[0, 0] = abs((2*r2*r3 - b4/2) / (2*(r1 - r2)*(r1 - r3)))
        a[0, 1] = abs((2*r1*r3 - b4/2) / (2*(r2 - r1)*(r2 - r3)))
        a[0, 2] = abs((2*r1*r2 - b4/2) / (2*(r3 - r1)*(r3 - r2)))
        a[1, 0] = abs(-1 / (2*(r1 - r2)*(r1 - r3)))
        a[1, 1] = abs(-1 / (2*(r2 - r1)*(r2 - r3)))
        a[1, 2] = abs(-1 / (2*(r3 - r1)*(r3 - r2)))
        self._trace(3, f"a_matrix = \n{a}")
        return a

    def _build_b_matrix(self):
        # Squares of the y_j as combinations of the duplication forms delta_1, delta_2.
        b = matrix(self.CF, 3, 2)
        for k, rt in enumerate(self.roots):
            b[k, 0] = 1
            b[k, 1] = -rt
        self._trace(3, f"b_matrix = \n{b}")
        return b

    def phi(self, ds):
        """One step of the contracting map on bounds for (delta_1, delta_2)."""
        d1, d2 = ds
        if d1 < 0 or d2 < 0:
            raise InvalidInputError(
                f"phi needs non-negative arguments, got ({d1}, {d2})",
                place_index=self.place_index)

        b = self.b_matrix
        if not self.is_real or self.config.geometric:
            y_bound = [(abs(b[k, 0])*d1 + abs(b[k, 1])*d2).sqrt() for k in range(3)]
        else:
            # delta_j(x) is real here even though b_kj need not be.
            y_bound = [max(abs(b[k, 0]*d1 + b[k, 1]*d2),
                           abs(b[k, 0]*d1 - b[k, 1]*d2)).sqrt() for k in range(3)]

        a = self.a_matrix
        return (sum(a[0, j]*y_bound[j] for j in range(3)).sqrt(),
                sum(a[1, j]*y_bound[j] for j in range(3)).sqrt())

    def _bound_from_iterate(self, vn, n):
        four_n = self.RF(4) ** n
        return four_n / (four_n - 1) * max(abs(v) for v in vn).log()

    def refine(self):
        """
        Iterate phi from (1, 1) until successive bounds differ by less than epsilon.

        Returns:
            RefinementResult
        """
        eps = self.config.epsilon
        slack = self.RF(2) ** (ROUNDING_SLACK_BITS - self.bits)
        self._trace(1, f"Starting computation for place {self.place_index}.")

        vn = self.phi((self.RF(1), self.RF(1)))
        self._trace(3, f"phi(1,1) = {vn}.")
        # First bound, from bounding Phi via the geometric series.
        bound = self._bound_from_iterate(vn, 1)
        bounds = [bound]
        self._trace(1, f"Unrefined bound = {bound}.")

        n = 1
        while True:
            old_bound = bound
            vn = self.phi(vn)
            n += 1
            self._trace(3, f"phi^{n}(1,1) = {vn}.")
            bound = self._bound_from_iterate(vn, n)
            bounds.append(bound)
            self._trace(2, f"New bound = {bound}.")
            # The exact sequence is non-increasing; allow only rounding noise.
            if bound - old_bound > slack * max(1, abs(old_bound)):
                raise InvariantViolatedError(
                    f"Refined bound {bound} exceeds previous bound {old_bound}; "
                    f"increase the precision",
                    place_index=self.place_index, iteration=n - 1)
            if old_bound - bound < eps:
                break

        self._trace(2, f"Used {n - 1} iterations for refinement.")
        self._trace(1, f"Refined bound = {bound}.")
        return RefinementResult(bound, n - 1, bounds, self.roots)


def embedding_bound(b2, b4, b6, is_real, config=None, place_index=None):
    """Refined bound at one place given its conjugated b-invariants."""
    return StollEmbeddingBound(b2, b4, b6, is_real, config, place_index).refine().bound
