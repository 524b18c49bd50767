"""
field_bound.py: Combine the local archimedean bounds into one bound for E/K.
"""
from tqdm import tqdm
from sage.all import RR

from .bound_config import StollBoundConfig, vprint
from .places import (
    check_base_field, archimedean_places, place_by_index, conjugate_b_invariants
)
from .embedding_bound import StollEmbeddingBound


def _resolve_config(config, overrides):
    config = config or StollBoundConfig()
    if overrides:
        config = config._replace(**overrides)
    return config.validate()


def _bound_at_place(E, place, config):
    b2, b4, b6 = conjugate_b_invariants(E, place)
    computer = StollEmbeddingBound(b2, b4, b6, place.is_real, config, place_index=place.index)
    return computer.refine().bound


def stoll_bound_ith_embedding(E, i, config=None, **overrides):
    """
    Bound at the i-th archimedean place of the base field of E
    (1..r real places, then r+1..r+s complex places), at working precision.
    """
    config = _resolve_config(config, overrides)
    K = check_base_field(E.base_field())
    return _bound_at_place(E, place_by_index(K, i, config.bits), config)


def stoll_bounds_per_place(E, config=None, **overrides):
    """List of (Place, bound) for every archimedean place of the base field."""
    config = _resolve_config(config, overrides)
    K = check_base_field(E.base_field())
    places = archimedean_places(K, config.bits)

    results = []
    for place in tqdm(places, desc="Archimedean places", disable=not config.progress):
        results.append((place, _bound_at_place(E, place, config)))
    return results


def stoll_bound(E, config=None, **overrides):
    """
    Upper bound for the archimedean contribution to h(P) - hhat(P) for E over
    QQ or an absolute number field K.

    The bound is computed using the representation theory of the two-torsion
    subgroup of E, refined using a contracting map, and averaged over the
    archimedean places of K weighted by local degree.

    Args:
        E: elliptic curve over QQ or an absolute number field
        config: StollBoundConfig; keyword overrides (epsilon, precision,
            geometric, verbose, trace, progress) replace its fields

    Returns:
        RR element: sum_v n_v * bound_v / [K:QQ]
    """
    return stoll_bound_with_places(E, config, **overrides)[0]


def stoll_bound_with_places(E, config=None, **overrides):
    """The field bound of stoll_bound together with the list of (Place, bound) it averages."""
    config = _resolve_config(config, overrides)
    K = check_base_field(E.base_field())

    per_place = stoll_bounds_per_place(E, config)
    total = sum(place.weight * bound for place, bound in per_place)
    result = RR(total / K.degree())
    vprint(config, 1, f"Bound over {K} from {len(per_place)} place(s) = {result}.")
    return result, per_place
