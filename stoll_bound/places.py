"""
places.py: Archimedean places of the base field.

Fixes the ordering convention used to index places: indices 1..r are the
real embeddings, r+1..r+s one embedding out of each pair of complex
conjugate embeddings. Complex places carry weight 2 because an embedding
and its conjugate contribute the same local bound.
"""
from typing import NamedTuple

from sage.all import QQ
from sage.rings.number_field.number_field_base import NumberField

from .bound_config import UnsupportedFieldError, InvalidInputError


class Place(NamedTuple):
    index: int          # 1-based
    embedding: object   # ring homomorphism K -> RealField(bits) / ComplexField(bits)
    is_real: bool
    weight: int


def check_base_field(K):
    """Accept QQ or an absolute number field, nothing else."""
    if K is QQ or K == QQ:
        return K
    if not isinstance(K, NumberField):
        raise UnsupportedFieldError(
            f"The curve must be defined over the rationals or a number field, not {K}.")
    if not K.is_absolute():
        raise UnsupportedFieldError(
            f"The curve must be defined over an absolute extension of the rationals, not {K}.")
    return K


def place_weights(K):
    """Weights [1]*r + [2]*s indexed like archimedean_places."""
    r, s = K.signature()
    return [1] * r + [2] * s


def archimedean_places(K, bits):
    """
    All archimedean places of K at `bits` bits of precision, real places first.
    """
    r, s = K.signature()
    embeddings = list(K.places(prec=bits))
    if len(embeddings) != r + s:
        raise UnsupportedFieldError(
            f"Expected {r + s} archimedean places for signature ({r}, {s}), got {len(embeddings)}.")

    places = []
    for i, emb in enumerate(embeddings, start=1):
        is_real = i <= r
        places.append(Place(i, emb, is_real, 1 if is_real else 2))
    return places


def place_by_index(K, i, bits):
    r, s = K.signature()
    if not 1 <= i <= r + s:
        raise InvalidInputError(f"Place index must lie in [1, {r + s}], got {i}.")
    return archimedean_places(K, bits)[i - 1]


def conjugate_b_invariants(E, place):
    """(b2, b4, b6) of E mapped into RR/CC by the given place."""
    b2, b4, b6 = E.b_invariants()[:3]
    phi = place.embedding
    return phi(b2), phi(b4), phi(b6)
