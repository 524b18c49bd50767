"""
__init__.py: Exposes key functions from the submodules.
"""
# Expose core configuration and exceptions
from .bound_config import (
    DEFAULT_EPSILON, DEFAULT_PRECISION, StollBoundConfig, digits_to_bits,
    StollBoundError, UnsupportedFieldError, PrecisionInsufficientError,
    InvariantViolatedError, InvalidInputError
)

# Expose the place ordering
from .places import Place, check_base_field, archimedean_places, place_weights

# Expose main computation functions
from .embedding_bound import StollEmbeddingBound, RefinementResult, embedding_bound
from .field_bound import (
    stoll_bound, stoll_bound_with_places, stoll_bound_ith_embedding, stoll_bounds_per_place
)
