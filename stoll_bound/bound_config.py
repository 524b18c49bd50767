"""
bound_config.py: Central config for the stoll_bound package.

Defines the default run constants, the per-call configuration value,
the diagnostic printer and the exception classes.
"""

# === 1. Standard library imports ===
import math
from typing import NamedTuple

# === 2. Global Defaults ===
DEBUG = False

DEFAULT_EPSILON = 1e-3     # stop refining once successive bounds differ by less than this
DEFAULT_PRECISION = 30     # working precision in decimal digits
TRACE_PREFIX = "[stoll]"
ROOT_SEPARATION_BITS = 8   # two roots closer than 2^(8 - bits/2) times the larger of them count as one
ROUNDING_SLACK_BITS = 16    # tolerated increase of a refined bound, in units of 2^-bits


# === 3. Custom Exception Classes ===
class StollBoundError(Exception):
    """Base exception for errors in the bound computation."""

    def __init__(self, message, place_index=None, iteration=None):
        super().__init__(message)
        self.message = message
        self.place_index = place_index
        self.iteration = iteration

    def __str__(self):
        context = []
        if self.place_index is not None:
            context.append(f"place {self.place_index}")
        if self.iteration is not None:
            context.append(f"iteration {self.iteration}")
        if context:
            return f"{self.message} ({', '.join(context)})"
        return self.message


class UnsupportedFieldError(StollBoundError):
    """Raised when the base field is not QQ or an absolute number field."""
    pass


class PrecisionInsufficientError(StollBoundError):
    """Raised when the two-torsion cubic does not have 3 resolved roots."""
    pass


class InvariantViolatedError(StollBoundError):
    """Raised when a refined bound is weaker than the previous one."""
    pass


class InvalidInputError(StollBoundError, ValueError):
    """Raised on bad configuration or a negative input to the contraction map."""
    pass


# === 4. Precision helpers ===
def digits_to_bits(digits):
    """Number of bits needed for `digits` decimal digits of precision."""
    if isinstance(digits, bool) or int(digits) != digits or digits <= 0:
        raise InvalidInputError(f"precision must be a positive integer, got {digits!r}")
    return int(math.ceil(int(digits) * math.log2(10)))


# === 5. Run configuration ===
class StollBoundConfig(NamedTuple):
    """
    Settings for one bound computation.

    epsilon:   refinement stops once successive bounds differ by less than this.
    precision: working precision in decimal digits. Higher precision costs
               proportionally more in the underlying multiprecision arithmetic.
    geometric: for real places, compute a bound valid for all complex points.
    verbose:   diagnostic level 0-3 (see vprint).
    trace:     optional callable receiving diagnostic lines instead of print.
    progress:  show a tqdm progress bar over the archimedean places.
    """
    epsilon: float = DEFAULT_EPSILON
    precision: int = DEFAULT_PRECISION
    geometric: bool = False
    verbose: int = 0
    trace: object = None
    progress: bool = False

    @property
    def bits(self):
        return digits_to_bits(self.precision)

    def validate(self):
        if not self.epsilon > 0:
            raise InvalidInputError(f"epsilon must be positive, got {self.epsilon!r}")
        digits_to_bits(self.precision)
        if self.verbose < 0:
            raise InvalidInputError(f"verbose must be non-negative, got {self.verbose!r}")
        return self


def vprint(config, level, message):
    """Emit a diagnostic line when config.verbose >= level."""
    verbose = max(config.verbose, 1 if DEBUG else 0)
    if verbose < level:
        return
    line = f"{TRACE_PREFIX} {message}"
    if config.trace is not None:
        config.trace(line)
    else:
        print(line)
