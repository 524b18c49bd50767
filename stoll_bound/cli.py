"""
cli.py: Command line entry point, `python -m stoll_bound`.

Examples:
    python -m stoll_bound "[0,0,0,-1,0]"
    python -m stoll_bound "[0,0,0,a,1]" --field "x^2-2" --per-place -vv
"""
import argparse

from colorama import Fore, Style
from sage.all import QQ, NumberField, PolynomialRing, EllipticCurve, sage_eval

from .bound_config import (
    DEFAULT_EPSILON, DEFAULT_PRECISION, StollBoundConfig,
    StollBoundError, PrecisionInsufficientError
)
from .field_bound import stoll_bound_with_places


def build_parser():
    parser = argparse.ArgumentParser(
        prog="stoll_bound",
        description="Upper bound for the archimedean part of h - hhat on an elliptic curve.")
    parser.add_argument("ainvs", help='a-invariants, e.g. "[0,0,0,-1,0]"; may use the field generator a')
    parser.add_argument("--field", default=None,
                        help='defining polynomial in x of the base field (default QQ), e.g. "x^2-2"')
    parser.add_argument("--epsilon", type=float, default=DEFAULT_EPSILON)
    parser.add_argument("--precision", type=int, default=DEFAULT_PRECISION,
                        help="working precision in decimal digits")
    parser.add_argument("--geometric", action="store_true",
                        help="bound valid over the complex points at real places")
    parser.add_argument("--per-place", action="store_true", help="also print each local bound")
    parser.add_argument("-v", "--verbose", action="count", default=0)
    parser.add_argument("--progress", action="store_true")
    return parser


def build_curve(ainvs, field=None):
    """Parse the a-invariants (and optional field polynomial) into an EllipticCurve."""
    if field is None:
        K = QQ
        names = {}
    else:
        R = PolynomialRing(QQ, 'x')
        K = NumberField(R(sage_eval(field, locals={'x': R.gen()})), 'a')
        names = {'a': K.gen()}
    coeffs = sage_eval(ainvs, locals=names)
    return EllipticCurve(K, [K(c) for c in coeffs])


def main(argv=None):
    args = build_parser().parse_args(argv)
    config = StollBoundConfig(epsilon=args.epsilon, precision=args.precision,
                              geometric=args.geometric, verbose=args.verbose,
                              progress=args.progress)
    try:
        E = build_curve(args.ainvs, args.field)
    except (ArithmeticError, SyntaxError, NameError, TypeError, ValueError) as e:
        print(f"{Fore.RED}Error: could not build the curve from {args.ainvs!r}: {e}{Style.RESET_ALL}")
        return 1
    print(f"{Fore.CYAN}{E}{Style.RESET_ALL}")

    try:
        bound, per_place = stoll_bound_with_places(E, config)
    except PrecisionInsufficientError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        print(f"{Fore.YELLOW}Retry with a larger --precision (currently {args.precision}).{Style.RESET_ALL}")
        return 1
    except StollBoundError as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}")
        return 1

    if args.per_place:
        for place, local in per_place:
            kind = "real" if place.is_real else "complex"
            print(f"  place {place.index} ({kind}, weight {place.weight}): {local}")
    print(f"{Fore.GREEN}Stoll bound: {bound}{Style.RESET_ALL}")
    return 0
