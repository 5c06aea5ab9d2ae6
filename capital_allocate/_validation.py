"""Field coercion and invariant checks shared by the value types."""

from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, InvalidOperation, localcontext
from typing import Any

ZERO = Decimal(0)


class InvalidInputError(ValueError):
    """Raised when a query, project, or result violates its invariants."""


def exact_context():
    """Return a context manager in which Decimal sums are never rounded."""
    return localcontext(Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN))


def to_decimal(value: Any, message: str) -> Decimal:
    """Coerce a numeric value to :class:`~decimal.Decimal`.

    Floats go through their shortest ``repr`` so that ``0.1`` becomes
    ``Decimal("0.1")`` rather than its binary expansion.

    Parameters
    ----------
    value : Any
        ``Decimal``, ``int``, ``float`` or numeric ``str``.
    message : str
        Error message used if the value cannot be converted.

    Returns
    -------
    Decimal

    Raises
    ------
    InvalidInputError
        If the value is ``None``, a ``bool``, non-numeric, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        raise InvalidInputError(message)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidInputError(message) from None
    else:
        raise InvalidInputError(message)
    if not result.is_finite():
        raise InvalidInputError(message)
    return result


def require_non_negative_decimal(value: Any, message: str) -> Decimal:
    """Coerce ``value`` to ``Decimal`` and reject negatives."""
    result = to_decimal(value, message)
    if result < ZERO:
        raise InvalidInputError(message)
    return result


def require_non_blank(value: Any, message: str) -> str:
    """Return ``value`` if it is a string with at least one non-space character."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidInputError(message)
    return value


def require_non_negative_int(value: Any, message: str) -> int:
    """Return ``value`` if it is a non-negative ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidInputError(message)
    return value


def require_no_none_elements(values: Any, message: str) -> tuple:
    """Materialize ``values`` into a tuple, rejecting ``None`` and ``None`` elements.

    Strings and mappings are rejected even though they are iterable.
    """
    if values is None or isinstance(values, (str, bytes, dict)):
        raise InvalidInputError(message)
    try:
        items = tuple(values)
    except TypeError:
        raise InvalidInputError(message) from None
    if any(item is None for item in items):
        raise InvalidInputError(message)
    return items
