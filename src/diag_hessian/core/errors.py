class DiagonalOperatorError(Exception):
    """Base class for errors raised by the diagonal quasi-Newton operators."""


class DegenerateStepError(DiagonalOperatorError, ZeroDivisionError):
    """
    The step/secant pair carries no usable curvature information.

    Raised when a denominator of an update formula is exactly zero (or the
    update would produce non-finite entries). The operator is left untouched.

    Attributes:
        quantity (str): Name of the offending quantity, e.g. ``"trA2"``.
        value (float): Its value.
    """

    def __init__(self, quantity, value=0.0, message=None):
        self.quantity = quantity
        self.value = value
        if message is None:
            message = f"Cannot divide by zero and {quantity} = {value}"
        super().__init__(message)


class DimensionMismatchError(DiagonalOperatorError, ValueError):
    def __init__(self, expected, got, name="v"):
        self.expected = expected
        self.got = got
        self.name = name
        super().__init__(f"dimension mismatch: {name} has length {got}, operator has dimension {expected}")
