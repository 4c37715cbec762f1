"""
Exceptions raised by the instance selection algorithms and filters.
"""


class NotEnoughInstancesException(Exception):
    """
    Raised when an algorithm is reset with a training set that has no rows.
    """

    MESSAGE = "There are not enough instances"

    def __init__(self, message: str = MESSAGE):
        super().__init__(message)


class UnsupportedClassError(ValueError):
    """
    Raised when a filter receives a dataset whose class attribute has the
    wrong type (e.g. a numeric class for a classification filter).
    """
