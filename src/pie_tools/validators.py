"""
Validation functions for attrs.
"""

from typing import Any, Container

from attrs import define

from pie_tools.errors import PIEError

__all__ = ["in_", "range_"]


@define(repr=False, hash=True)
class _RangeValidator:
    minimum: int
    maximum: int
    error: type[PIEError]

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            in_range = self.minimum <= value <= self.maximum
        except TypeError:
            in_range = False

        if not in_range:
            raise self.error(
                "'{name}' must be in range [{minimum}, {maximum}]: {value!r}".format(
                    name=attr.name,
                    minimum=self.minimum,
                    maximum=self.maximum,
                    value=value,
                )
            )

    def __repr__(self) -> str:
        return "<range_ validator with [{minimum!r}, {maximum!r}]>".format(
            minimum=self.minimum, maximum=self.maximum
        )


@define(repr=False, hash=True)
class _InValidator:
    options: Container
    error: type[PIEError]

    def __call__(self, inst: Any, attr: Any, value: Any) -> None:
        try:
            in_options = value in self.options
        except TypeError:
            in_options = False

        if not in_options:
            raise self.error(
                "'{name}' must be in {options!r}: {value!r}".format(
                    name=attr.name, options=self.options, value=value
                )
            )

    def __repr__(self) -> str:
        return "<in_ validator with options {options!r}>".format(options=self.options)


def range_(
    minimum: int, maximum: int, error: type[PIEError] = PIEError
) -> _RangeValidator:
    """
    A validator that raises ``error`` if the initializer is called with a
    value that does not belong in the [minimum, maximum] range. The check is
    performed using ``minimum <= value and value <= maximum``.
    """
    return _RangeValidator(minimum, maximum, error)


def in_(options: Container, error: type[PIEError] = PIEError) -> _InValidator:
    """
    A validator that raises ``error`` if the initializer is called with a
    value that does not belong in ``options``.
    """
    return _InValidator(options, error)
