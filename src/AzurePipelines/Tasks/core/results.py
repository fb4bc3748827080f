# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Result types for Resource Manager operations.

Every public operation returns an :data:`ApiResult`, which is exactly one of:

- :class:`Success`: the operation completed and carries its result payload
- :class:`Failure`: the operation failed and carries an :class:`~AzurePipelines.Tasks.core.errors.ArmError`

Operations never raise past their own boundary; callers branch on the variant
or call :meth:`~ApiResult.unwrap` to get the exception-raising style back.

Example::

    outcome = client.resource_groups.check_existence("my-rg")
    if outcome.is_success:
        print("exists" if outcome.result else "missing")
    else:
        print(outcome.error.to_dict())

    # Or, raising on failure
    exists = client.resource_groups.check_existence("my-rg").unwrap()
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, Tuple, TypeVar, Union

from .errors import ArmError

T = TypeVar("T")


class ApiResult:
    """Common base of :class:`Success` and :class:`Failure`."""

    __slots__ = ()

    @property
    def is_success(self) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class Success(ApiResult, Generic[T]):
    """
    Successful operation outcome.

    :param result: Parsed JSON body, boolean, or ``None`` depending on the operation.
    """

    result: T

    @property
    def is_success(self) -> bool:
        return True

    @property
    def error(self) -> None:
        return None

    def unwrap(self) -> T:
        return self.result

    def as_tuple(self) -> Tuple[None, T]:
        """Return the ``(error, result)`` pair."""
        return None, self.result


@dataclass(frozen=True)
class Failure(ApiResult):
    """
    Failed operation outcome.

    :param error: The structured error describing the failure.
    :type error: :class:`~AzurePipelines.Tasks.core.errors.ArmError`
    """

    error: ArmError

    def __post_init__(self) -> None:
        if not isinstance(self.error, ArmError):
            raise TypeError("Failure.error must be an ArmError")

    @property
    def is_success(self) -> bool:
        return False

    @property
    def result(self) -> None:
        return None

    def unwrap(self) -> NoReturn:
        raise self.error

    def as_tuple(self) -> Tuple[ArmError, None]:
        """Return the ``(error, result)`` pair."""
        return self.error, None


OperationResult = Union[Success[T], Failure]


def _capture(func: Callable[[], T]) -> OperationResult[T]:
    """Run ``func`` and fold any :class:`ArmError` it raises into a :class:`Failure`."""
    try:
        return Success(func())
    except ArmError as e:
        return Failure(e)


__all__ = ["ApiResult", "Success", "Failure", "OperationResult"]
