"""Result types for railway-oriented programming.

Adapters, repositories and services return a Result instead of raising, so
every failure mode of a provider call or a resolution step is visible in the
signature and testable without exception plumbing.

Usage:
    async def get_file(...) -> Result[StorageFile, ProviderError]:
        if response.status_code == 404:
            return Failure(error=StorageFileNotFoundError(...))
        return Success(value=file)

    match await adapter.get_file(token, file_id):
        case Success(value=file):
            print(file.name)
        case Failure(error=error):
            print(error.message)
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Represents a successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Represents a failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


type Result[T, E] = Success[T] | Failure[E]
