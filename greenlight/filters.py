"""
Listing filters, sort safelist resolution, and pagination metadata.
"""

from dataclasses import asdict, dataclass, field
from typing import Dict, Tuple

from .errors import ContractViolation
from .validator import Validator, permitted_value

MAX_PAGE = 10_000_000
MAX_PAGE_SIZE = 100


@dataclass
class Filters:
    """Pagination and sorting parameters for one listing request."""

    page: int = 1
    page_size: int = 20
    sort: str = "id"
    sort_safelist: Tuple[str, ...] = field(default_factory=tuple)

    def sort_column(self) -> str:
        """
        Return the column named by sort, without any "-" prefix.

        Raises:
            ContractViolation: If sort is not in the safelist. Callers must
                run validate_filters first, so this never happens for
                user input.
        """
        for safe_value in self.sort_safelist:
            if self.sort == safe_value:
                return self.sort[1:] if self.sort.startswith("-") else self.sort
        raise ContractViolation(f"unsafe sort parameter: {self.sort!r}")

    def sort_direction(self) -> str:
        """Return "DESC" for a "-" prefixed sort, "ASC" otherwise."""
        return "DESC" if self.sort.startswith("-") else "ASC"

    def limit(self) -> int:
        return self.page_size

    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def validate_filters(v: Validator, filters: Filters) -> None:
    """Record any filter errors in the validator."""
    v.check(filters.page > 0, "page", "must be greater than zero")
    v.check(filters.page <= MAX_PAGE, "page", "must be a maximum of 10 million")
    v.check(filters.page_size > 0, "page_size", "must be greater than zero")
    v.check(filters.page_size <= MAX_PAGE_SIZE, "page_size", "must be a maximum of 100")

    v.check(
        permitted_value(filters.sort, *filters.sort_safelist),
        "sort",
        "invalid sort value",
    )


@dataclass(frozen=True)
class Metadata:
    """Pagination summary for a listing result."""

    current_page: int = 0
    page_size: int = 0
    first_page: int = 0
    last_page: int = 0
    total_records: int = 0

    def to_dict(self) -> Dict[str, int]:
        """Wire form; an empty result serializes as {}."""
        if self.total_records == 0:
            return {}
        return asdict(self)


def calculate_metadata(total_records: int, page: int, page_size: int) -> Metadata:
    """
    Build pagination metadata.

    total_records must be the count observed by the same query that produced
    the page of rows.
    """
    if total_records == 0:
        return Metadata()

    return Metadata(
        current_page=page,
        page_size=page_size,
        first_page=1,
        last_page=(total_records + page_size - 1) // page_size,
        total_records=total_records,
    )
