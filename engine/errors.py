"""Domain errors raised by the catalog loader and the comparison engine.

All of them subclass ``ValueError`` so the API's ``ValueError`` handler turns
them into 400 responses. Lookup misses are not errors: catalog getters return
``None`` and the HTTP layer decides on a 404.
"""


class ComparisonError(ValueError):
    """Base class for comparison engine failures."""


class InvalidUnitCostError(ComparisonError):
    """A comparison unit has a cost per unit that is zero, negative or not finite."""

    def __init__(self, unit_id: str, cost) -> None:
        self.unit_id = unit_id
        self.cost = cost
        super().__init__(
            f"Unit {unit_id!r} has invalid cost per unit {cost!r}; "
            "cost must be a finite number greater than zero"
        )


class CatalogError(ComparisonError):
    """A catalog table holds a malformed or duplicate record."""
