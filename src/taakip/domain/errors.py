"""Recoverable domain errors surfaced to the user as validation messages."""


class TaakipError(Exception):
    """Base class for domain errors."""


class InvalidPortion(TaakipError):
    """Portion amount is not a positive number or the unit is unsupported."""


class IncompleteProfile(TaakipError):
    """Profile lacks a field required by the energy budget calculation."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(
            "Profile is missing required information for calculation: "
            + ", ".join(missing)
        )


class FoodNotFound(TaakipError):
    """Food lookup had no product for the barcode."""

    def __init__(self, barcode: str) -> None:
        self.barcode = barcode
        super().__init__(f"No product found for barcode {barcode}")


class ProfileNotFound(TaakipError):
    """No profile row exists for the user."""


class ReadOnlyField(TaakipError):
    """An update tried to write a derived field."""
