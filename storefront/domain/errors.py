# storefront/domain/errors.py
"""
Bledy domenowe.

Dziedzicza po wbudowanych wyjatkach, ktore routery juz tlumacza na HTTP:
ValueError -> 400, LookupError -> 404, RuntimeError -> 409 / 503.
"""


class OrderValidationError(ValueError):
    """Niepoprawne dane zamowienia, zgloszone przed jakimkolwiek zapisem."""

    def __init__(self, errors: dict[str, str]):
        self.errors = errors
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))


class InvalidDiscountCode(ValueError):
    pass


class InvalidCartSelection(ValueError):
    """Zly wybor koloru/rozmiaru przy dodawaniu produktu do koszyka."""


class NotFound(LookupError):
    pass


class OrderNotFound(NotFound):
    pass


class ProductNotFound(NotFound):
    pass


class CategoryNotFound(NotFound):
    pass


class CartLineNotFound(NotFound):
    pass


class SubmissionInProgress(RuntimeError):
    """Dla tej sesji koszyka trwa juz inne skladanie zamowienia."""


class OrderPersistenceError(RuntimeError):
    """Zapis zamowienia sie nie udal, koszyk zostaje nietkniety."""
