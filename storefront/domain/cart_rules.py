# storefront/domain/cart_rules.py
"""
Reguly koszyka niezalezne od magazynu.

Klucz pozycji to (product_id, color, size). Dodanie istniejacego klucza
zwieksza ilosc, ilosc nigdy nie spada ponizej 1 (usuwanie to osobna akcja).
Funkcje zwracaja nowe listy, wejscie nie jest modyfikowane.
"""
from typing import List

from storefront.domain.errors import CartLineNotFound
from storefront.domain.schemas import CartKey, CartLine

MIN_QUANTITY = 1


def line_key(line: CartLine) -> CartKey:
    return line.key


def clamp_quantity(quantity: int) -> int:
    return max(MIN_QUANTITY, quantity)


def merge_line(lines: List[CartLine], new_line: CartLine) -> List[CartLine]:
    merged = []
    found = False

    for line in lines:
        if line_key(line) == line_key(new_line):
            merged.append(line.model_copy(update={"quantity": line.quantity + new_line.quantity}))
            found = True
        else:
            merged.append(line)

    if not found:
        merged.append(new_line)

    return merged


def apply_quantity_delta(lines: List[CartLine], key: CartKey, delta: int) -> List[CartLine]:
    if not any(line_key(line) == key for line in lines):
        raise CartLineNotFound(f"Brak pozycji {key} w koszyku")

    return [
        line.model_copy(update={"quantity": clamp_quantity(line.quantity + delta)})
        if line_key(line) == key
        else line
        for line in lines
    ]


def remove_line(lines: List[CartLine], key: CartKey) -> List[CartLine]:
    return [line for line in lines if line_key(line) != key]
