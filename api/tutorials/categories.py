"""
Category codes.

Tutorials store a category as a small integer carried as a string. The
catalog resolves a code to either a known `Category` or an explicit
`UnknownCategory`, never to a silent string fallback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class Category:
    id: int
    category: str

    @property
    def code(self) -> str:
        return str(self.id)

    @property
    def label(self) -> str:
        return self.category


@dataclass(frozen=True)
class UnknownCategory:
    code: str

    @property
    def label(self) -> str:
        return f"Unknown ({self.code})"


CategoryRef = Union[Category, UnknownCategory]


def normalize_code(value: object) -> str | None:
    """
    Coerce a category code (int or string) to its stored string form.
    """
    if value is None or isinstance(value, bool):
        return None
    code = str(value).strip()
    return code or None


class CategoryCatalog:
    def __init__(self, categories: Iterable[dict | Category]):
        items: list[Category] = []
        for item in categories:
            if isinstance(item, Category):
                items.append(item)
            else:
                items.append(Category(id=int(item["id"]), category=str(item["category"])))
        self._items = tuple(items)
        self._by_code = {c.code: c for c in self._items}

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def as_list(self) -> list[dict]:
        return [{"id": c.id, "category": c.category} for c in self._items]

    def resolve(self, code: object) -> CategoryRef | None:
        normalized = normalize_code(code)
        if normalized is None:
            return None
        found = self._by_code.get(normalized)
        if found is None:
            # "01" and 1 refer to the same category.
            try:
                found = self._by_code.get(str(int(normalized)))
            except ValueError:
                found = None
        return found if found is not None else UnknownCategory(code=normalized)

    def is_known(self, code: object) -> bool:
        return isinstance(self.resolve(code), Category)

    def label(self, code: object) -> str | None:
        ref = self.resolve(code)
        return ref.label if ref is not None else None

    def find_by_label(self, label: str) -> Category | None:
        for item in self._items:
            if item.category == label:
                return item
        return None
