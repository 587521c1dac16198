"""
Ordered category list editing.

Every function returns a new list; the input is never modified.
"""

from typing import List


def add_category(categories: List[str], name: str) -> List[str]:
    """Append name to the end of categories.

    Raises:
        ValueError: If name is blank or already present
    """
    name = name.strip()
    if not name:
        raise ValueError("Please enter a category name")
    if name in categories:
        raise ValueError("Category already exists")
    return categories + [name]


def remove_category(categories: List[str], name: str) -> List[str]:
    """Drop name from categories.

    Raises:
        ValueError: If name is not present
    """
    if name not in categories:
        raise ValueError(f"Category '{name}' not found")
    return [c for c in categories if c != name]


def move_category(categories: List[str], name: str, up: bool = True) -> List[str]:
    """Swap name with its neighbour above (up) or below.

    Moving the first category up or the last one down leaves the order as is.

    Raises:
        ValueError: If name is not present
    """
    if name not in categories:
        raise ValueError(f"Category '{name}' not found")
    index = categories.index(name)
    target = index - 1 if up else index + 1
    if target < 0 or target >= len(categories):
        return list(categories)
    moved = list(categories)
    moved[index], moved[target] = moved[target], moved[index]
    return moved
