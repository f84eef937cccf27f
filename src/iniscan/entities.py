"""Ini entities are either items (key/value pairs) or sections holding items."""

from typing import overload, Iterator, Self
from dataclasses import dataclass
from .exceptions_warnings import MalformedKeyValue, DuplicateKey, EntityNotFound
from .hashing import HashIndex
from .lines import get_section_name, strip_newline
from .globals import DEFAULT_DELIMITER


def split_key_value(
    line: str, delimiter: str = DEFAULT_DELIMITER
) -> tuple[str, str]:
    """Split a content line at the first delimiter.

    Args:
        line (str): The line holding key and value.
        delimiter (str, optional): The delimiter. Defaults to "=".

    Raises:
        MalformedKeyValue: If the delimiter is missing or the key is empty.

    Returns:
        tuple[str, str]: Key and value, both stripped of surrounding whitespace.
    """
    content = strip_newline(line)
    key, found, value = content.partition(delimiter)
    if not found:
        raise MalformedKeyValue(f"'{content}' has no '{delimiter}' delimiter.")
    if not (key := key.strip()):
        raise MalformedKeyValue(f"'{content}' has an empty key.")
    return key, value.strip()


@dataclass(slots=True)
class Item:
    """A single key/value pair."""

    key: str
    value: str

    @classmethod
    def from_string(cls, string: str, delimiter: str = DEFAULT_DELIMITER) -> Self:
        """Create an Item from a "key = value" line.

        Args:
            string (str): The line.
            delimiter (str, optional): Delimiter between key and value.
                Defaults to "=".

        Returns:
            Self: A new item with the extracted key and value.
        """
        return cls(*split_key_value(string, delimiter))


class ItemList:
    """Ordered collection of Items with unique keys, looked up through a HashIndex."""

    def __init__(self, scope: str | None = None) -> None:
        """
        Args:
            scope (str | None, optional): Name of the owning section for messages.
                None for the global items. Defaults to None.
        """
        self.scope = scope
        self._items: list[Item] = []
        self._index: HashIndex[Item] = HashIndex()

    def add(self, item: Item, replace: bool = False) -> Item:
        """Append an item.

        Args:
            item (Item): The item to add.
            replace (bool, optional): If the key exists already, overwrite its value
                instead of raising. The key keeps its position. Defaults to False.

        Raises:
            DuplicateKey: If the key exists already and replace is False.

        Returns:
            Item: The stored item.
        """
        if item.key in self._index:
            if not replace:
                raise DuplicateKey(
                    f"Key '{item.key}' already exists in {self._scope_name()}."
                )
            stored = self._index.lookup(item.key)
            stored.value = item.value
            return stored
        self._items.append(item)
        self._index.insert(item.key, item)
        return item

    def set(self, key: str, value: str) -> Item:
        return self.add(Item(key, value), replace=True)

    def remove(self, key: str) -> Item:
        try:
            item = self._index.remove(key)
        except KeyError as e:
            raise EntityNotFound(f"'{key}' is no key of {self._scope_name()}.") from e
        self._items.remove(item)
        return item

    def get_item(self, key: str) -> Item:
        try:
            return self._index.lookup(key)
        except KeyError as e:
            raise EntityNotFound(f"'{key}' is no key of {self._scope_name()}.") from e

    @overload
    def get(self, key: str) -> str | None: ...
    @overload
    def get[D](self, key: str, default: D) -> str | D: ...

    def get(self, key, default=None):
        """Get the value of key or default if the key doesn't exist."""
        try:
            return self._index.lookup(key).value
        except KeyError:
            return default

    def __getitem__(self, key: str) -> str:
        return self.get_item(key).value

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def keys(self) -> list[str]:
        return [item.key for item in self._items]

    def to_dict(self) -> dict[str, str]:
        return {item.key: item.value for item in self._items}

    def clear(self) -> None:
        self._items.clear()
        self._index.clear()

    def _scope_name(self) -> str:
        return f"section '{self.scope}'" if self.scope is not None else "global items"

    def __repr__(self) -> str:
        return f"ItemList({self._items!r})"


class SectionName(str):
    """A configuration section's name."""

    @overload
    def __new__(cls, name: str = ..., name_with_brackets: None = ...) -> Self: ...

    @overload
    def __new__(cls, name: None = ..., name_with_brackets: str = ...) -> Self: ...

    def __new__(
        cls, name: str | None = None, name_with_brackets: str | None = None
    ) -> Self:
        """
        Args:
            name (str | None, optional): Name of the section. Should be
                None if name_with_brackets is provided, otherwise name_with_brackets
                will be ignored. Defaults to None.
            name_with_brackets (str | None, optional): The section declaration line
                (to extract the name from). Raises MalformedSection if it isn't one.
                Defaults to None.
        """
        if name is not None:
            return super().__new__(cls, name)
        if name_with_brackets is not None:
            return super().__new__(cls, get_section_name(name_with_brackets))
        raise ValueError(
            "name or name_with_brackets must be provided for"
            " initialization of a SectionName"
        )


class Section:
    """A named, ordered group of Items."""

    def __init__(self, name: str) -> None:
        if not name:
            raise ValueError("Section name must not be empty.")
        self.name = SectionName(name)
        self.items = ItemList(scope=self.name)

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.items.get(key, default)

    def __getitem__(self, key: str) -> str:
        return self.items[key]

    def __contains__(self, key: object) -> bool:
        return key in self.items

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def free(self) -> None:
        """Drop every item of the section."""
        self.items.clear()

    def __repr__(self) -> str:
        return f"Section(name={self.name!r}, items={list(self.items)!r})"
