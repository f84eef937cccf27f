"""Key hashing and the chained hash table built on it."""

from typing import Iterator
from .globals import HASH_MULTIPLIER, HASH_SEED, HASH_SIZE


def ini_hash(string: str) -> int:
    """Polynomial rolling hash of a key.

    Starts at 1 and folds every byte of the UTF-8 encoded string in with
    ``value = byte + 179 * value``. The result is taken modulo 8675309, so
    ``ini_hash("a") == 276`` and ``ini_hash("ab") == 49502``.

    Args:
        string (str): The string to hash.

    Returns:
        int: Hash in ``range(8675309)``.
    """
    value = HASH_SEED
    for byte in string.encode("utf-8"):
        # reducing each step yields the same remainder as reducing once at the end
        value = (byte + HASH_MULTIPLIER * value) % HASH_SIZE
    return value


class HashIndex[V]:
    """Hash table with separate chaining over ini_hash.

    Each bucket is a list of ``(hash, key, value)`` entries. The table doubles
    once more than three quarters of its buckets' worth of entries are stored.
    """

    _INITIAL_BUCKETS = 8
    _MAX_LOAD = 0.75

    def __init__(self) -> None:
        self._buckets: list[list[tuple[int, str, V]]] = [
            [] for _ in range(self._INITIAL_BUCKETS)
        ]
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._find(key)[1] is not None

    def __iter__(self) -> Iterator[str]:
        for bucket in self._buckets:
            for _, key, _ in bucket:
                yield key

    def _bucket(self, key_hash: int) -> list[tuple[int, str, V]]:
        return self._buckets[key_hash % len(self._buckets)]

    def _find(self, key: str) -> tuple[list[tuple[int, str, V]], int | None]:
        key_hash = ini_hash(key)
        bucket = self._bucket(key_hash)
        for position, (entry_hash, entry_key, _) in enumerate(bucket):
            if entry_hash == key_hash and entry_key == key:
                return bucket, position
        return bucket, None

    def insert(self, key: str, value: V) -> None:
        """Insert or replace the value stored for key."""
        bucket, position = self._find(key)
        if position is not None:
            bucket[position] = (bucket[position][0], key, value)
            return
        bucket.append((ini_hash(key), key, value))
        self._size += 1
        if self._size > len(self._buckets) * self._MAX_LOAD:
            self._grow()

    def lookup(self, key: str) -> V:
        """Get the value stored for key.

        Raises:
            KeyError: If key is not stored.
        """
        bucket, position = self._find(key)
        if position is None:
            raise KeyError(key)
        return bucket[position][2]

    def remove(self, key: str) -> V:
        """Remove key and return its value.

        Raises:
            KeyError: If key is not stored.
        """
        bucket, position = self._find(key)
        if position is None:
            raise KeyError(key)
        self._size -= 1
        return bucket.pop(position)[2]

    def clear(self) -> None:
        self._buckets = [[] for _ in range(self._INITIAL_BUCKETS)]
        self._size = 0

    def _grow(self) -> None:
        entries = [entry for bucket in self._buckets for entry in bucket]
        self._buckets = [[] for _ in range(len(self._buckets) * 2)]
        for entry in entries:
            self._bucket(entry[0]).append(entry)
