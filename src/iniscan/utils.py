from collections import OrderedDict as OD
from typing import TypeVar, Generic, overload, Callable
from itertools import islice


def copy_doc[
    **P, T
](doc_source: Callable[P, T], annotations: bool = False) -> Callable[
    [Callable[P, T]], Callable[P, T]
]:
    """Decorator to copy the docstring of doc_source to another.

    Args:
        doc_source (Callable): The source function to copy the docstring from.
        annotations (bool, optional): Whether to also copy annotations. Defaults to False.

    Returns:
        Callable: The decorated function.
    """

    def wrapped(doc_target: Callable[P, T]) -> Callable[P, T]:
        doc_target.__doc__ = doc_source.__doc__
        if annotations:
            doc_target.__annotations__ = doc_source.__annotations__
        return doc_target

    return wrapped


### Ordered Dict with ILoc functionality

_KT = TypeVar("_KT")
_VT = TypeVar("_VT")


class OrderedDict(OD[_KT, _VT]):
    """OrderedDict with iLoc functionality."""

    def __init__(self, *args, **kwargs) -> None:
        self.iloc: _iLocIndexer[_KT, _VT] = _iLocIndexer(self)
        super().__init__(*args, **kwargs)


class _iLocIndexer(Generic[_KT, _VT]):

    def __init__(self, target: OrderedDict[_KT, _VT]) -> None:
        self.target = target

    @overload
    def __getitem__(self, key: int) -> tuple[_KT, _VT]: ...

    @overload
    def __getitem__(self, key: slice) -> list[tuple[_KT, _VT]]: ...

    def __getitem__(
        self, key: int | slice
    ) -> list[tuple[_KT, _VT]] | tuple[_KT, _VT]:
        dict_len = len(self.target)

        if isinstance(key, int):
            # convert negative index to positive index
            index = dict_len + key if key < 0 else key
            if not 0 <= index < dict_len:
                raise IndexError("OrderedDict index out of range")
            return next(islice(self.target.items(), index, None))
        if isinstance(key, slice):
            return list(self.target.items())[key]
        raise TypeError("key must be of type int or slice.")
