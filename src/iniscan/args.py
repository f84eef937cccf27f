from .globals import DEFAULT_DELIMITER, RESERVED_MARKERS, DUPLICATE_POLICIES


class Parameters:
    """Parameters for reading."""

    def __init__(
        self,
        strict: bool = True,
        duplicate_keys: DUPLICATE_POLICIES = "first",
        ignore_whitespace_lines: bool = True,
        encoding: str | None = None,
        delimiter: str = DEFAULT_DELIMITER,
    ) -> None:
        """
        Args:
            strict (bool, optional): Whether malformed lines, duplicate keys and
                duplicate sections abort reading. If False, the offending line (or
                section) is skipped with a SkippedLineWarning. Defaults to True.
            duplicate_keys ("first" | "last", optional): Which value is kept for a
                repeated key when strict is False. "last" overwrites the value but
                keeps the key at its first position. Defaults to "first".
            ignore_whitespace_lines (bool, optional): Whether to interpret lines with
                only whitespace characters as blank lines. Defaults to True.
            encoding (str | None, optional): Encoding of files to read. If None, the
                encoding is detected by charset_normalizer. Defaults to None.
            delimiter (str, optional): Character separating key and value.
                Defaults to "=".
        """
        self.strict = strict
        self.duplicate_keys = duplicate_keys
        self.ignore_whitespace_lines = ignore_whitespace_lines
        self.encoding = encoding
        self.delimiter = delimiter

    @property
    def duplicate_keys(self) -> DUPLICATE_POLICIES:
        return self._duplicate_keys

    @duplicate_keys.setter
    def duplicate_keys(self, value: DUPLICATE_POLICIES) -> None:
        if value not in {"first", "last"}:
            raise ValueError(f"duplicate_keys must be 'first' or 'last', not {value!r}.")
        self._duplicate_keys = value

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @delimiter.setter
    def delimiter(self, value: str) -> None:
        if len(value) != 1:
            raise ValueError("The delimiter must be a single character.")
        if value in RESERVED_MARKERS:
            raise ValueError(
                f"'{value}' marks comments or sections and can't be the delimiter."
            )
        if value.isspace():
            raise ValueError("Whitespace is not allowed as delimiter.")
        self._delimiter = value

    def update(self, **kwargs) -> None:
        """Update parameters with kwargs

        Args:
            **kwargs: Keyword-arguments to update the parameters with.
        """
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise TypeError(f"Unknown parameter '{k}'.")
            setattr(self, k, v)

    def __repr__(self) -> str:
        return (
            f"Parameters(strict={self.strict!r}, duplicate_keys={self.duplicate_keys!r},"
            f" ignore_whitespace_lines={self.ignore_whitespace_lines!r},"
            f" encoding={self.encoding!r}, delimiter={self.delimiter!r})"
        )
