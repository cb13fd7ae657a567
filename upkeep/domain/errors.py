from __future__ import annotations


class UpkeepError(Exception):
    """Base class for errors surfaced by the upkeep core."""


class NotFoundError(UpkeepError):
    def __init__(self, kind: str, ident: str) -> None:
        super().__init__(f"{kind} not found: {ident}")
        self.kind = kind
        self.ident = ident


class ValidationError(UpkeepError):
    pass


class StorageError(UpkeepError):
    pass


class SuggestionParseError(UpkeepError):
    pass


class SuggestionProviderError(UpkeepError):
    pass
