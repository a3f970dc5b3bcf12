"""Read-only lookup of resolved prompt configuration by logical key."""

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from promptrelay.prompts.models import ResolvedPromptConfiguration


def normalize_key(logical_key: str) -> str:
    """Case-insensitive lookup key."""
    return logical_key.casefold()


class ResolvedPromptRegistry(Mapping[str, ResolvedPromptConfiguration]):
    """Immutable, case-insensitive mapping of logical key to configuration.

    Built once from the merger output and then only read, so concurrent
    readers need no locking. Iteration yields logical keys in their stored
    casing.
    """

    def __init__(self, records: Iterable[ResolvedPromptConfiguration] = ()) -> None:
        self._records: Mapping[str, ResolvedPromptConfiguration] = MappingProxyType(
            {normalize_key(record.logical_key): record for record in records}
        )

    def try_get(self, logical_key: str | None) -> ResolvedPromptConfiguration | None:
        """Look up a logical key, returning None when it is not configured."""
        if not logical_key:
            return None
        return self._records.get(normalize_key(logical_key))

    def __getitem__(self, logical_key: str) -> ResolvedPromptConfiguration:
        return self._records[normalize_key(logical_key)]

    def __contains__(self, logical_key: object) -> bool:
        if not isinstance(logical_key, str):
            return False
        return normalize_key(logical_key) in self._records

    def __iter__(self) -> Iterator[str]:
        return (record.logical_key for record in self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"ResolvedPromptRegistry({list(self)!r})"

    def records(self) -> list[ResolvedPromptConfiguration]:
        """All resolved records."""
        return list(self._records.values())
