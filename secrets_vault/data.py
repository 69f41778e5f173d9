from typing import Optional
from collections.abc import Iterator, Mapping, MutableMapping
import orjson
from .exceptions import EnvelopeCorrupt, SecretNotFound, SerializationError


SECRETS_FIELD = 'secrets'


class SecretsData(MutableMapping[str, str]):
    """Secrets dict-like object.

    Maps secret names (non-empty strings) to secret values (any string,
    including empty). Iteration is always in sorted key order so listings
    are deterministic.

    The mapping only lives in memory: it is rebuilt from decrypted bytes
    on every load and discarded after a save.
    """

    def __init__(
        self,
        data: Optional[Mapping[str, str]] = None
    ) -> None:
        self._data: dict[str, str] = {}
        if data:
            for key, value in data.items():
                self._validate(key, value)
                self._data[key] = value
        self._changed = False

    def __repr__(self) -> str:
        # never show values
        return (
            f'<SecretsData [changed:{self._changed}] '
            f'keys={self.keys_sorted()!r}>'
        )

    @staticmethod
    def _validate(key, value) -> None:
        if not isinstance(key, str) or not key:
            raise SerializationError(
                f"secret name must be a non-empty string, got {key!r}"
            )
        if not isinstance(value, str):
            raise SerializationError(
                f"secret '{key}' must be a string, got {type(value).__name__}"
            )

    # --- Magic methods ---

    def __getitem__(self, key: str) -> str:
        try:
            return self._data[key]
        except KeyError:
            raise SecretNotFound(key) from None

    def __setitem__(self, key: str, value: str) -> None:
        self._validate(key, value)
        self._data[key] = value
        self._changed = True

    def __delitem__(self, key: str) -> None:
        try:
            del self._data[key]
        except KeyError:
            raise SecretNotFound(key) from None
        self._changed = True

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys_sorted())

    def __len__(self) -> int:
        return len(self._data)

    # --- Properties ---

    @property
    def empty(self) -> bool:
        return not self._data

    @property
    def is_changed(self) -> bool:
        return self._changed

    @is_changed.setter
    def is_changed(self, value: bool) -> None:
        self._changed = value

    def keys_sorted(self) -> list[str]:
        """Secret names in lexicographic order."""
        return sorted(self._data)

    # --- Encode/Decode ---

    def encode(self) -> bytes:
        """Serialize to ``{"secrets": {...}}`` JSON bytes.

        Raises:
            SerializationError: If the mapping holds non-string data.
        """
        for key, value in self._data.items():
            self._validate(key, value)
        try:
            return orjson.dumps(
                {SECRETS_FIELD: self._data},
                option=orjson.OPT_SORT_KEYS
            )
        except (TypeError, orjson.JSONEncodeError) as err:
            raise SerializationError(
                f"failed to serialize secrets: {err}"
            ) from err

    @classmethod
    def decode(cls, raw: bytes) -> 'SecretsData':
        """Rebuild a mapping from bytes produced by ``encode``.

        Raises:
            EnvelopeCorrupt: If the bytes are not a valid secrets document.
        """
        try:
            doc = orjson.loads(raw)
        except orjson.JSONDecodeError as err:
            raise EnvelopeCorrupt(f"failed to parse secrets: {err}") from err
        if not isinstance(doc, dict):
            raise EnvelopeCorrupt("failed to parse secrets: not an object")
        secrets = doc.get(SECRETS_FIELD)
        if secrets is None:
            # null secrets map is an empty vault
            secrets = {}
        if not isinstance(secrets, dict):
            raise EnvelopeCorrupt(
                "failed to parse secrets: 'secrets' is not an object"
            )
        try:
            return cls(secrets)
        except SerializationError as err:
            raise EnvelopeCorrupt(f"failed to parse secrets: {err}") from err
