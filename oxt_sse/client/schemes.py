"""Common capability interface for the Basic, Boolean (OXT) and Substring schemes."""

from typing import Any, Iterable, List


class SearchScheme:
    """
    Client-side scheme: setup() builds an index for the server and keeps the keys;
    search() queries that index and returns plaintext identifiers.
    """

    name = "abstract"

    def setup(self, documents: Iterable) -> Any:
        """Build and return the encrypted index for `documents` ((id, content) pairs)."""
        raise NotImplementedError

    def search(self, index: Any, query: Any) -> List[str]:
        """Return identifiers matching `query` against `index`."""
        raise NotImplementedError
