"""
Contract shared by every string-set backend.

A backend stores unique, non-empty strings and answers two questions about
them: exact membership (`contains`) and the prefix family of a query
(`prefixes_of`, the members that are prefixes of the query, shortest first).
Backends are interchangeable: call sites hold a `StringSet` and never care
which structure sits behind it.

Results & errors
----------------
- `insert` reports through `InsertResult` rather than raising:
  `INSERTED`, `ALREADY_PRESENT`, or `ERROR` when memory ran out mid-insert.
- Bad arguments (non-string, or empty string) raise `InvalidArgumentError`,
  which is also a `ValueError`.
"""

import enum
from typing import Callable, Iterable, List, Optional, Protocol, runtime_checkable


class InsertResult(enum.IntEnum):
  ERROR = -1
  ALREADY_PRESENT = 0
  INSERTED = 1


class StringSetError(Exception):
  """Base class for string-set errors."""


class InvalidArgumentError(StringSetError, ValueError):
  """Raised when a key or query is not a non-empty string."""


@runtime_checkable
class StringSet(Protocol):
  def insert(self, key: str) -> InsertResult: ...

  def contains(self, key: str) -> bool: ...

  def size(self) -> int: ...

  def prefixes_of(self, query: str) -> List[str]: ...

  def destroy(self) -> None: ...


def require_key(value, what="key", normalize: Optional[Callable[[str], str]] = None) -> str:
  """Validate (and optionally normalize) a key or query at the API boundary."""
  if not isinstance(value, str):
    raise InvalidArgumentError(f"{what} must be a str, got {type(value).__name__}")
  if normalize is not None:
    value = normalize(value)
  if not value:
    raise InvalidArgumentError(f"{what} must be a non-empty string")
  return value


def prepare_batch(words: Iterable[str],
                  normalize: Optional[Callable[[str], str]] = None,
                  dedup=True,
                  presorted=False) -> List[str]:
  """Validate, normalize, and optionally sort/deduplicate a batch of strings.

  Parameters
  ----------
  words : Iterable[str]
      Incoming words to process. Every word must be a non-empty string.
  normalize : Callable[[str], str] | None
      Normalization applied to each element (e.g. `str.casefold`).
  dedup : bool, default=True
      Remove duplicates within the batch.
  presorted : bool, default=False
      If True, `words` is already sorted under *the same* `normalize` rule.
      When True + dedup, a stable O(n) pass removes adjacent duplicates.

  Returns
  -------
  list[str]
      Words ready for per-key insertion.
  """
  items = (require_key(w, "word", normalize) for w in words)

  if not presorted:
    return sorted(set(items)) if dedup else sorted(items)

  if dedup:
    unique = []
    last = None
    for w in items:
      if w != last:
        unique.append(w)
        last = w
    return unique
  return list(items)
