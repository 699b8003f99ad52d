"""Backend lookup so call sites can swap string-set implementations by name."""

from stringsets.base import InvalidArgumentError
from stringsets.char_trie_set import CharTrieSet
from stringsets.radix_set import RadixSet


BACKENDS = {
  "radix": RadixSet,
  "char": CharTrieSet,
}


def create_empty(backend="radix", normalize=None):
  """Return a new, empty string set of the named backend."""
  try:
    cls = BACKENDS[backend]
  except KeyError:
    raise InvalidArgumentError(
      f"unknown backend {backend!r}; choose one of {sorted(BACKENDS)}") from None
  return cls.create_empty(normalize=normalize)
