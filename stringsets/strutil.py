"""
String helpers shared by the trie backends.

All functions are pure: they never mutate their inputs and never hand out
views into an edge label, so callers are free to keep the results around.
"""


def common_prefix_len(a, b, start=0):
  """Return the length of the Longest Common Prefix between `a` and `b[start:]`.

  `start` lets the insertion walk compare an edge label against the unconsumed
  part of a key without slicing the key at every level.
  """
  i = 0
  n = min(len(a), len(b) - start)
  while i < n and a[i] == b[start + i]:
    i += 1
  return i


def rest_of(key, prefix):
  """Return `key` with its first len(prefix) characters removed.

  Returns None when `prefix` is longer than `key`; there is nothing left to
  take. The caller is responsible for checking that `prefix` really is a
  prefix of `key`.
  """
  if len(prefix) > len(key):
    return None
  return key[len(prefix):]


def is_prefix(prefix, word, start=0):
  """True if `word[start:]` starts with `prefix` (the empty string prefixes everything)."""
  return word.startswith(prefix, start)
