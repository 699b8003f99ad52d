"""
Character-per-edge trie string set with lazy children and batch insertion.

Same contract as `RadixSet` (see `stringsets.base.StringSet`), built on the
textbook structure: one node per character of every stored key. It is slower
and larger than the radix trie on long shared prefixes, which makes it a good
baseline for benchmarks and a simple oracle for tests.

Design choices:
- **Memory efficiency:** `TrieNode` uses `__slots__` and *lazy* child dicts
  (`children=None` until the first child is added).
- **Completed keys on nodes:** `node.key` holds the stored key ending there,
  so queries never rebuild strings character by character.
- **Batch performance:** `batch_insert` exploits the Longest Common Prefix
  (LCP) between *adjacent, sorted* inputs to avoid re-walking shared prefixes.
- **Iterative traversals:** no recursion anywhere.

Complexity (typical)
--------------------
- insert / contains / prefixes_of: O(L)
- batch insert (sorted): ~O(total new characters created)
- starting_with: O(L + K · avg_suffix_length), K = number of results yielded
"""

import logging

from stringsets.base import InsertResult, InvalidArgumentError, prepare_batch, require_key
from stringsets.strutil import common_prefix_len


log = logging.getLogger(__name__)


class TrieNode:
  __slots__ = ("children", "key")

  def __init__(self):
    self.children = None
    self.key = None


class CharTrieSet:
  __slots__ = ("root", "_size", "normalize")

  def __init__(self, normalize=None):
    self.root = TrieNode()
    self._size = 0
    self.normalize = normalize


  @classmethod
  def create_empty(cls, normalize=None):
    return cls(normalize=normalize)


  def size(self):
    return self._size


  def __len__(self):
    return self._size


  def __contains__(self, key):
    try:
      return self.contains(key)
    except InvalidArgumentError:
      return False


  def __iter__(self):
    return self._enumerate(self.root, None)


  def __repr__(self):
    return f"{type(self).__name__}(size={self._size})"


  def insert(self, key):
    """Insert a single key; creates child dicts lazily along the path.

    Returns
    -------
    InsertResult
        INSERTED, ALREADY_PRESENT, or ERROR when memory ran out. The missing
        tail of the path is built detached and linked in one assignment, so a
        failed insert leaves the trie untouched.
    """
    key = require_key(key, "key", self.normalize)
    try:
      return self._insert_below([self.root], key, 0)
    except MemoryError:
      log.error("allocation failure while inserting %r", key)
      return InsertResult.ERROR


  def _insert_below(self, path, key, pos):
    """Insert `key`, whose first `pos` characters lead to `path[-1]`.

    Extends `path` with every node on the way down to the key's node.
    """
    node = path[-1]
    end = len(key)
    while pos < end:
      children = node.children
      nxt = None if children is None else children.get(key[pos])
      if nxt is None:
        break
      node = nxt
      path.append(node)
      pos += 1

    if pos == end:
      if node.key is not None:
        return InsertResult.ALREADY_PRESENT
      node.key = key
    else:
      chain = self._build_chain(key, pos)
      if node.children is None:
        node.children = {key[pos]: chain[0]}
      else:
        node.children[key[pos]] = chain[0]
      path.extend(chain)
    self._size += 1
    return InsertResult.INSERTED


  @staticmethod
  def _build_chain(key, pos):
    """Detached nodes for key[pos:], each linked to the next; the last holds `key`."""
    chain = [TrieNode() for _ in range(len(key) - pos)]
    for i in range(len(chain) - 1):
      chain[i].children = {key[pos + i + 1]: chain[i + 1]}
    chain[-1].key = key
    return chain


  def batch_insert(self, words, *, dedup=True, presorted=False):
    """Bulk-insert many words using LCP reuse; return how many were new.

    Words are prepared once (validated/normalized/sorted/deduplicated), then
    each word restarts from the deepest node it shares with the previous one
    instead of from the root. A word that runs out of memory is logged and
    skipped.
    """
    words = prepare_batch(words, self.normalize, dedup, presorted)

    prev = ""
    path = [self.root]
    inserted = 0

    for w in words:
      # a failed word leaves `path` short of `prev`
      i = min(common_prefix_len(prev, w), len(path) - 1)
      del path[i + 1:]
      try:
        if self._insert_below(path, w, i) is InsertResult.INSERTED:
          inserted += 1
      except MemoryError:
        log.error("allocation failure while inserting %r", w)
      prev = w
    return inserted


  def _find(self, prefix):
    """Return the node at the end of `prefix`, or None if the path is missing."""
    node = self.root
    for ch in prefix:
      node = None if node.children is None else node.children.get(ch)
      if node is None:
        return None
    return node


  def contains(self, key):
    key = require_key(key, "key", self.normalize)
    node = self._find(key)
    return node is not None and node.key is not None


  def prefixes_of(self, query):
    """Return the stored keys that are prefixes of `query`, shortest first."""
    return list(self.iter_prefixes_of(query))


  def iter_prefixes_of(self, query):
    query = require_key(query, "query", self.normalize)
    return self._prefix_walk(query)


  def _prefix_walk(self, query):
    node = self.root
    for ch in query:
      node = None if node.children is None else node.children.get(ch)
      if node is None:
        return
      if node.key is not None:
        yield node.key


  def longest_prefix_of(self, query):
    longest = None
    for key in self.iter_prefixes_of(query):
      longest = key
    return longest


  def starting_with(self, prefix, k=None):
    """Yield keys that start with `prefix` ("" yields everything), up to `k`."""
    if prefix != "":
      prefix = require_key(prefix, "prefix", self.normalize)
    node = self._find(prefix)
    if node is None:
      return iter(())
    return self._enumerate(node, k)


  def _enumerate(self, node, k):
    if k is not None and k <= 0:
      return
    yielded = 0
    if node.key is not None:
      yield node.key
      yielded += 1
      if k is not None and yielded >= k:
        return

    def child_iter(n):
      if not n.children:
        return iter(())
      return iter(n.children.values())

    stack = [child_iter(node)]
    while stack:
      try:
        child = next(stack[-1])
      except StopIteration:
        stack.pop()
        continue
      if child.key is not None:
        yield child.key
        yielded += 1
        if k is not None and yielded >= k:
          return
      stack.append(child_iter(child))


  def count_nodes(self, get_avg_branch_factor=False):
    """Return total node count, or average branching factor over internal nodes."""
    total_nodes = 0
    internal = 0
    total_deg = 0

    stack = [self.root]
    while stack:
      node = stack.pop()
      total_nodes += 1
      children = node.children
      if children:
        total_deg += len(children)
        internal += 1
        stack.extend(children.values())
    if get_avg_branch_factor:
      return (total_deg / internal) if internal else 0.0
    return total_nodes


  def destroy(self):
    """Drop every node iteratively and start over with a fresh root."""
    stack = [self.root]
    self.root = TrieNode()
    self._size = 0
    while stack:
      node = stack.pop()
      if node.children:
        stack.extend(node.children.values())
      node.children = None
      node.key = None
