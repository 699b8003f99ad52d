"""
Radix-trie string set (compressed prefix tree) with prefix-family queries.

Labels live on **edges** rather than single characters on nodes, so chains of
single-child nodes collapse into one edge and lookups touch few nodes even for
long keys that share prefixes (URL paths, IPv4 route bit strings, words).

Key features
------------
- **Space efficiency**
  - Nodes use `__slots__` and defer allocating their edge container.
  - Outgoing edges are stored adaptively:
    - small fanout → list of `Edge(label, target)` tuples
    - large fanout → dict mapping `first_char -> Edge`
  - The switch threshold is the module constant `fanout_switch`.
- **Completed keys on nodes**
  - A node carries the full key that terminates at it (`node.key`), or None
    for a branching node that only fans out a shared prefix. Queries yield
    stored keys directly; they never rebuild strings from labels.
- **Prefix family**
  - `prefixes_of(query)` walks root → leaf once and collects every member
    that is a prefix of `query`, shortest first. Cost is O(len(query)),
    independent of how many keys are stored.
- **Allocation safety**
  - `insert` builds every new node and edge before linking it into the tree,
    so a `MemoryError` leaves the trie exactly as it was and is reported as
    `InsertResult.ERROR`.
- **Iterative traversals**
  - Enumeration, statistics and `destroy` use explicit stacks, so trie depth
    never hits the recursion limit.

Classes
-------
Edge
    `(label, target)` named tuple. Labels are never empty.
RadixNode
    Internal node. Holds `edges` (None | list | dict) and `key` (str | None).
    Helper methods:
      - `_get(ch)` → the `Edge` whose label starts with `ch`, or None
      - `_set(edge)` → insert/replace by first character
      - `_iter_edges()` → iterate edges in container order
      - `_degree()` → number of outgoing edges
      - `is_leaf()`
RadixSet
    Public API: `insert`, `contains`, `size`, `prefixes_of`, `destroy`, plus
    `longest_prefix_of`, `starting_with`, `batch_insert`, `count_nodes` and
    `walk_edges`.

Conventions & invariants
------------------------
- **Edge invariant:** At any node, no two outgoing edges share the same first
  character, so descent never needs to backtrack across siblings.
- **Path invariant:** Concatenating the labels from the root to a keyed node
  gives exactly that node's key.
- **No garbage:** Every non-root node is keyed or has at least two edges; a
  keyless leaf never exists. The root is keyless; the empty string cannot be
  stored.
- **Empty set:** `root is None` iff the set holds no keys.
"""

import logging
from typing import NamedTuple

from stringsets.base import InsertResult, InvalidArgumentError, prepare_batch, require_key
from stringsets.strutil import common_prefix_len, is_prefix, rest_of


log = logging.getLogger(__name__)

fanout_switch = 8


class Edge(NamedTuple):
  label: str
  target: "RadixNode"


class RadixNode:
  __slots__ = ("edges", "key")

  def __init__(self, key=None):
    self.edges = None
    self.key = key


  def _get(self, ch):
    """Return the Edge whose label starts with ch, or None."""
    e = self.edges
    if e is None:
      return None
    if isinstance(e, dict):
      return e.get(ch)

    for edge in e:
      if edge.label[0] == ch:
        return edge
    return None


  def _set(self, edge):
    """Insert/replace an edge by its first char.

    The new edge becomes reachable through one final assignment (or append),
    so a failed allocation never leaves a half-linked edge behind.
    """
    e = self.edges
    ch = edge.label[0]

    if e is None:
      self.edges = [edge]
      return
    if isinstance(e, dict):
      e[ch] = edge
      return

    for i, old in enumerate(e):
      if old.label[0] == ch:
        e[i] = edge
        return
    if len(e) + 1 >= fanout_switch:   # Promotion to dict
      promoted = {old.label[0]: old for old in e}
      promoted[ch] = edge
      self.edges = promoted
    else:
      e.append(edge)


  def _iter_edges(self):
    """Yield every outgoing Edge."""
    e = self.edges
    if not e:
      return
    if isinstance(e, dict):
      yield from e.values()
    else:
      yield from e


  def _degree(self):
    e = self.edges
    return 0 if not e else len(e)


  def is_leaf(self):
    return not self.edges


  def __repr__(self):
    return f"RadixNode(key={self.key!r}, degree={self._degree()})"




#### ===================================================  ####
#    Radix Trie string set
#### ===================================================  ####

class RadixSet:
  __slots__ = ("root", "_size", "normalize")

  def __init__(self, normalize=None):
    self.root = None
    self._size = 0
    self.normalize = normalize


  @classmethod
  def create_empty(cls, normalize=None):
    return cls(normalize=normalize)


  def size(self):
    """Number of keys currently stored."""
    return self._size


  def __len__(self):
    return self._size


  def __contains__(self, key):
    try:
      return self.contains(key)
    except InvalidArgumentError:
      return False


  def __iter__(self):
    if self.root is None:
      return iter(())
    return self._enumerate(self.root, None)


  def __repr__(self):
    return f"{type(self).__name__}(size={self._size})"


  def _locate(self, prefix):
    """Find where `prefix` ends in the trie.

    Returns `(node, pending)`: `pending == ""` when the prefix ends exactly on
    `node`; otherwise the prefix ends mid-edge, `node` is that edge's target
    and `pending` is the unconsumed remainder of the label. A missing path
    returns `(None, "")`.
    """
    node = self.root
    if node is None:
      return None, ""

    pos = 0
    end = len(prefix)
    while pos < end:
      hit = node._get(prefix[pos])
      if hit is None:
        return None, ""
      label, child = hit
      i = common_prefix_len(label, prefix, pos)

      if i == len(label):
        pos += i
        node = child
        continue

      if pos + i == end:
        return child, label[i:]
      return None, ""
    return node, ""


  def contains(self, key):
    """Exact membership test in O(len(key))."""
    key = require_key(key, "key", self.normalize)
    node, pending = self._locate(key)
    return node is not None and not pending and node.key == key


  def insert(self, key):
    """Insert `key` into the set.

    - Empty set: creates a keyless root with a single edge, labeled with the
      whole key, to a leaf carrying the key.
    - Otherwise descends through every edge whose label is fully matched.
    - No edge shares the next character: appends a new edge labeled with the
      unconsumed suffix to a new leaf.
    - An edge shares only part of its label: splits it. A keyless
      intermediate node takes over the shared part, the old target hangs
      below it under the rest of the old label, and the new key either ends
      at the intermediate node or gets its own leaf.
    - The key ends exactly on an existing keyless branching node: the node is
      marked with the key in place.

    Args:
        key (str): Non-empty key (normalized first when the set has a
            `normalize` callable).

    Returns:
        InsertResult: INSERTED, ALREADY_PRESENT (no mutation), or ERROR if
        memory ran out; the trie is left unchanged in that case.

    Raises:
        InvalidArgumentError: `key` is not a non-empty string.
    """
    return self._insert_prepared(require_key(key, "key", self.normalize))


  def _insert_prepared(self, key):
    try:
      return self._insert(key)
    except MemoryError:
      log.error("allocation failure while inserting %r; set left at %d keys", key, self._size)
      return InsertResult.ERROR


  def _insert(self, key):
    if self.root is None:
      root = RadixNode()
      root._set(Edge(key, RadixNode(key)))
      self.root = root
      return self._completed()

    node = self.root
    pos = 0
    end = len(key)
    while pos < end:
      hit = node._get(key[pos])
      if hit is None:
        node._set(Edge(key[pos:], RadixNode(key)))
        return self._completed()

      label, child = hit
      i = common_prefix_len(label, key, pos)
      if i == len(label):
        pos += i
        node = child
        continue

      self._split(node, hit, i, key, pos)
      return self._completed()

    if node.key is not None:
      return InsertResult.ALREADY_PRESENT
    log.debug("marking branching node with %r", key)
    node.key = key
    return self._completed()


  def _split(self, node, edge, i, key, pos):
    """Split `edge` (leaving `node`) after its first `i` characters.

    0 < i < len(edge.label): the first character always matches since the
    edge was selected by it, and a full match would have been descended.
    """
    label, old_target = edge
    shared = label[:i]
    mid = RadixNode()
    mid._set(Edge(rest_of(label, shared), old_target))

    tail = key[pos + i:]
    if tail:
      mid._set(Edge(tail, RadixNode(key)))
    else:
      mid.key = key

    # Same first character, so this replaces `edge` in place.
    node._set(Edge(shared, mid))
    log.debug("split %r at %r for %r", label, shared, key)


  def _completed(self):
    self._size += 1
    return InsertResult.INSERTED


  def batch_insert(self, words, *, dedup=True, presorted=False):
    """Insert many words after a single preparation pass; return how many were new."""
    words = prepare_batch(words, self.normalize, dedup, presorted)
    inserted = 0
    for w in words:
      if self._insert_prepared(w) is InsertResult.INSERTED:
        inserted += 1
    return inserted


  def prefixes_of(self, query):
    """Return the stored keys that are prefixes of `query`, shortest first.

    Keys that `query` is itself a prefix of are not part of the answer (see
    `starting_with` for that). The walk stops at a leaf, when `query` is
    matched exactly, or when no edge extends the match, so at most
    len(query) keys are returned.

    Complexity:
        O(L), where L = len(query).
    """
    return list(self.iter_prefixes_of(query))


  def iter_prefixes_of(self, query):
    """Generator form of `prefixes_of`. Validates `query` eagerly."""
    query = require_key(query, "query", self.normalize)
    return self._prefix_walk(query)


  def _prefix_walk(self, query):
    node = self.root
    pos = 0
    end = len(query)
    while node is not None:
      # Every label so far matched `query`, so a key here is one of its prefixes.
      if node.key is not None:
        yield node.key
      if pos == end:
        return

      hit = node._get(query[pos])
      if hit is None:
        return
      label, child = hit
      if not is_prefix(label, query, pos):
        return
      pos += len(label)
      node = child


  def longest_prefix_of(self, query):
    """Return the longest stored key that is a prefix of `query`, or None."""
    longest = None
    for key in self.iter_prefixes_of(query):
      longest = key
    return longest


  def starting_with(self, prefix, k=None):
    """Enumerate stored keys that begin with `prefix` using an iterative DFS.

    - `""` enumerates the whole set.
    - A prefix ending mid-edge starts from that edge's target; every key below
      it already begins with the prefix.
    - Yields up to `k` keys when provided. Order is pre-order over the nodes'
      edge containers (insertion order), not lexicographic.

    Complexity:
        O(L + K·Ā), where L = len(prefix), K = #yielded keys and Ā the
        average subtree depth walked.
    """
    if prefix != "":
      prefix = require_key(prefix, "prefix", self.normalize)
    node, _ = self._locate(prefix)
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

    _iter = RadixNode._iter_edges
    stack = [_iter(node)]
    while stack:
      try:
        _, child = next(stack[-1])
      except StopIteration:
        stack.pop()
        continue
      if child.key is not None:
        yield child.key
        yielded += 1
        if k is not None and yielded >= k:
          return
      stack.append(_iter(child))


  def walk_edges(self):
    """Yield `(parent, edge)` for every edge, parents before children.

    Read-only view for diagnostics and invariant checks; callers must not
    mutate the nodes they receive.
    """
    if self.root is None:
      return
    stack = [self.root]
    while stack:
      node = stack.pop()
      for edge in node._iter_edges():
        yield node, edge
        stack.append(edge.target)


  def count_nodes(self, get_avg_branch_factor=False):
    """Return total node count, or average branching factor over internal nodes.

    Parameters
    ----------
    get_avg_branch_factor : bool, default=False
        If False, return the total node count (0 for an empty set).
        If True, return average out-degree over internal nodes only.

    Returns
    -------
    int | float
    """
    total_nodes = 0
    internal = 0
    total_deg = 0

    stack = [] if self.root is None else [self.root]
    while stack:
      node = stack.pop()
      total_nodes += 1

      deg = node._degree()
      if deg > 0:
        total_deg += deg
        internal += 1
        for _, child in node._iter_edges():
          stack.append(child)
    if get_avg_branch_factor:
      return (total_deg / internal) if internal else 0.0
    return total_nodes


  def destroy(self):
    """Release every node and edge; the set is empty (and reusable) afterwards.

    Uses an explicit work-list instead of recursion, so a single very long
    chain cannot exhaust the stack.
    """
    stack = [] if self.root is None else [self.root]
    self.root = None
    self._size = 0
    released = 0
    while stack:
      node = stack.pop()
      for _, child in node._iter_edges():
        stack.append(child)
      node.edges = None
      node.key = None
      released += 1
    log.debug("destroy released %d nodes", released)
