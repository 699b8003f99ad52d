# test_backends.py
# Every backend honours the same StringSet contract; the char trie doubles as
# an oracle for the radix trie on randomized workloads.

import os
import random
import string
import sys
import unittest
from unittest import mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from stringsets import char_trie_set
from stringsets.base import InsertResult, InvalidArgumentError, StringSet, prepare_batch
from stringsets.char_trie_set import CharTrieSet
from stringsets.radix_set import RadixSet
from stringsets.registry import BACKENDS, create_empty


def gen_random_words(rng, n, alphabet=string.ascii_lowercase, min_len=1, max_len=8):
    return ["".join(rng.choice(alphabet) for _ in range(rng.randint(min_len, max_len)))
            for _ in range(n)]


class TestContract(unittest.TestCase):
    """Shared scenarios, run against every registered backend."""

    def backends(self):
        for name in BACKENDS:
            with self.subTest(backend=name):
                yield name, create_empty(name)

    def test_satisfies_protocol(self):
        for _, s in self.backends():
            self.assertIsInstance(s, StringSet)

    def test_scenarios(self):
        for _, s in self.backends():
            self.assertFalse(s.contains("x"))
            self.assertEqual(s.prefixes_of("x"), [])
            self.assertEqual(s.size(), 0)

            for w in ["team", "tea", "boat", "bo"]:
                self.assertIs(s.insert(w), InsertResult.INSERTED)
            self.assertEqual(s.size(), 4)
            self.assertFalse(s.contains("te"))
            self.assertTrue(s.contains("tea"))
            self.assertIs(s.insert("tea"), InsertResult.ALREADY_PRESENT)
            self.assertEqual(s.size(), 4)

            s.insert("app")
            s.insert("apple")
            self.assertEqual(s.prefixes_of("apple"), ["app", "apple"])
            self.assertEqual(s.prefixes_of("ap"), [])
            self.assertEqual(s.longest_prefix_of("teammate"), "team")

            s.destroy()
            self.assertEqual(s.size(), 0)
            self.assertFalse(s.contains("tea"))

    def test_invalid_arguments(self):
        for _, s in self.backends():
            for call in (s.insert, s.contains, s.prefixes_of):
                with self.assertRaises(InvalidArgumentError):
                    call("")
                with self.assertRaises(InvalidArgumentError):
                    call(None)

    def test_normalize(self):
        for name in BACKENDS:
            with self.subTest(backend=name):
                s = create_empty(name, normalize=str.casefold)
                s.insert("BAT")
                self.assertTrue(s.contains("bat"))
                self.assertEqual(s.prefixes_of("Batch"), ["bat"])

    def test_membership_operator_never_raises(self):
        for name in BACKENDS:
            with self.subTest(backend=name):
                s = create_empty(name, normalize=str.strip)
                s.insert(" tea ")
                self.assertIn("tea", s)
                self.assertIn("  tea", s)
                self.assertNotIn("   ", s)
                self.assertNotIn("", s)
                self.assertNotIn(None, s)
                self.assertNotIn(42, s)


class TestRegistry(unittest.TestCase):
    def test_known_backends(self):
        self.assertIsInstance(create_empty(), RadixSet)
        self.assertIsInstance(create_empty("radix"), RadixSet)
        self.assertIsInstance(create_empty("char"), CharTrieSet)

    def test_unknown_backend(self):
        with self.assertRaises(InvalidArgumentError):
            create_empty("bst")


class TestPrepareBatch(unittest.TestCase):
    def test_sorted_dedup(self):
        inp = ["B", "a", "A", "b", "a", "B"]
        self.assertEqual(prepare_batch(inp, normalize=str.casefold), ["a", "b"])
        self.assertEqual(prepare_batch(inp, normalize=str.casefold, dedup=False),
                         ["a", "a", "a", "b", "b", "b"])

    def test_presorted_stable_dedup(self):
        inp = ["aa", "aa", "ab", "ab", "b", "b"]
        self.assertEqual(prepare_batch(inp, presorted=True), ["aa", "ab", "b"])
        self.assertEqual(prepare_batch(inp, dedup=False, presorted=True), inp)


class TestCharTrieSet(unittest.TestCase):
    def test_batch_insert_with_lcp_reuse(self):
        t = CharTrieSet()
        n = t.batch_insert(["bath", "bat", "batch", "bat", "bark"])
        self.assertEqual(n, 4)
        self.assertEqual(t.size(), 4)
        for w in ["bat", "bath", "batch", "bark"]:
            self.assertTrue(t.contains(w))
        self.assertFalse(t.contains("ba"))
        self.assertEqual(t.batch_insert(["bat"]), 0)

    def test_starting_with(self):
        t = CharTrieSet()
        t.batch_insert(["app", "apple", "apply", "bat"])
        self.assertEqual(set(t.starting_with("app")), {"app", "apple", "apply"})
        self.assertEqual(list(t.starting_with("app", k=1)), ["app"])
        self.assertEqual(set(t), {"app", "apple", "apply", "bat"})
        self.assertEqual(list(t.starting_with("zz")), [])

    def test_count_nodes(self):
        t = CharTrieSet()
        for w in ["a", "ab", "ac", "b"]:
            t.insert(w)
        self.assertEqual(t.count_nodes(), 5)
        self.assertEqual(t.count_nodes(get_avg_branch_factor=True), 2.0)


def keyless_leaves(t):
    """Nodes with neither a key nor children; a well-formed char trie has none."""
    found = []
    stack = [t.root]
    while stack:
        node = stack.pop()
        if node.children:
            stack.extend(node.children.values())
        elif node.key is None and node is not t.root:
            found.append(node)
    return found


class TestCharTrieAllocationFailure(unittest.TestCase):
    def _failing(self, side_effect):
        return mock.patch.object(char_trie_set, "TrieNode", side_effect=side_effect)

    def test_failure_mid_chain_leaves_trie_intact(self):
        t = CharTrieSet()
        t.insert("a")
        nodes = t.count_nodes()
        real = char_trie_set.TrieNode
        with self._failing([real(), real(), MemoryError()]):
            with self.assertLogs("stringsets.char_trie_set", level="ERROR"):
                self.assertIs(t.insert("bcde"), InsertResult.ERROR)
        self.assertEqual(t.count_nodes(), nodes)
        self.assertEqual(t.size(), 1)
        self.assertFalse(t.contains("b"))
        self.assertFalse(t.contains("bcde"))
        self.assertEqual(keyless_leaves(t), [])
        # and the set still works afterwards
        self.assertIs(t.insert("bcde"), InsertResult.INSERTED)
        self.assertEqual(t.count_nodes(), nodes + 4)

    def test_failure_below_existing_key(self):
        t = CharTrieSet()
        t.insert("tea")
        with self._failing(MemoryError):
            with self.assertLogs("stringsets.char_trie_set", level="ERROR"):
                self.assertIs(t.insert("team"), InsertResult.ERROR)
        self.assertEqual(t.prefixes_of("team"), ["tea"])
        self.assertEqual(keyless_leaves(t), [])

    def test_batch_insert_reports_instead_of_raising(self):
        t = CharTrieSet()
        t.insert("a")
        nodes = t.count_nodes()
        with self._failing(MemoryError):
            with self.assertLogs("stringsets.char_trie_set", level="ERROR"):
                self.assertEqual(t.batch_insert(["ab"]), 0)
        self.assertEqual(t.count_nodes(), nodes)
        self.assertEqual(t.size(), 1)

    def test_batch_continues_after_a_failed_word(self):
        t = CharTrieSet()
        real = char_trie_set.TrieNode
        # "bat" gets its three nodes, "bath" fails, "bats" and "cat" succeed
        effects = [real(), real(), real(), MemoryError(), real(), real(), real(), real()]
        with self._failing(effects):
            with self.assertLogs("stringsets.char_trie_set", level="ERROR"):
                n = t.batch_insert(["bat", "bath", "bats", "cat"])
        self.assertEqual(n, 3)
        self.assertEqual(sorted(t), ["bat", "bats", "cat"])
        self.assertFalse(t.contains("bath"))
        self.assertEqual(keyless_leaves(t), [])


class TestParity(unittest.TestCase):
    """Radix answers must match the char trie on every query."""

    def setUp(self):
        self.rng = random.Random(7)

    def test_random_words(self):
        words = gen_random_words(self.rng, 2000, alphabet="abcde", min_len=1, max_len=8)
        probes = gen_random_words(self.rng, 500, alphabet="abcde", min_len=1, max_len=10)
        r, c = RadixSet(), CharTrieSet()
        for w in words:
            self.assertEqual(r.insert(w), c.insert(w), w)
        self.assertEqual(r.size(), c.size())
        self.assertEqual(sorted(r), sorted(c))
        for q in probes:
            self.assertEqual(r.contains(q), c.contains(q), q)
            self.assertEqual(r.prefixes_of(q), c.prefixes_of(q), q)
            self.assertEqual(sorted(r.starting_with(q)), sorted(c.starting_with(q)), q)

    def test_radix_uses_fewer_nodes_on_long_shared_prefixes(self):
        words = ["https://example.com/" + w for w in gen_random_words(self.rng, 200)]
        r, c = RadixSet(), CharTrieSet()
        r.batch_insert(words)
        c.batch_insert(words)
        self.assertEqual(r.size(), c.size())
        self.assertLess(r.count_nodes(), c.count_nodes())


if __name__ == "__main__":
    unittest.main(verbosity=2)
