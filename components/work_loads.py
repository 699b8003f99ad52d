#!/usr/bin/env python3
import random

from components.generators.url_generator import generate_urls
from components.generators.word_generator import generate_random_words, gen_words_with_prefix_freq
from components.generators.ip_generator import IPConfig, IPGenerator, ip_to_bits, network_to_bits


KINDS = ("words", "urls", "ips", "routes")


class WorkLoad:
    """Seeded key and query streams for the string-set backends.

    `routes` are IPv4 networks written as bit-string prefixes; pairing them
    with `route_queries` (host addresses as 32-bit strings) turns
    `prefixes_of` into route matching and `longest_prefix_of` into
    longest-prefix match.
    """

    def __init__(self, seed=None):
        self.seed = seed
        self.rng = random.Random(seed)

    def words(self, num_words, p_freq=0, unique=False):
        if p_freq > 0:
            return gen_words_with_prefix_freq(num_words, p_freq, self.seed, unique)
        else:
            return generate_random_words(num_words, self.seed, unique)

    def urls(self, num_urls):
        return generate_urls(num_urls, self.seed)

    def ips(self, num_ips, as_bits=False):
        ips = IPGenerator(IPConfig(seed=self.seed)).batch(num_ips)
        return [ip_to_bits(ip) for ip in ips] if as_bits else ips

    def routes(self, num_routes, as_bits=True):
        nets = IPGenerator(IPConfig(seed=self.seed)).networks(num_routes)
        return [network_to_bits(n) for n in nets] if as_bits else nets

    def keys(self, kind, n, p_freq=0.0):
        """Dispatch on workload kind; see KINDS."""
        if kind == "words":
            return self.words(n, p_freq)
        if kind == "urls":
            return self.urls(n)
        if kind == "ips":
            return self.ips(n)
        if kind == "routes":
            return self.routes(n)
        raise ValueError(f"unknown workload kind {kind!r}; choose one of {KINDS}")

    def queries(self, keys, num_queries, hit_ratio=0.5, max_suffix=4, pad_to=None):
        """Build prefix-family queries for `keys`.

        A `hit_ratio` share of the queries is a stored key extended by up to
        `max_suffix` random characters (so at least that key is one of the
        query's prefixes); the rest are random strings over the keys' alphabet.
        With `pad_to`, hits are extended to exactly that length instead, which
        turns route prefixes into full 32-bit addresses.
        """
        if num_queries < 1:
            raise ValueError("num_queries must be positive")
        if not 0.0 <= hit_ratio <= 1.0:
            raise ValueError("hit_ratio must be between 0 and 1")
        if not keys:
            raise ValueError("keys must not be empty")

        rng = self.rng
        alphabet = sorted({ch for k in keys for ch in k})
        longest = max(len(k) for k in keys)
        out = []
        for _ in range(num_queries):
            if rng.random() < hit_ratio:
                base = rng.choice(keys)
                extra = max(0, pad_to - len(base)) if pad_to else rng.randint(0, max_suffix)
                out.append(base + "".join(rng.choices(alphabet, k=extra)))
            else:
                length = pad_to or rng.randint(1, longest)
                out.append("".join(rng.choices(alphabet, k=length)))
        return out

    def route_queries(self, routes, num_queries, hit_ratio=0.8):
        return self.queries(routes, num_queries, hit_ratio=hit_ratio, pad_to=32)
