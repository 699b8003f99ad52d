import ipaddress
import random
from typing import Dict, List, Optional
from dataclasses import dataclass
from faker import Faker

## === Config Class === ##

@dataclass
class IPConfig:
    """
    Configuration for IPGenerator
        public_share: float, proportion of public IPs
        private_weights: dict, weights for private IPs {a: x, b: x, c: x}
        min_prefixlen / max_prefixlen: bounds on generated route prefix lengths
        seed: int, seed for random number generator
    """
    public_share: float = 0.9  # fraction of public IPs
    private_weights: Optional[Dict[str, float]] = None  # weights for {'a','b','c'}
    min_prefixlen: int = 8
    max_prefixlen: int = 30
    seed: Optional[int] = None  # seed for random number generator

    def __post_init__(self):
        if not 0.0 <= self.public_share <= 1.0:
            raise ValueError("public_share must be between 0 and 1")
        if not 1 <= self.min_prefixlen <= self.max_prefixlen <= 32:
            raise ValueError("prefix lengths must satisfy 1 <= min_prefixlen <= max_prefixlen <= 32")
        if self.private_weights is None:
            self.private_weights = {'a': 0.35, 'b': 0.10, 'c': 0.55}
        else:
            missing = [k for k in ('a', 'b', 'c') if k not in self.private_weights]
            if missing:
                raise ValueError(f"private_weights missing keys: {missing}")
            if any(self.private_weights[k] < 0 for k in ('a', 'b', 'c')):
                raise ValueError("private_weights must be non-negative")
            if sum(self.private_weights[k] for k in ('a', 'b', 'c')) == 0:
                raise ValueError("Sum of private_weights must be > 0")
            srtd = {cls: self.private_weights[cls] for cls in sorted(self.private_weights.keys())}
            self.private_weights = srtd


## === Bit-string keys === ##

def ip_to_bits(address: str) -> str:
    """'10.0.0.1' -> 32-character string of '0'/'1'."""
    return format(int(ipaddress.IPv4Address(address)), "032b")


def network_to_bits(network: str) -> str:
    """'10.0.0.0/8' -> the first 8 bits, i.e. the route's key in a prefix set.

    Host bits set in `network` are ignored. A /0 network has no bits and
    cannot be stored, so it is rejected.
    """
    net = ipaddress.IPv4Network(network, strict=False)
    if net.prefixlen == 0:
        raise ValueError("a /0 network has an empty bit prefix")
    return format(int(net.network_address), "032b")[:net.prefixlen]


class IPGenerator:
    def __init__(self, config: IPConfig):
        self.config = config
        self.rng = random.Random(self.config.seed)

        self.fake = Faker()
        if self.config.seed is not None:
            self.fake.seed_instance(self.config.seed)
        self.priv_classes, self.weights = zip(*self.config.private_weights.items())

    def _priv_class(self):
        return self.rng.choices(self.priv_classes, weights=self.weights, k=1)[0]

    def single(self) -> str:
        if self.rng.random() > self.config.public_share:
            cls = self._priv_class()
            return self.fake.ipv4_private(address_class=cls)
        else:
            return self.fake.ipv4_public()

    def batch(self, n) -> List[str]:
        if n <= 0:
            raise ValueError("n must be positive")
        return [self.single() for _ in range(n)]

    def networks(self, n) -> List[str]:
        """n CIDR routes ('a.b.c.d/len') around generated addresses."""
        if n <= 0:
            raise ValueError("n must be positive")
        routes = []
        for _ in range(n):
            plen = self.rng.randint(self.config.min_prefixlen, self.config.max_prefixlen)
            net = ipaddress.IPv4Network(f"{self.single()}/{plen}", strict=False)
            routes.append(str(net))
        return routes
