import random
import math
from collections import defaultdict

from faker.providers.lorem.en_US import Provider as LoremProvider


# Word lists: Faker's English lorem vocabulary, plus suffixed forms of it so
# that the broad list is full of prefix families ("act", "acts", "acting").
WORDS_COMMON = list(dict.fromkeys(w for w in LoremProvider.word_list if w.isalpha()))

SUFFIXES = ("", "s", "ed", "er", "ing", "ly", "ness", "able")
WORDS_BROAD = sorted({w + s for w in WORDS_COMMON for s in SUFFIXES})

PREFIX_WIDTH = 2


def _bucket_by_prefix(words, width=PREFIX_WIDTH):
  """Group `words` by their first `width` characters, keeping input order."""
  buckets = defaultdict(list)
  for w in words:
    buckets[w[:width]].append(w)
  return dict(buckets)


BUCKETS = _bucket_by_prefix(WORDS_BROAD)
# leave some slack so unique draws never have to scrape the last few words
MAX_UNIQUE = int(len(WORDS_BROAD) // 1.1)


def generate_random_words(num_words, seed=None, unique=False):
  """
  Return n random words from WORDS_COMMON.
  - unique=False: sample with replacement (fast, allows duplicates)
  - unique=True: sample without replacement (requires n <= len(WORDS_COMMON))
  """
  if num_words < 1 or (unique and num_words > len(WORDS_COMMON)):
    raise ValueError(f"num_words must be between 1 and {len(WORDS_COMMON)}")
  rng = random.Random(seed)
  if unique:
    return rng.sample(WORDS_COMMON, num_words)
  return rng.choices(WORDS_COMMON, k=num_words)


def _stay_probability(prefix_freq, max_mean=100):
  """Chance that the next word keeps the current prefix.

  Logarithmic in `prefix_freq`: 1 - max_mean**(-prefix_freq), so 0 gives
  runs of one word and 1 gives runs averaging about `max_mean` words.
  """
  if not 0 <= prefix_freq <= 1:
    raise ValueError("Prefix frequency must be between 0 and 1")
  return min(1.0 - math.exp(-math.log(max_mean) * prefix_freq), 0.999999)


def _run_length(rng, p_stay):
  n = 1
  while rng.random() < p_stay:
    n += 1
  return n


def gen_words_with_prefix_freq(num_words, prefix_freq=0.0, seed=None, unique=False):
  """Words drawn from WORDS_BROAD in runs that share their first two letters.

  Each run picks a prefix bucket, weighted by how many words it holds, and
  takes a geometric number of words from it. `prefix_freq` (0 to 1) stretches
  the runs on a logarithmic scale. With `unique=True` every bucket becomes a
  shuffled pool drawn without replacement, and its weight tracks what is left.
  """
  p_stay = _stay_probability(prefix_freq)
  if num_words < 1 or (unique and num_words > MAX_UNIQUE):
    raise ValueError(f"num_words must be between 1 and {MAX_UNIQUE}")
  rng = random.Random(seed)

  names = list(BUCKETS)
  weights = [len(BUCKETS[p]) for p in names]
  pools = [rng.sample(BUCKETS[p], len(BUCKETS[p])) for p in names] if unique else None

  out = []
  while len(out) < num_words:
    i = rng.choices(range(len(names)), weights=weights)[0]
    take = min(_run_length(rng, p_stay), num_words - len(out))
    if not unique:
      out.extend(rng.choices(BUCKETS[names[i]], k=take))
      continue
    pool = pools[i]
    for _ in range(min(take, len(pool))):
      out.append(pool.pop())
    weights[i] = len(pool)
  return out
