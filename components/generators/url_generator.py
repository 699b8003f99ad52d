import random
import string
from urllib.parse import quote

from faker import Faker

from components.generators.word_generator import WORDS_BROAD, WORDS_COMMON


### ================= URL Generation Probability Config ================= ###

# --- File extensions and their weights for the last path segment --- #
file_exts = ["js", "css", "html", "jpg", "png", "gif", "svg", "woff2", "pdf", "json", "xml", "mp4"]
file_ext_weights = [0.28, 0.10, 0.04, 0.10, 0.09, 0.05, 0.02, 0.08, 0.03, 0.03, 0.01, 0.03]

slug_separators = ["-", "_", " "]
slug_separator_weights = [0.82, 0.12, 0.06]

# Path depth 0..5; a small host pool keeps many URLs under the same site prefix.
path_depths = [0, 1, 2, 3, 4, 5]
path_depth_weights = [0.20, 0.30, 0.25, 0.13, 0.10, 0.02]

param_keys = ["q", "id", "page", "ref", "utm_source", "lang", "session"]
param_weights = [0.20, 0.18, 0.18, 0.12, 0.10, 0.10, 0.12]


### ================= URL Generation Functions ================= ###

def load_hosts(fake, num_hosts=200, s=1.1):
  """Faker host names with Zipf weights, so a few sites dominate the traffic."""
  if num_hosts <= 0:
    raise ValueError("num_hosts must be positive")
  hosts = list(dict.fromkeys(fake.domain_name() for _ in range(num_hosts)))
  weights_zipf = [1 / ((r + 1) ** s) for r in range(len(hosts))]
  return hosts, weights_zipf


def pick_scheme(rng):
  """Pick a scheme (http or https) with a realistic probability."""
  return rng.choices(["http", "https"], weights=[0.12, 0.88], k=1)[0]


def slug(rng, min_len=2, max_len=12, digit_p=0.15, sep_p=0.15):
  pool = string.ascii_lowercase + (string.digits if rng.random() < digit_p else "")
  s = "".join(rng.choices(pool, k=rng.randint(min_len, max_len)))
  if rng.random() < sep_p and len(s) > 3:
    indx = rng.randint(2, len(s) - 2)
    separator = rng.choices(slug_separators, slug_separator_weights, k=1)[0]
    s = s[:indx] + separator + s[indx:]
  return quote(s, safe='-_.~')


def gen_path(rng, slug_p=0.3):
  """Random path with depth up to 5; segments are common words or slugs."""
  if slug_p < 0 or slug_p > 1:
    raise ValueError("slug_p must be between 0 and 1")
  depth = rng.choices(path_depths, weights=path_depth_weights, k=1)[0]
  if depth == 0:
    return "/"

  segs = []
  for _ in range(depth):
    if rng.random() < slug_p:
      segs.append(slug(rng))
    else:
      segs.append(quote(rng.choice(WORDS_BROAD), safe='-_.~'))
    slug_p += (1 - slug_p) * 0.15

  path = "/" + "/".join(segs)
  if rng.random() < 0.3:
    return path + "." + rng.choices(file_exts, weights=file_ext_weights, k=1)[0]
  return path + "/"


def query_string(rng):
  """Random query string (or none) with sorted, distinct parameter keys."""
  num_params = rng.choices([0, 1, 2, 3], weights=[0.50, 0.30, 0.15, 0.05], k=1)[0]
  if num_params == 0:
    return ""
  keys = set()
  while len(keys) < num_params:
    keys.add(rng.choices(param_keys, weights=param_weights, k=1)[0])
  pairs = []
  for key in sorted(keys):
    if key in ("id", "page"):
      val = str(rng.randint(1, 10**4))
    elif key == "session":
      val = slug(rng, min_len=16, max_len=32, digit_p=0.5, sep_p=0.0)
    else:
      val = "+".join(rng.choices(WORDS_COMMON, k=rng.randint(1, 3)))
    pairs.append(f"{key}={val}")
  return "?" + "&".join(pairs)


### ================= Final URL Generation Logic ================= ###

def generate_urls(num_urls, seed=None, num_hosts=200):
  """Generate a list of random URLs."""
  if num_urls < 1:
    raise ValueError("num_urls must be positive")
  rng = random.Random(seed)
  fake = Faker()
  if seed is not None:
    fake.seed_instance(seed)
  hosts, weights = load_hosts(fake, num_hosts)

  urls = []
  for _ in range(num_urls):
    scheme = pick_scheme(rng)
    host = rng.choices(hosts, weights=weights, k=1)[0]
    urls.append(f"{scheme}://{host}{gen_path(rng)}{query_string(rng)}")
  return urls
