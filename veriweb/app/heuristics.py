"""
heuristics.py

Explainable URL heuristics for phishing detection.

Each rule looks at a ParsedUrl and either fires or not. A fired rule becomes
a Signal carrying a fixed weight (points taken off the 0-100 safety score)
and a fixed description that is shown to the user as a threat.

Weights and descriptions are kept in static tables below for easy tuning;
adding a rule means adding a SignalId, a weight, a description and a
predicate, and appending it to a rule set.

Public function:
    extract_signals(parsed, rules=DEFAULT_RULES) -> tuple of Signal
"""

import math
import re
from dataclasses import dataclass
from enum import Enum

from .parser import ParsedUrl

MAX_LENGTH_SUSPICIOUS = 75
HYPHEN_THRESHOLD = 3
SUSPICIOUS_KEYWORDS = ('login', 'verify', 'bank', 'secure', 'account', 'update')

# Extended rule set thresholds
MAX_HOST_DIGITS = 3
MAX_HOST_DIGIT_RATIO = 0.20
MIN_RANDOM_LABEL_LENGTH = 6
MIN_RELATIVE_ENTROPY = 0.95
PUNYCODE_PREFIX = 'xn--'
EMBEDDED_URL_RE = re.compile(r'https?://|www\.', re.IGNORECASE)

LOOKALIKE_SEQUENCES = (('vv', 'w'), ('rn', 'm'))
LOOKALIKE_CHARS = str.maketrans({
    '0': 'o', '1': 'l', '3': 'e', '4': 'a', '5': 's', '7': 't', '8': 'b',
})
WELL_KNOWN_BRANDS = frozenset({
    'google', 'paypal', 'apple', 'microsoft', 'amazon', 'facebook',
    'netflix', 'instagram', 'linkedin', 'dropbox', 'ebay', 'outlook',
})


class SignalId(str, Enum):
    LONG_URL = 'LONG_URL'
    AT_SYMBOL = 'AT_SYMBOL'
    IP_HOST = 'IP_HOST'
    EXCESS_HYPHENS = 'EXCESS_HYPHENS'
    SENSITIVE_KEYWORD = 'SENSITIVE_KEYWORD'
    INSECURE_SCHEME = 'INSECURE_SCHEME'
    EMPTY_HOST = 'EMPTY_HOST'
    PUNYCODE_HOST = 'PUNYCODE_HOST'
    EMBEDDED_URL = 'EMBEDDED_URL'
    DIGIT_HEAVY_HOST = 'DIGIT_HEAVY_HOST'
    RANDOM_LOOKING_HOST = 'RANDOM_LOOKING_HOST'
    BRAND_LOOKALIKE = 'BRAND_LOOKALIKE'


# Points taken off the safety score (0-100 scale)
WEIGHTS = {
    SignalId.LONG_URL: 10,
    SignalId.AT_SYMBOL: 15,
    SignalId.IP_HOST: 25,
    SignalId.EXCESS_HYPHENS: 10,
    SignalId.SENSITIVE_KEYWORD: 20,
    SignalId.INSECURE_SCHEME: 10,
    SignalId.EMPTY_HOST: 30,
    SignalId.PUNYCODE_HOST: 20,
    SignalId.EMBEDDED_URL: 15,
    SignalId.DIGIT_HEAVY_HOST: 10,
    SignalId.RANDOM_LOOKING_HOST: 10,
    SignalId.BRAND_LOOKALIKE: 25,
}

DESCRIPTIONS = {
    SignalId.LONG_URL: f"URL is unusually long (over {MAX_LENGTH_SUSPICIOUS} characters)",
    SignalId.AT_SYMBOL: "URL contains an '@' symbol, which can hide the real destination",
    SignalId.IP_HOST: "Host is a raw IP address instead of a domain name",
    SignalId.EXCESS_HYPHENS: "Domain contains excessive or consecutive hyphens",
    SignalId.SENSITIVE_KEYWORD: "URL contains sensitive keywords often used in phishing (login, verify, bank, ...)",
    SignalId.INSECURE_SCHEME: "Connection is not secured with HTTPS",
    SignalId.EMPTY_HOST: "URL has no recognizable host",
    SignalId.PUNYCODE_HOST: "Domain uses punycode (xn--), which can disguise look-alike characters",
    SignalId.EMBEDDED_URL: "URL contains another URL, a common open-redirect pattern",
    SignalId.DIGIT_HEAVY_HOST: "Domain contains an unusually high number of digits",
    SignalId.RANDOM_LOOKING_HOST: "Domain name looks randomly generated",
    SignalId.BRAND_LOOKALIKE: "Domain imitates a well-known brand using look-alike characters",
}


@dataclass(frozen=True)
class Signal:
    id: SignalId
    weight: int
    description: str

    def to_dict(self) -> dict:
        return {"id": self.id.value, "weight": self.weight, "description": self.description}


def make_signal(signal_id: SignalId) -> Signal:
    return Signal(id=signal_id, weight=WEIGHTS[signal_id], description=DESCRIPTIONS[signal_id])


def shannon_entropy(data: str) -> float:
    """Calculate entropy for randomness detection."""
    if not data:
        return 0.0
    probabilities = [float(data.count(c)) / len(data) for c in set(data)]
    return -sum(p * math.log(p, 2) for p in probabilities)


def _host_labels(host: str) -> list:
    # port and credentials are not part of any label
    host = host.rsplit('@', 1)[-1].split(':', 1)[0]
    return [label for label in host.rstrip('.').split('.') if label]


def _registrable_label(host: str) -> str:
    """Second-to-last host label, e.g. 'example' for 'www.example.com'."""
    labels = _host_labels(host)
    if len(labels) >= 2:
        return labels[-2]
    return labels[0] if labels else ''


def _unmask_lookalikes(label: str) -> str:
    for fake, real in LOOKALIKE_SEQUENCES:
        label = label.replace(fake, real)
    return label.translate(LOOKALIKE_CHARS)


# ---------------------------------------------------------------------
# Rule predicates
# ---------------------------------------------------------------------
def is_long_url(parsed: ParsedUrl) -> bool:
    return len(parsed.raw) > MAX_LENGTH_SUSPICIOUS


def has_at_symbol(parsed: ParsedUrl) -> bool:
    return '@' in parsed.raw


def has_ip_host(parsed: ParsedUrl) -> bool:
    return parsed.is_ip_literal


def has_excess_hyphens(parsed: ParsedUrl) -> bool:
    return '--' in parsed.host or parsed.host.count('-') >= HYPHEN_THRESHOLD


def has_sensitive_keyword(parsed: ParsedUrl) -> bool:
    haystack = (parsed.host + ' ' + parsed.path).lower()
    return any(kw in haystack for kw in SUSPICIOUS_KEYWORDS)


def has_insecure_scheme(parsed: ParsedUrl) -> bool:
    return parsed.scheme == '' or parsed.scheme.lower() == 'http'


def has_empty_host(parsed: ParsedUrl) -> bool:
    return parsed.host == ''


def has_punycode_host(parsed: ParsedUrl) -> bool:
    return any(label.startswith(PUNYCODE_PREFIX) for label in _host_labels(parsed.host))


def has_embedded_url(parsed: ParsedUrl) -> bool:
    rest = parsed.raw
    if parsed.scheme:
        rest = rest[len(parsed.scheme) + len('://'):]
    # a leading www. belongs to the host itself
    if rest.lower().startswith('www.'):
        rest = rest[4:]
    return EMBEDDED_URL_RE.search(rest) is not None


def is_digit_heavy_host(parsed: ParsedUrl) -> bool:
    if parsed.is_ip_literal or not parsed.host:
        return False
    name = ''.join(_host_labels(parsed.host))
    if not name:
        return False
    digits = sum(c.isdigit() for c in name)
    return digits > MAX_HOST_DIGITS or digits / len(name) > MAX_HOST_DIGIT_RATIO


def is_random_looking_host(parsed: ParsedUrl) -> bool:
    if parsed.is_ip_literal:
        return False
    label = _registrable_label(parsed.host)
    if len(label) < MIN_RANDOM_LABEL_LENGTH:
        return False
    if not (any(c.isdigit() for c in label) and any(c.isalpha() for c in label)):
        return False
    return shannon_entropy(label) >= MIN_RELATIVE_ENTROPY * math.log(len(label), 2)


def is_brand_lookalike(parsed: ParsedUrl) -> bool:
    if parsed.is_ip_literal:
        return False
    for label in _host_labels(parsed.host):
        if label in WELL_KNOWN_BRANDS:
            continue
        if _unmask_lookalikes(label) in WELL_KNOWN_BRANDS:
            return True
    return False


# Ordered (id, predicate) pairs; order here is detection order.
DEFAULT_RULES = (
    (SignalId.LONG_URL, is_long_url),
    (SignalId.AT_SYMBOL, has_at_symbol),
    (SignalId.IP_HOST, has_ip_host),
    (SignalId.EXCESS_HYPHENS, has_excess_hyphens),
    (SignalId.SENSITIVE_KEYWORD, has_sensitive_keyword),
    (SignalId.INSECURE_SCHEME, has_insecure_scheme),
    (SignalId.EMPTY_HOST, has_empty_host),
)

EXTENDED_RULES = DEFAULT_RULES + (
    (SignalId.PUNYCODE_HOST, has_punycode_host),
    (SignalId.EMBEDDED_URL, has_embedded_url),
    (SignalId.DIGIT_HEAVY_HOST, is_digit_heavy_host),
    (SignalId.RANDOM_LOOKING_HOST, is_random_looking_host),
    (SignalId.BRAND_LOOKALIKE, is_brand_lookalike),
)

RULE_SETS = {
    'default': DEFAULT_RULES,
    'extended': EXTENDED_RULES,
}


def describe_rules(rules=DEFAULT_RULES) -> list:
    """Return the rule table as a list of dicts (id, weight, description)."""
    return [make_signal(signal_id).to_dict() for signal_id, _ in rules]


def extract_signals(parsed: ParsedUrl, rules=DEFAULT_RULES) -> tuple:
    """
    Evaluate every rule against parsed and return the fired Signals.

    All rules are evaluated; none short-circuits another. Each rule fires at
    most once, and the result keeps the order of the rule set.
    """
    return tuple(make_signal(signal_id) for signal_id, predicate in rules if predicate(parsed))
