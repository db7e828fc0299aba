from __future__ import annotations
"""
Text normalization and tokenization for the recommender.

These helpers perform basic cleaning (HTML stripping, unicode
normalization, whitespace collapsing) and turn a document body into
the ordered list of feature terms the vectorizer consumes: stemmed
unigrams followed by underscore-joined n-grams.  The recommender only
relies on the ``tokenize(text) -> list[str]`` shape, so any callable
with that signature can replace the default here.
"""

import re
import unicodedata
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from bs4 import BeautifulSoup

from .config import MIN_TOKEN_CHARS, NGRAM_JOINER, NGRAM_MAX, STOPWORDS

Tokenizer = Callable[[str], List[str]]


@dataclass(frozen=True)
class TokenizerConfig:
    lowercase: bool = True
    remove_stopwords: bool = True
    stemming: bool = True
    ngram_max: int = NGRAM_MAX  # 1 disables n-grams


# ---------------------------
# Basic helpers
# ---------------------------

def strip_html(raw: str) -> str:
    """
    Replace HTML tags with spaces using BeautifulSoup.  Plain text
    (no '<') is returned untouched.
    """
    if not raw:
        return ""
    # Fast path: if there's no '<', it's almost certainly not HTML
    if "<" not in raw:
        return raw
    soup = BeautifulSoup(raw, "lxml")
    return soup.get_text(" ")


def normalize_unicode(text: str) -> str:
    """
    Normalize weird unicode (fancy quotes, etc.) into a more stable
    form.  Using NFC keeps things mostly intact but canonicalized.
    """
    if not text:
        return ""
    return unicodedata.normalize("NFC", text)


def normalize_whitespace(text: str) -> str:
    """
    Collapse all whitespace runs into a single space and strip edges.
    """
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def basic_clean(text: str) -> str:
    """
    Markup-free, NFC-normalized, single-spaced version of ``text``.
    """
    if text is None:
        return ""
    text = strip_html(str(text))
    text = normalize_unicode(text)
    return normalize_whitespace(text)


# ---------------------------
# Tokenization
# ---------------------------

WORD_SPLIT_RE = re.compile(r"[^\w]+")


def split_words(text: str, lowercase: bool = True) -> List[str]:
    if not text:
        return []
    if lowercase:
        text = text.lower()
    return [t for t in WORD_SPLIT_RE.split(text) if t and t != "_"]


def light_stem(token: str) -> str:
    # Suffix stripping that always leaves at least three characters
    t = token
    if len(t) > 5 and t.endswith("ies"):
        return t[:-3] + "y"     # stories -> story
    if len(t) > 5 and t.endswith("ing"):
        return t[:-3]           # learning -> learn
    if len(t) > 4 and t.endswith("ed") and not t.endswith("eed"):
        return t[:-2]           # worked -> work
    if len(t) > 4 and t.endswith(("sses", "xes", "ches", "shes")):
        return t[:-2]           # boxes -> box
    if len(t) > 3 and t.endswith("s") and not t.endswith(("ss", "us", "is")):
        return t[:-1]           # books -> book
    return t


def _is_term(token: str, cfg: TokenizerConfig) -> bool:
    if len(token) < MIN_TOKEN_CHARS or token.isdigit():
        return False
    if cfg.remove_stopwords and token in STOPWORDS:
        return False
    return True


def _stem(token: str, cfg: TokenizerConfig) -> str:
    return light_stem(token) if cfg.stemming else token


def ngrams(words: Sequence[str], n: int, cfg: TokenizerConfig) -> List[str]:
    """
    Contiguous n-grams over the raw word stream.  An n-gram survives
    only if every word in it would survive as a unigram, so stopwords
    never glue phrases together.
    """
    out: List[str] = []
    for start in range(len(words) - n + 1):
        window = words[start:start + n]
        if all(_is_term(w, cfg) for w in window):
            out.append(NGRAM_JOINER.join(_stem(w, cfg) for w in window))
    return out


def tokenize(text: str, cfg: Optional[TokenizerConfig] = None) -> List[str]:
    """
    Default tokenizer: clean, split, drop stopwords, stem, then append
    bigrams and trigrams (up to ``cfg.ngram_max``).
    """
    cfg = cfg or TokenizerConfig()
    words = split_words(basic_clean(text), lowercase=cfg.lowercase)
    tokens = [_stem(w, cfg) for w in words if _is_term(w, cfg)]
    for n in range(2, cfg.ngram_max + 1):
        tokens.extend(ngrams(words, n, cfg))
    return tokens


def make_tokenizer(cfg: TokenizerConfig) -> Tokenizer:
    """Bind a config so the result fits the ``Tokenizer`` shape."""
    def _tokenize(text: str) -> List[str]:
        return tokenize(text, cfg)
    return _tokenize
