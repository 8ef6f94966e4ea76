"""
Feature extraction: text -> ordered sequence of byte-string features.

Modes (each with a window size ``n >= 1``):

- BYTES: every run of ``n`` consecutive bytes of the UTF-8 encoding.
- CHARS: every run of ``n`` consecutive code points.
- GRAPHEMES: every run of ``n`` consecutive extended grapheme clusters.
- WORDS: every run of ``n`` consecutive tokens, joined by a single space.

All windows slide by one unit. Input shorter than the window yields nothing.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from itertools import groupby
from typing import Iterable, Iterator, Union

import regex

from .errors import InvalidConfiguration, MalformedText

TextInput = Union[str, bytes, bytearray, memoryview]

_GRAPHEME = regex.compile(r"\X")
_WORD_CHAR = regex.compile(r"\w")


class FeatureType(str, Enum):
    BYTES = "bytes"
    CHARS = "chars"
    GRAPHEMES = "graphemes"
    WORDS = "words"

    @classmethod
    def parse(cls, value: "FeatureType | str") -> "FeatureType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(f.value for f in cls)
            raise InvalidConfiguration(
                f"Unknown feature type {value!r} (expected one of: {choices})"
            ) from exc


class WordPolicy(str, Enum):
    # Runs of non-word, non-space characters become tokens of their own
    PUNCTUATION = "punctuation"
    # Only word runs are kept
    WORDS_ONLY = "words_only"

    @classmethod
    def parse(cls, value: "WordPolicy | str") -> "WordPolicy":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            choices = ", ".join(p.value for p in cls)
            raise InvalidConfiguration(
                f"Unknown word policy {value!r} (expected one of: {choices})"
            ) from exc


@dataclass(frozen=True, slots=True)
class FeatureMode:
    kind: FeatureType
    n: int = 1
    word_policy: WordPolicy = WordPolicy.PUNCTUATION

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", FeatureType.parse(self.kind))
        object.__setattr__(self, "word_policy", WordPolicy.parse(self.word_policy))
        n = self.n
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidConfiguration(f"Window size must be an integer, got {n!r}")
        if n < 1:
            raise InvalidConfiguration(f"Window size must be greater than 0, got {n}")

    @classmethod
    def bytes(cls, n: int = 1) -> "FeatureMode":
        return cls(FeatureType.BYTES, n)

    @classmethod
    def chars(cls, n: int = 1) -> "FeatureMode":
        return cls(FeatureType.CHARS, n)

    @classmethod
    def graphemes(cls, n: int = 1) -> "FeatureMode":
        return cls(FeatureType.GRAPHEMES, n)

    @classmethod
    def words(cls, n: int = 1, word_policy: WordPolicy | str = WordPolicy.PUNCTUATION) -> "FeatureMode":
        return cls(FeatureType.WORDS, n, WordPolicy.parse(word_policy))

    def __str__(self) -> str:
        label = f"{self.kind.value.capitalize()}({self.n})"
        if self.kind is FeatureType.WORDS and self.word_policy is not WordPolicy.PUNCTUATION:
            label += f"[{self.word_policy.value}]"
        return label


def resolve_mode(
    features: FeatureMode | FeatureType | str = FeatureType.BYTES,
    n: int = 1,
    word_policy: WordPolicy | str = WordPolicy.PUNCTUATION,
) -> FeatureMode:
    """Accept either a ready ``FeatureMode`` or a feature type plus window size."""
    if isinstance(features, FeatureMode):
        return features
    return FeatureMode(FeatureType.parse(features), n, WordPolicy.parse(word_policy))


def as_bytes(text: TextInput) -> bytes:
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text)
    if isinstance(text, str):
        # Lone surrogates are kept as-is; byte features never reject input.
        return text.encode("utf-8", "surrogatepass")
    raise TypeError(f"Expected str or bytes, got {type(text).__name__}")


def as_text(text: TextInput) -> str:
    if isinstance(text, (bytes, bytearray, memoryview)):
        try:
            return bytes(text).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedText(f"Input is not valid UTF-8: {exc}") from exc
    if isinstance(text, str):
        try:
            text.encode("utf-8")
        except UnicodeEncodeError as exc:
            raise MalformedText(f"Input cannot be encoded as UTF-8: {exc}") from exc
        return text
    raise TypeError(f"Expected str or bytes, got {type(text).__name__}")


def sliding(items: Iterable[str], n: int) -> Iterator[tuple[str, ...]]:
    window: deque[str] = deque(maxlen=n)
    for item in items:
        window.append(item)
        if len(window) == n:
            yield tuple(window)


def graphemes(text: str) -> Iterator[str]:
    for match in _GRAPHEME.finditer(text):
        yield match.group()


def _token_class(cluster: str) -> str:
    head = cluster[0]
    if head.isspace():
        return "space"
    if _WORD_CHAR.match(head):
        return "word"
    return "punct"


def word_tokens(text: str, policy: WordPolicy = WordPolicy.PUNCTUATION) -> Iterator[str]:
    """
    Tokenize ``text`` on whitespace, splitting punctuation runs off words.

    Tokens are built from whole grapheme clusters, so combining marks stay with
    their base letter and emoji sequences are never cut. A cluster is a word
    character when its first code point matches ``\\w``.
    """
    for cls, run in groupby(graphemes(text), key=_token_class):
        if cls == "space":
            continue
        if cls == "punct" and policy is WordPolicy.WORDS_ONLY:
            continue
        yield "".join(run)


def _byte_windows(data: bytes, n: int) -> Iterator[bytes]:
    for start in range(len(data) - n + 1):
        yield data[start:start + n]


def _char_windows(text: str, n: int) -> Iterator[bytes]:
    for start in range(len(text) - n + 1):
        yield text[start:start + n].encode("utf-8")


def _grapheme_windows(text: str, n: int) -> Iterator[bytes]:
    for window in sliding(graphemes(text), n):
        yield "".join(window).encode("utf-8")


def _word_windows(text: str, n: int, policy: WordPolicy) -> Iterator[bytes]:
    for window in sliding(word_tokens(text, policy), n):
        yield " ".join(window).encode("utf-8")


class FeatureSequence:
    """Lazy, restartable view over the features of one input."""

    __slots__ = ("_mode", "_text")

    def __init__(self, mode: FeatureMode, text: TextInput) -> None:
        self._mode = mode
        self._text = text

    @property
    def mode(self) -> FeatureMode:
        return self._mode

    def __iter__(self) -> Iterator[bytes]:
        mode = self._mode
        if mode.kind is FeatureType.BYTES:
            return _byte_windows(as_bytes(self._text), mode.n)
        text = as_text(self._text)
        if mode.kind is FeatureType.CHARS:
            return _char_windows(text, mode.n)
        if mode.kind is FeatureType.GRAPHEMES:
            return _grapheme_windows(text, mode.n)
        return _word_windows(text, mode.n, mode.word_policy)

    def __repr__(self) -> str:
        return f"<FeatureSequence {self._mode} len(input)={len(self._text)}>"


class FeatureExtractor:
    def __init__(self, mode: FeatureMode) -> None:
        if not isinstance(mode, FeatureMode):
            raise InvalidConfiguration(f"Expected a FeatureMode, got {type(mode).__name__}")
        self.mode = mode

    def extract(self, text: TextInput) -> FeatureSequence:
        return FeatureSequence(self.mode, text)

    def __call__(self, text: TextInput) -> FeatureSequence:
        return self.extract(text)


def features(
    text: TextInput,
    features: FeatureMode | FeatureType | str = FeatureType.BYTES,
    n: int = 1,
    word_policy: WordPolicy | str = WordPolicy.PUNCTUATION,
) -> list[bytes]:
    """Return every feature of ``text`` in order."""
    mode = resolve_mode(features, n, word_policy)
    return list(FeatureExtractor(mode).extract(text))
