from importlib import metadata

from .api import features, group_texts, hash
from .errors import InvalidConfiguration, KeyNotFound, MalformedText, SimdupError
from .features import FeatureExtractor, FeatureMode, FeatureSequence, FeatureType, WordPolicy
from .hashing import HashMethod
from .simdict import SimDict
from .simhasher import SimHasher
from .value import SimHash

try:
    __version__ = metadata.version("simdup")
except metadata.PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "FeatureExtractor",
    "FeatureMode",
    "FeatureSequence",
    "FeatureType",
    "HashMethod",
    "InvalidConfiguration",
    "KeyNotFound",
    "MalformedText",
    "SimDict",
    "SimHash",
    "SimHasher",
    "SimdupError",
    "WordPolicy",
    "features",
    "group_texts",
    "hash",
]
