"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing utilities using FileEntry and pluggable hash algorithms.

HasherImpl computes two hashes:
- quick hash: xxHash64 over the first HashingConfig.QUICK_HASH_SIZE bytes
- full hash:  SHA-256 over the whole file, streamed in fixed-size reads

Both return None when the file cannot be opened or read, which drops the
file from the pipeline without affecting its siblings.
"""

import hashlib
import logging
from typing import Optional, Any

import xxhash

from dupfinder.core.models import FileEntry
from dupfinder.core.interfaces import Hasher, HashAlgorithm

logger = logging.getLogger(__name__)


class HashingConfig:
    # Changing either of the first two changes which files reach full hashing,
    # never which files are reported.
    QUICK_HASH_SIZE = 8 * 1024
    QUICK_HASH_SEED = 0
    FULL_HASH_BUFFER_SIZE = 64 * 1024


# Use the same way to implement and use any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    """Non-cryptographic 64-bit hash; keys are unsigned ints."""

    def __init__(self, seed: int = HashingConfig.QUICK_HASH_SEED):
        self.seed = seed

    def new(self) -> Any:
        return xxhash.xxh64(seed=self.seed)

    def finish(self, state: Any) -> int:
        return state.intdigest()


class SHA256AlgorithmImpl(HashAlgorithm):
    """Cryptographic 256-bit hash; keys are lowercase hex strings."""

    def new(self) -> Any:
        return hashlib.sha256()

    def finish(self, state: Any) -> str:
        return state.hexdigest()


class HasherImpl(Hasher):
    """
    A hasher that supports any algorithm via the HashAlgorithm interface.
    Holds no per-file state, so one instance can be shared by all workers.
    """

    def __init__(
            self,
            quick_algorithm: Optional[HashAlgorithm] = None,
            full_algorithm: Optional[HashAlgorithm] = None,
            quick_size: int = HashingConfig.QUICK_HASH_SIZE,
            buffer_size: int = HashingConfig.FULL_HASH_BUFFER_SIZE,
    ):
        self.quick_algorithm = quick_algorithm or XXHashAlgorithmImpl()
        self.full_algorithm = full_algorithm or SHA256AlgorithmImpl()
        self.quick_size = quick_size
        self.buffer_size = buffer_size

    def compute_quick_hash(self, file: FileEntry) -> Optional[int]:
        """Hash of the first quick_size bytes (the whole file if shorter)."""
        try:
            with open(file.path, 'rb') as f:
                data = f.read(self.quick_size)
        except OSError as e:
            logger.debug(f"Dropping {file.path}: quick hash read failed: {e}")
            return None
        state = self.quick_algorithm.new()
        state.update(data)
        return self.quick_algorithm.finish(state)

    def compute_full_hash(self, file: FileEntry) -> Optional[str]:
        """Hash of the entire content, read buffer_size bytes at a time."""
        state = self.full_algorithm.new()
        try:
            with open(file.path, 'rb') as f:
                while True:
                    chunk = f.read(self.buffer_size)
                    if not chunk:
                        break
                    state.update(chunk)
        except OSError as e:
            logger.debug(f"Dropping {file.path}: full hash read failed: {e}")
            return None
        return self.full_algorithm.finish(state)
