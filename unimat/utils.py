# unimat/utils.py
import concurrent.futures
import os
from typing import Callable, Iterable, Optional
import numpy as np
from .params import bcolors

def parallel_map(fn: Callable, items: Iterable, workers: Optional[int] = None) -> list:
    """Run fn over items on a thread pool; results keep the order of items."""
    items = list(items)
    if len(items) <= 1 or workers == 1:
        return [fn(item) for item in items]
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
        return list(executor.map(fn, items))

def make_rng(rng: Optional[np.random.Generator] = None) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()

def int_to_words_be(value: int, count: int, bits: int = 16) -> list[int]:
    """Big-endian split of a non-negative integer into `count` words of `bits` bits."""
    if value < 0 or value >= 1 << (bits * count):
        raise ValueError(f"{bcolors.FAIL}Integer {value} does not fit in {count} x {bits}-bit words{bcolors.ENDC}")
    mask = (1 << bits) - 1
    return [(value >> (bits * (count - 1 - i))) & mask for i in range(count)]

def words_be_to_int(words: Iterable[int], bits: int = 16) -> int:
    mask = (1 << bits) - 1
    out = 0
    for w in words:
        out = (out << bits) | (int(w) & mask)
    return out

def derived_path(path: str, tag: str) -> str:
    """notes.txt -> notes-encrypted.txt"""
    stem, ext = os.path.splitext(path)
    return f"{stem}-{tag}{ext}"
