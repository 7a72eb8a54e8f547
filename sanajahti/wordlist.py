import logging
from pathlib import Path

from sanajahti.trie import PrefixIndex

logger = logging.getLogger("sanajahti")

BOM = "\ufeff"


def read_words(path: str | Path, min_length: int = 3) -> list[str]:
    """Read a newline-delimited wordlist, upper-cased.

    Lines shorter than ``min_length`` or containing anything but letters are
    skipped. A byte-order mark at the start of the file is ignored.
    """
    words: list[str] = []
    skipped = 0
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            word = line.lstrip(BOM).strip().upper()
            if not word:
                continue
            if len(word) >= min_length and word.isalpha():
                words.append(word)
            else:
                skipped += 1
    logger.info("Read %d words from %s (%d skipped, min_length=%d)", len(words), path, skipped, min_length)
    return words


def load_index(path: str | Path, min_length: int = 3) -> PrefixIndex:
    index = PrefixIndex.build(read_words(path, min_length))
    logger.info("Index built: %d words", len(index))
    return index
