from __future__ import annotations

import enum
from typing import Iterable


class InvalidWord(ValueError):
    """Raised when a word cannot be stored in the index."""


class Status(enum.Enum):
    WORD = "word"
    POSSIBLE = "possible"
    IMPOSSIBLE = "impossible"


class TrieNode:
    __slots__ = ("children", "is_word")

    def __init__(self):
        self.children: dict[str, TrieNode] = {}
        self.is_word: bool = False


class PrefixIndex:
    """Letter tree over a fixed vocabulary.

    Built once with :meth:`build` and only queried afterwards, so a single
    index can be shared between searches running in different threads.
    """

    __slots__ = ("_root", "_size")

    def __init__(self):
        self._root = TrieNode()
        self._size = 0

    @classmethod
    def build(cls, words: Iterable[str]) -> PrefixIndex:
        index = cls()
        for word in words:
            index._insert(word)
        return index

    def _insert(self, word: str):
        if not word:
            raise InvalidWord("cannot insert an empty word")
        node = self._root
        for ch in word:
            if ch not in node.children:
                node.children[ch] = TrieNode()
            node = node.children[ch]
        if not node.is_word:
            node.is_word = True
            self._size += 1

    def root(self) -> TrieNode:
        return self._root

    @staticmethod
    def child(node: TrieNode, letter: str) -> TrieNode | None:
        return node.children.get(letter)

    @staticmethod
    def is_word(node: TrieNode) -> bool:
        return node.is_word

    def walk(self, letters: str) -> TrieNode | None:
        """Follow ``letters`` from the root; None as soon as the prefix dies."""
        node = self._root
        for ch in letters:
            node = node.children.get(ch)
            if node is None:
                return None
        return node

    def word_status(self, letters: str) -> Status:
        node = self.walk(letters)
        if node is None:
            return Status.IMPOSSIBLE
        if node.is_word:
            return Status.WORD
        # The root of an empty index has no children.
        return Status.POSSIBLE if node.children else Status.IMPOSSIBLE

    def has_prefix(self, letters: str) -> bool:
        return self.word_status(letters) is not Status.IMPOSSIBLE

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        node = self.walk(word)
        return node is not None and node.is_word

    def __len__(self) -> int:
        return self._size

    def node_count(self) -> int:
        count = 0
        stack = [self._root]
        while stack:
            node = stack.pop()
            count += 1
            stack.extend(node.children.values())
        return count
