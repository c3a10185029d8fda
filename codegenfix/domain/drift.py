from __future__ import annotations


class DriftIndex:
    """Maps original line numbers to current line numbers.

    Every block inserted before original line ``n`` shifts ``n`` and every
    later line by the block length, so the mapping stays non-decreasing.
    """

    def __init__(self, line_count: int):
        self._index = list(range(line_count))

    def __len__(self) -> int:
        return len(self._index)

    def current(self, original_line: int) -> int:
        return self._index[original_line]

    def shift(self, original_line: int, count: int) -> None:
        for i in range(original_line, len(self._index)):
            self._index[i] += count

    def as_list(self) -> list[int]:
        return list(self._index)
