from typing import Sequence

# All helpers read sequences newest-first: index 0 is the latest hand.


def leading_streak(history: Sequence) -> int:
    if not history:
        return 0
    first = history[0]
    n = 0
    for h in history:
        if h != first:
            break
        n += 1
    return n


def block_repeats(history: Sequence, length: int) -> bool:
    if length <= 0 or len(history) < 2 * length:
        return False
    return list(history[:length]) == list(history[length:2 * length])


def alternates(history: Sequence, terms: int = 3) -> bool:
    if len(history) < terms:
        return False
    return all(history[i] != history[i + 1] for i in range(terms - 1))


def _matches_shape(chunk: Sequence, shape: str) -> bool:
    # same letter -> same outcome, different letters -> different outcomes
    seen = {}
    for letter, value in zip(shape, chunk):
        if letter in seen:
            if seen[letter] != value:
                return False
        else:
            if value in seen.values():
                return False
            seen[letter] = value
    return True


def shape_score(history: Sequence, shape: str, window: int = 24, start: int = 0) -> int:
    """Count tiles of ``history[start:start + window]`` shaped like ``shape``.

    The window is cut into consecutive, non-overlapping tiles of
    ``len(shape)`` hands. ``"XXYY"`` counts 2-2 blocks, ``"XXY"`` counts 2-1
    blocks. Pass ``start`` to skip a run that is still being played out.
    """
    seq = list(history[start:start + window])
    size = len(shape)
    return sum(
        1 for i in range(0, len(seq) - size + 1, size)
        if _matches_shape(seq[i:i + size], shape)
    )


def runs(history: Sequence, k: int = 3):
    labels = list(history)
    out = []
    if not labels:
        return out
    cur = labels[0]
    start = 0
    for i in range(1, len(labels)):
        if labels[i] == cur:
            continue
        seg_len = i - start
        if seg_len >= k:
            out.append((start, i - 1, cur, seg_len))
        cur = labels[i]
        start = i
    # tail
    seg_len = len(labels) - start
    if seg_len >= k:
        out.append((start, len(labels) - 1, cur, seg_len))
    return out
