"""Text utilities shared by ingestion and synthesis.

Text handling contract
----------------------
* Incoming documents have BOM markers stripped and are NFKC-normalized so
  that chunking and hashing see the same characters for the same content.
* Whitespace runs (including newlines) collapse to one space before
  chunking; chunk boundaries come from sentence punctuation, not layout.
"""

import re
import unicodedata

SENTENCE_SPLIT = re.compile(r"[.!?]+")
_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    """Remove BOM markers, normalize, and collapse whitespace.

    Args:
        text: Raw extracted text.

    Returns:
        Single-line text with one space between words.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    cleaned = unicodedata.normalize("NFKC", cleaned)
    return _WHITESPACE.sub(" ", cleaned).strip()


def split_sentences(text: str) -> list[str]:
    """Split on runs of ``.``, ``!`` and ``?``, dropping blank pieces."""
    return [part.strip() for part in SENTENCE_SPLIT.split(text) if part.strip()]


def chunk_text(
    text: str,
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    min_length: int = 50,
) -> list[str]:
    """Split text into sentence-aligned, overlapping chunks.

    Sentences are accumulated until the next one, with its ". " separator,
    would push the buffer past ``chunk_size``. The closed chunk's last ``chunk_overlap // 10`` words
    then seed the next buffer. A sentence longer than ``chunk_size`` becomes
    its own chunk; sentences are never cut.

    Args:
        text: Cleaned text to chunk.
        chunk_size: Target maximum chunk length in characters.
        chunk_overlap: Overlap budget; one word is carried per 10 characters.
        min_length: Chunks shorter than this are discarded.

    Returns:
        Chunks in order of appearance.

    Raises:
        ValueError: If chunk_size is not positive or chunk_overlap is negative.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if chunk_overlap < 0:
        raise ValueError("chunk_overlap must be non-negative")

    if not text:
        return []

    overlap_words = chunk_overlap // 10
    chunks: list[str] = []
    current = ""

    for sentence in split_sentences(text):
        separator = len(". ") if current else 0
        if len(current) + separator + len(sentence) > chunk_size:
            if current:
                chunks.append(current.strip())
                seed = current.split(" ")[-overlap_words:] if overlap_words else []
                current = " ".join(seed + [sentence])
            else:
                current = sentence
        else:
            current += (". " if current else "") + sentence

    if current.strip():
        chunks.append(current.strip())

    return [chunk for chunk in chunks if len(chunk) >= min_length]
