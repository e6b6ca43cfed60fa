from .hash_adapter import HashEmbeddingAdapter
from .sentence_transformer_adapter import SentenceTransformerEmbeddingAdapter

__all__ = ["HashEmbeddingAdapter", "SentenceTransformerEmbeddingAdapter"]
