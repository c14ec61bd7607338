from cheapswap.analysis.similarity import (
    DEFAULT_WEIGHTS,
    TYPE_FAMILIES,
    ScoringWeights,
    jaccard,
    primary_type_family,
    similarity_score,
)
from cheapswap.analysis.tokenizer import STOPWORDS, tokenize_oracle, tokenize_text

__all__ = [
    "DEFAULT_WEIGHTS",
    "STOPWORDS",
    "TYPE_FAMILIES",
    "ScoringWeights",
    "jaccard",
    "primary_type_family",
    "similarity_score",
    "tokenize_oracle",
    "tokenize_text",
]
