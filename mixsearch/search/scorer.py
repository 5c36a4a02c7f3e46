"""
BM25 scorer with corpus-wide IDF.

BM25 (Best Match 25) is a probabilistic ranking function used for information retrieval.

Formula:
    score(D, Q) = Σ IDF(q) × (tf × (k1 + 1)) / (tf + k1 × (1 - b + b × dl/avgdl))
    IDF(q)      = ln(1 + (N - df + 0.5) / (df + 0.5))

Where:
    tf = term frequency in document
    df = number of documents containing the term (whole corpus, not just the search scope)
    N = total documents in the corpus
    k1 = term frequency saturation parameter (default: 1.2)
    b = length normalization parameter (default: 0.75)
    dl = document length (number of tokens)
    avgdl = average document length over the corpus

Every term contribution is floored at 0.
"""

import math
from typing import Dict, Iterable


class BM25:
    """
    BM25 scoring over precomputed corpus statistics.
    """

    def __init__(self, k1: float = 1.2, b: float = 0.75):
        """
        Initialize BM25 scorer.

        Args:
            k1: Term frequency saturation parameter
                Higher = more weight to term frequency
                Range: 1.2 - 2.0
                Default: 1.2 (standard)

            b: Length normalization parameter
                Higher = more penalty for long documents
                Range: 0.0 - 1.0
                Default: 0.75 (standard)
        """
        self.k1 = k1
        self.b = b

    def idf(self, document_frequency: int, total_documents: int) -> float:
        if total_documents <= 0:
            return 0.0
        df = max(0, min(document_frequency, total_documents))
        return max(math.log(1 + (total_documents - df + 0.5) / (df + 0.5)), 0.0)

    def term_score(self, tf: float, doc_length: int, avg_doc_length: float) -> float:
        """
        Saturated, length-normalized term frequency (no IDF).

        Example:
            >>> scorer = BM25()
            >>> scorer.term_score(5, 50, 275) > scorer.term_score(1, 500, 275)
            True
        """
        if tf <= 0:
            return 0.0

        # avgdl is 0 only for a corpus of empty documents
        length_ratio = doc_length / avg_doc_length if avg_doc_length > 0 else 1.0
        numerator = tf * (self.k1 + 1)
        denominator = tf + self.k1 * (1 - self.b + self.b * length_ratio)
        return numerator / denominator

    def score(
        self,
        query_terms: Iterable[str],
        doc_term_frequencies: Dict[str, float],
        doc_length: int,
        avg_doc_length: float,
        document_frequencies: Dict[str, int],
        total_documents: int,
    ) -> float:
        """
        Compute BM25 score for one document given query terms.

        Args:
            query_terms: Query terms (each counted once)
            doc_term_frequencies: Term frequency map {term: count}
            doc_length: Total number of tokens in document
            avg_doc_length: Corpus average document length
            document_frequencies: {term: df} for the query terms
            total_documents: Corpus size N

        Returns:
            BM25 score (>= 0, higher = more relevant)
        """
        if not doc_term_frequencies:
            return 0.0

        score = 0.0
        for term in dict.fromkeys(query_terms):
            tf = doc_term_frequencies.get(term, 0)
            if tf == 0:
                continue
            idf = self.idf(document_frequencies.get(term, 0), total_documents)
            score += max(idf * self.term_score(tf, doc_length, avg_doc_length), 0.0)
        return score
