"""
Candidate scoring for LinkVerify.

Scores every candidate record against a query in one pass and summarizes
the score distribution, for reporting and threshold calibration. The
single-winner decision itself is made by PPRLService.perform_pprl.
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from .models import DataProviderRecord, PPRLRequest
from .pprl_service import PPRLService

logger = logging.getLogger(__name__)

SCORE_COLUMNS = ["record_id", "provider_id", "similarity", "qualifies", "rank"]


class CandidateScorer:
    """
    Batch Bloom filter scorer built on a PPRLService.

    Produces one row per candidate so operators can see how close the
    runners-up came to the threshold.
    """

    def __init__(self, service: PPRLService):
        """
        Initialize candidate scorer.

        Args:
            service: PPRL service supplying hashing and filter construction
        """
        self.service = service
        logger.info("Initialized CandidateScorer")

    def score_candidates(self, request: PPRLRequest,
                         provider_records: List[DataProviderRecord]) -> pd.DataFrame:
        """
        Score all candidate records against a query.

        Args:
            request: Query fields and threshold
            provider_records: Candidate records in scan order

        Returns:
            DataFrame with record_id, provider_id, similarity, qualifies, and
            rank (1 = best; ties keep scan order)
        """
        if not provider_records:
            return pd.DataFrame(columns=SCORE_COLUMNS)

        query_bloom_filter = self.service.create_query_bloom_filter(request)

        rows = []
        for record in provider_records:
            record_bloom_filter = self.service.create_bloom_filter_for_record(record)
            similarity = self.service.calculate_bloom_filter_similarity(query_bloom_filter,
                                                                         record_bloom_filter)
            rows.append({
                "record_id": record.id,
                "provider_id": record.provider_id,
                "similarity": similarity,
                "qualifies": similarity >= request.threshold
            })

        scored_df = pd.DataFrame(rows)
        scored_df["rank"] = scored_df["similarity"].rank(method="first", ascending=False).astype(int)

        logger.info(f"Scored {len(scored_df)} candidate records, "
                    f"{int(scored_df['qualifies'].sum())} at or above threshold")
        return scored_df

    def best_match(self, scored_df: pd.DataFrame) -> Optional[pd.Series]:
        """
        Get the top-ranked candidate if it qualifies.

        Args:
            scored_df: Output of score_candidates()

        Returns:
            Row of the best qualifying candidate, or None
        """
        if scored_df.empty:
            return None

        best = scored_df.loc[scored_df["rank"] == 1].iloc[0]
        return best if bool(best["qualifies"]) else None

    def get_scoring_statistics(self, scored_df: pd.DataFrame) -> Dict[str, Any]:
        """
        Calculate statistics for candidate similarity scores.

        Args:
            scored_df: Output of score_candidates()

        Returns:
            Dictionary with scoring statistics
        """
        if scored_df.empty:
            return {
                "total_candidates": 0,
                "qualifying_candidates": 0,
                "score_statistics": {},
                "score_distribution": {}
            }

        scores = scored_df["similarity"]

        return {
            "total_candidates": len(scored_df),
            "qualifying_candidates": int(scored_df["qualifies"].sum()),
            "score_statistics": {
                "mean_score": float(scores.mean()),
                "median_score": float(scores.median()),
                "std_score": float(scores.std()) if len(scores) > 1 else 0.0,
                "min_score": float(scores.min()),
                "max_score": float(scores.max())
            },
            "score_distribution": {
                "0.0-0.2": int((scores <= 0.2).sum()),
                "0.2-0.4": int(((scores > 0.2) & (scores <= 0.4)).sum()),
                "0.4-0.6": int(((scores > 0.4) & (scores <= 0.6)).sum()),
                "0.6-0.8": int(((scores > 0.6) & (scores <= 0.8)).sum()),
                "0.8-1.0": int((scores > 0.8).sum())
            }
        }
