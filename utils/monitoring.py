"""
Monitoring and metrics for the hotel search system.
"""
import logging
import time
from collections import deque
from typing import Any, Deque, Dict, Optional

import numpy as np

logger = logging.getLogger(__name__)

QUERY_INTENTS = ["most_expensive", "cheapest", "price_range", "normal"]
BRANCHES = ["results", "clarification", "error"]


class SearchSystemMonitor:
    """Aggregates per-request outcomes of the search pipeline."""

    def __init__(self, window_size: int = 1000):
        """
        Initialize the monitoring system.

        Args:
            window_size: Number of recent response times kept for percentiles
        """
        logger.info("Initializing search system monitor")
        self.queries_processed = 0
        self.error_count = 0
        self.clarification_count = 0
        self.empty_result_count = 0
        self.hotels_returned = 0
        self.intent_distribution: Dict[str, int] = {}
        self.branch_counts: Dict[str, int] = {branch: 0 for branch in BRANCHES}
        self.hourly_query_count: Dict[str, int] = {}
        self._response_times: Deque[float] = deque(maxlen=window_size)
        self._total_time = 0.0

        self.intent_stats = {
            intent: {"count": 0, "total_time": 0.0, "errors": 0, "empty": 0}
            for intent in QUERY_INTENTS
        }

    @property
    def avg_response_time(self) -> float:
        return self._total_time / max(1, self.queries_processed)

    def log_search(self, query: str, result: Dict[str, Any], execution_time: float):
        """
        Record one search execution.

        Args:
            query: The search query
            result: The final search state, or the initial state plus "error" on failure
            execution_time: Time taken to execute the search in seconds
        """
        self.queries_processed += 1
        self._total_time += execution_time
        self._response_times.append(execution_time)

        if result.get("error"):
            branch = "error"
            self.error_count += 1
        elif result.get("response_type") == "clarification":
            branch = "clarification"
            self.clarification_count += 1
        else:
            branch = "results"
        self.branch_counts[branch] += 1

        returned = len(result.get("ranked_results") or [])
        is_empty = branch == "results" and returned == 0
        if is_empty:
            self.empty_result_count += 1
        self.hotels_returned += returned

        intent = result.get("metadata", {}).get("query_intent", "unknown")
        self.intent_distribution[intent] = self.intent_distribution.get(intent, 0) + 1

        stats = self.intent_stats.get(intent)
        if stats is not None:
            stats["count"] += 1
            stats["total_time"] += execution_time
            stats["errors"] += int(branch == "error")
            stats["empty"] += int(is_empty)

        current_hour = time.strftime("%Y-%m-%d-%H")
        self.hourly_query_count[current_hour] = self.hourly_query_count.get(current_hour, 0) + 1

        logger.debug(f"Logged search for query: '{query}', intent: {intent}, "
                     f"branch: {branch}, hotels: {returned}, time: {execution_time:.2f}s")

    def _rate(self, count: int) -> float:
        return count / max(1, self.queries_processed)

    def response_time_percentile(self, percentile: float) -> Optional[float]:
        if not self._response_times:
            return None
        return float(np.percentile(np.array(self._response_times), percentile))

    def performance_by_intent(self) -> Dict[str, Dict[str, float]]:
        report = {}
        for intent, stats in self.intent_stats.items():
            count = stats["count"]
            report[intent] = {
                "count": count,
                "avg_time": stats["total_time"] / count if count else 0.0,
                "error_rate": stats["errors"] / count if count else 0.0,
                "empty_rate": stats["empty"] / count if count else 0.0,
            }
        return report

    def get_system_health(self) -> Dict[str, Any]:
        """
        Get system health metrics.

        Returns:
            Dictionary of health metrics
        """
        return {
            "queries_processed": self.queries_processed,
            "error_rate": self._rate(self.error_count),
            "intent_distribution": dict(self.intent_distribution),
            "avg_response_time": self.avg_response_time,
            "p95_response_time": self.response_time_percentile(95),
        }

    def get_performance_report(self) -> Dict[str, Any]:
        """
        Generate a performance report.

        Returns:
            Dictionary with summary, intent breakdown and latency figures
        """
        results_count = self.branch_counts["results"]
        return {
            "summary": {
                "total_queries": self.queries_processed,
                "error_rate": self._rate(self.error_count),
                "clarification_rate": self._rate(self.clarification_count),
                "empty_result_rate": self._rate(self.empty_result_count),
                "avg_hotels_returned": self.hotels_returned / max(1, results_count),
                "avg_response_time": self.avg_response_time
            },
            "branches": dict(self.branch_counts),
            "intent_breakdown": {
                intent: {
                    "query_count": count,
                    "percentage": self._rate(count) * 100
                }
                for intent, count in self.intent_distribution.items()
            },
            "performance": {
                "by_intent": self.performance_by_intent(),
                "latency": {
                    "p50": self.response_time_percentile(50),
                    "p95": self.response_time_percentile(95),
                },
                "hourly_distribution": dict(self.hourly_query_count)
            }
        }
