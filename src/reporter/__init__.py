"""
SEO ROI Scoring - Report Payloads

Builds the summary and commentary sections report renderers and webhook
senders consume. PDF rendering and delivery are outside this package.
"""

from .summary import build_score_summary, generate_red_flag_commentary

__all__ = [
    "build_score_summary",
    "generate_red_flag_commentary",
]
