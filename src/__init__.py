"""
SEO ROI Scoring Engine

Turns raw marketing-performance measurements into one comparable score:
1. Scores five metrics (authority links, authority domains, traffic growth,
   ranking improvements, AI visibility) on a 1-10 scale
2. Detects red-flag conditions and applies score penalties
3. Aggregates a weighted overall score with ordered recommendations
4. Builds the summary payloads consumed by report and webhook layers
"""

__version__ = "2.0.0"
