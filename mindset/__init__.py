"""
Mindset Matching Engine

This package implements the trait model behind mindset-based matching:
users answer a short questionnaire, chat messages nudge the resulting
trait vector, and other users are ranked by how close their vectors are.

Key Design Decisions:
- Six fixed trait dimensions, integer scores clamped to [0, 100]
- Questionnaire answers fold option deltas into a neutral vector
- Chat adjustments are small, fixed per keyword rule, and bounded
- Similarity is 100 minus the mean absolute difference across dimensions
- Every core function is pure; storage belongs to the caller
"""

__version__ = "1.0.0"
