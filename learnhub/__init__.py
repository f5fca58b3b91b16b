"""learnhub collection membership and aggregation engine."""
