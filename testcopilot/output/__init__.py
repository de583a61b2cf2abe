"""Console, JSON and scorecard renderers."""
