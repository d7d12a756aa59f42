"""Chilean import duty estimator bot."""
