"""HTTP service exposing Slope One predictions."""
