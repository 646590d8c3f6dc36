"""Text and markup helpers used by the extraction pipeline."""
