"""Preview rows: merged, deduplicated, column-aligned listing of all marks."""
