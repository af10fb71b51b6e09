"""Bank statement ingestion: schema catalog, detection, row parsing, import."""
