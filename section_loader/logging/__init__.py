"""Console logging, JSON Lines error log and spreadsheet audit log."""
