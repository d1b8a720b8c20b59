"""Spreadsheet input and the unmatched-rows report."""
