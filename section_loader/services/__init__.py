"""Services: normalization, login and workspace selection, row entry and run orchestration."""
