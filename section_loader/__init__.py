"""StreetSaver pavement-section bulk loader.

Reads section rows from a spreadsheet and enters them into the StreetSaver web
application through a Playwright-driven browser session.
"""

__version__ = "0.1.0"
