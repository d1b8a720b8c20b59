"""Command line entry point (``python -m section_loader.cli``)."""
