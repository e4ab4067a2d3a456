"""Compilers from styled rows to terminal and HTML output."""
