"""Command line interface for the Daktela V6 connector."""
