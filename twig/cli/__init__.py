"""Command line interface for twig."""
