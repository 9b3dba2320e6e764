"""Command-line front end for etpl."""
