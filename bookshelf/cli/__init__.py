"""Bookshelf command-line interface.

Built with Click and Rich. The entry point is ``bookshelf.cli.main:main``.
"""
