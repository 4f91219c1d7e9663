""" Fetch and display the release history of AI coding agents from their upstream repositories. """

__version__ = "0.1.0"
