"""
terminal-ai: talk to an AI in plain English and let it run shell commands for you.
"""

__version__ = "0.1.0"
