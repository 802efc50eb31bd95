"""
Shared helpers: logging setup, id generation, XML value conversion.
"""
