"""
Command-line host of the validator: configuration, reporting, entrypoint.
"""
