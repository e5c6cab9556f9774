"""
Operational CLI for CobraFácil Push.
"""
