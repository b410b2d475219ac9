"""
Command Line Interface Package.

Inspection commands for the registered operators and the graphs built from
them.
"""
