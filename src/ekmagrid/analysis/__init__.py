"""
The ANALYSIS layer holds the mapping algorithms.
Every function reads an immutable `Grid` and returns a typed result; nothing
here keeps state between calls.
"""
