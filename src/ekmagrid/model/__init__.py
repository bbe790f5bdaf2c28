"""
The MODEL layer contains pure data structures.
It has NO knowledge of charts or widgets.
It deals with samples, quads, the grid snapshot and its persistence.
"""
