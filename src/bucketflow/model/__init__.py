"""
The MODEL layer contains pure data structures: parameters and the immutable
snapshots handed to observers.
It has NO knowledge of the scheduler or of Qt.
"""
