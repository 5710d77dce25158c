"""
Physics of the bucket water balance.

Note: This package should be pure Python/NumPy and should NOT import PySide6.
"""
