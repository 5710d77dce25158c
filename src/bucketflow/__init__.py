"""
Bucket flow simulator: water height of a single cylindrical bucket under
configurable inflow and outflow laws.
"""
