"""
The CONTROLLER layer turns frame ticks into fixed physics steps and publishes
sampled state to observers through Qt signals.
"""
