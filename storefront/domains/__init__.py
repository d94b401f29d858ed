"""Domain layer (state keys, inventory rules).

Domain modules do no IO; infrastructure clients are passed in by the layers
above.
"""
