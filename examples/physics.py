"""
Example constant table for algebrix.

Named constants are substituted when an expression is evaluated, never
while it is simplified.

Usage:
    algebrix -c examples/physics.py -e "m*c^2" --eval m=2

Or in scripts:
    :constants examples/physics.py
    m*c^2
"""

CONSTANTS = {
    # SI defining constants (exact)
    "c": 299792458,
    "NA": "602214076000000000000000",

    # Conventional values
    "g": "9.80665",
    "atm": 101325,

    # Mathematical
    "tau": "6.2831853071795864769252867666",
    "phi": "1.6180339887498948482045868344",
}
