"""
Picross level tooling and browser input bridge.

Packages:
    picross.levels - build-time level authoring (bundle, uuid tags, legacy conversion)
    picross.browser - runtime bridge between the host page and the game layer
"""

__version__ = "0.3.0"
