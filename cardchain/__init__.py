"""
CardChain - Turn Resolution Engine for a lane-based card duel

A deterministic simulation of the ledger-side match rules, used by clients to
predict the next game state before the ledger confirms a turn. Provides:
- Card catalog lookup
- Game state model
- Turn resolution (actions + automatic combat)
- Combat outcome analysis
- Combat animation sequencing
"""

__version__ = "0.1.0"
