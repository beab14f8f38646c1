"""
Constellation Game Engine
Core rules without web framework or UI: points, segments, triangles, turns, AI.
"""

DICE_SIDES = 6

PLAYERS = (1, 2)

# Phases, in the order a game normally walks through them.
PHASE_MENU = "menu"
PHASE_CONFIGURING = "configuring"
PHASE_ROLLING = "rolling"
PHASE_PLAYING = "playing"
PHASE_GAMEOVER = "gameover"

# Opponent types and AI difficulty tiers.
OPPONENT_HUMAN = "human"
OPPONENT_AI = "ai"
DIFFICULTIES = ("easy", "medium", "hard")
