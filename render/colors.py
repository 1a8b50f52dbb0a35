"""
creature_sim module: render/colors.py

Central color palette.
"""

BG = (12, 15, 25)
FOOD = (120, 220, 120)
FOOD_GLOW = (40, 80, 45)
MATE_INDICATOR = (255, 40, 40)
HUD_TEXT = (235, 235, 235)
