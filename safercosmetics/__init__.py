"""
SaferCosmetics
Cosmetic product safety lookup: notification search, safer alternatives,
company and banned ingredient data.
"""
