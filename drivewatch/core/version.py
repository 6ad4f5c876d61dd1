# (c) Copyright Datacraft, 2026
__version__ = "1.0.0"
