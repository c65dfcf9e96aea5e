from .level import populate_row, roll_hp

__all__ = ["populate_row", "roll_hp"]
