from socratic_coach.adapters.storage.json_store import JsonStorage

__all__ = ["JsonStorage"]
