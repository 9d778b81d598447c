from utils.paths import get_path

__all__ = ["get_path"]
