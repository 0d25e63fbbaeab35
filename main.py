from inkpress.main import app

__all__ = ["app"]
