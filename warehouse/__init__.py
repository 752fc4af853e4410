"""warehouse - metric history storage on Apache IoTDB."""

__version__ = "1.0.0"
