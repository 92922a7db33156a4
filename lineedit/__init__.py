"""Line-editing building blocks: configuration, errors, in-memory and file history, filename completion, hints, bracket highlighting and key bindings."""

__version__ = "0.1.0"