"""Core building blocks of the cross-device login."""
