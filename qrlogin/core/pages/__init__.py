"""Static page controllers."""
