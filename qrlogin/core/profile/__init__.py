"""Profile cache kept in the browser session."""
