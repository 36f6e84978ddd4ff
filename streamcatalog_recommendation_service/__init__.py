"""Watch history and hybrid movie recommendations for the streaming catalog."""
