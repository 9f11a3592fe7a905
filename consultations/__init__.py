"""Virtual consultation booking backend."""
