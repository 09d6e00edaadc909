"""Recipe client: asks the recipe API for a Hindi recipe and reads it aloud."""
