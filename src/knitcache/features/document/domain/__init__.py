"""Document model and chunk header grammar."""
