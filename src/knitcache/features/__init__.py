"""Feature packages composing the document build."""
