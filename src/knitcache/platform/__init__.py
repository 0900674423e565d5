"""Infrastructure shared by knitcache features."""
