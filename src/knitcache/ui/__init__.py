"""User interfaces for knitcache."""
