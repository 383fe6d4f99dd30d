"""Pipeline stages for turning pasted workout text into structured entities."""
