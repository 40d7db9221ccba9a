"""Terminal, browser and logging helpers."""
