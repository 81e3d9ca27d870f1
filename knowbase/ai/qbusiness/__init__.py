"""Amazon Q Business integration."""
