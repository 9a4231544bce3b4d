"""Core repository staging functionality for mvntesttools."""
