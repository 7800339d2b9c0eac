"""Helper files for desktop integration."""
