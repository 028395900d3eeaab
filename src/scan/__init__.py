"""PHP source discovery."""
