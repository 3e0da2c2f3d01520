"""Services bound to the troublelog database."""
