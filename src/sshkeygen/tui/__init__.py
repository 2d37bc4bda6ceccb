"""Interactive terminal flow."""
