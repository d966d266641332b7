"""Name matching challenge scorer."""
