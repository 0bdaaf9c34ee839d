"""Field overlay engine: analysis layers, legends and pixel lookup for a plot map."""
