"""Design Structure Matrix editing and analysis."""
