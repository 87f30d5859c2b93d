"""Board grid, Conway rules and the stepping engine."""
