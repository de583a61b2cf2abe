"""Tree parsing, tree queries and heuristic predicates."""
