"""Framework checkers and the contract they share."""
