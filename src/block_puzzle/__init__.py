"""8x8 block puzzle: game-state engine and Gymnasium environment."""
